"""
Bezier Rope

An elastic cubic curve whose inner control points follow pointer or tilt
input through damped springs. Headless engine plus thin adapters.
"""

from bezier_rope.physics import CubicCurve, DampedSpringPoint, Vector2
from bezier_rope.simulation import FrameDriver, SimulationStep
from bezier_rope.config import RopeSettings
from bezier_rope.models import RopeSnapshot
from bezier_rope.rig import RopeRig

__version__ = "0.1.0"

__all__ = [
    # Core
    "DampedSpringPoint",
    "CubicCurve",
    "Vector2",
    "SimulationStep",
    "FrameDriver",
    # Wiring
    "RopeRig",
    "RopeSettings",
    "RopeSnapshot",
]
