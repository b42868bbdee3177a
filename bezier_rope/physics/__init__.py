"""
Numerical core of the rope: spring integration and Bezier evaluation.

Pure arithmetic, no drawing and no clock.
"""

from bezier_rope.physics.vector import Vector2, lerp
from bezier_rope.physics.spring import DampedSpringPoint, critical_damping
from bezier_rope.physics.curve import (
    CubicCurve,
    CurveSamples,
    FixedPoint,
    PositionSource,
    TangentTick,
)

__all__ = [
    "Vector2",
    "lerp",
    "DampedSpringPoint",
    "critical_damping",
    "CubicCurve",
    "CurveSamples",
    "FixedPoint",
    "PositionSource",
    "TangentTick",
]
