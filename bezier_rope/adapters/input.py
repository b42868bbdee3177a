"""
Input mappers: raw stimulus to spring targets.

Both mappers displace the resting control points by a scaled offset. Tilt
uses device attitude (radians), pointer uses the drag position relative to
the middle of the resting controls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from bezier_rope.adapters.layout import ViewportLayout
from bezier_rope.physics.vector import Vector2


def _check_finite(**values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")


@dataclass
class TiltInputMapper:
    """
    Maps device pitch/roll to targets.

    Roll (tilt left/right) moves the targets along x, pitch (tilt
    forward/back) moves them along -y.
    """

    layout: ViewportLayout = field(default_factory=ViewportLayout)
    sensitivity: float = 250.0
    gain: float = 0.6

    def offset(self, pitch: float, roll: float) -> Vector2:
        _check_finite(pitch=pitch, roll=roll)
        return Vector2(roll * self.sensitivity, -pitch * self.sensitivity)

    def targets(
        self,
        pitch: float,
        roll: float,
        p0: Vector2,
        p3: Vector2,
    ) -> tuple[Vector2, Vector2]:
        shift = self.offset(pitch, roll) * self.gain
        base_a, base_b = self.layout.rest_controls(p0, p3)
        return base_a + shift, base_b + shift


@dataclass
class PointerInputMapper:
    """Maps a drag position to targets; a released pointer returns to rest."""

    layout: ViewportLayout = field(default_factory=ViewportLayout)
    gain: float = 0.6

    def targets(
        self,
        pointer: Vector2 | None,
        p0: Vector2,
        p3: Vector2,
    ) -> tuple[Vector2, Vector2]:
        base_a, base_b = self.layout.rest_controls(p0, p3)
        if pointer is None:
            return base_a, base_b

        _check_finite(pointer_x=pointer.x, pointer_y=pointer.y)
        center = (base_a + base_b) * 0.5
        shift = (pointer - center) * self.gain
        return base_a + shift, base_b + shift
