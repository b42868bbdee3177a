"""Viewport layout: where the anchors and resting control points go."""

from __future__ import annotations

import math
from dataclasses import dataclass

from bezier_rope.physics.vector import Vector2, lerp

# Fractions of the anchor span where the control points rest.
REST_FRACTION_A = 0.33
REST_FRACTION_B = 0.66


@dataclass
class ViewportLayout:
    """
    Places the rope horizontally across a viewport.

    Screen coordinates: y grows downward, so ``lift`` moves the control
    points up.
    """

    margin: float = 60.0
    lift: float = 120.0

    def anchors(self, width: float, height: float) -> tuple[Vector2, Vector2]:
        """Fixed endpoints on the vertical middle, ``margin`` in from each side."""
        if not (math.isfinite(width) and math.isfinite(height)):
            raise ValueError(f"viewport size must be finite, got {width}x{height}")
        if width <= 2 * self.margin or height <= 0:
            raise ValueError(
                f"viewport {width}x{height} leaves no room between {self.margin} margins"
            )
        mid_y = height / 2.0
        return Vector2(self.margin, mid_y), Vector2(width - self.margin, mid_y)

    def rest_controls(self, p0: Vector2, p3: Vector2) -> tuple[Vector2, Vector2]:
        """Neutral targets, a third and two thirds along the span."""
        return (
            Vector2(lerp(p0.x, p3.x, REST_FRACTION_A), p0.y - self.lift),
            Vector2(lerp(p0.x, p3.x, REST_FRACTION_B), p3.y - self.lift),
        )

    def initial_controls(self, p0: Vector2, p3: Vector2) -> tuple[Vector2, Vector2]:
        """First placement of the control points, a quarter in from each end."""
        mid_x = (p0.x + p3.x) / 2.0
        return (
            Vector2(lerp(p0.x, mid_x, 0.5), p0.y - self.lift),
            Vector2(lerp(mid_x, p3.x, 0.5), p3.y - self.lift),
        )
