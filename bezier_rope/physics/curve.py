"""
Cubic Bezier evaluation for the rope.

The two endpoints are fixed anchors owned by the curve. The two inner control
points are borrowed from objects exposing a ``position`` (normally the spring
points) and are re-read on every evaluation, so the curve always reflects the
latest physics state without owning it.

    B(t)  = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3
    B'(t) = 3(1-t)^2 (P1-P0) + 6(1-t) t (P2-P1) + 3 t^2 (P3-P2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Protocol

from bezier_rope.physics.vector import Vector2


class PositionSource(Protocol):
    """Anything the curve can read a control point position from."""

    @property
    def position(self) -> Vector2: ...


@dataclass(frozen=True)
class FixedPoint:
    """Static position source, for curves whose inner points do not move."""

    position: Vector2


@dataclass(frozen=True)
class TangentTick:
    """Short segment centered on the curve, aligned with its direction."""

    t: float
    start: Vector2
    end: Vector2


class CurveSamples:
    """
    Restartable lazy sequence of evenly spaced curve positions.

    Positions are computed while iterating, from the curve's state at that
    moment. Iterating twice over an unchanged curve yields the same points.
    """

    def __init__(self, curve: CubicCurve, step_count: int):
        if step_count < 1:
            raise ValueError(f"step_count must be >= 1, got {step_count}")
        self._curve = curve
        self._step_count = step_count

    def __len__(self) -> int:
        return self._step_count + 1

    def __iter__(self) -> Iterator[Vector2]:
        for i in range(self._step_count + 1):
            yield self._curve.position(i / self._step_count)

    def parameters(self) -> list[float]:
        return [i / self._step_count for i in range(self._step_count + 1)]


class CubicCurve:
    """
    Cubic Bezier with fixed anchors and live inner control points.

    Any ``t`` is accepted; values outside [0, 1] extrapolate the polynomial.
    """

    def __init__(
        self,
        anchor_start: Vector2,
        anchor_end: Vector2,
        control_a: PositionSource,
        control_b: PositionSource,
    ):
        self.anchor_start = anchor_start
        self.anchor_end = anchor_end
        self._control_a = control_a
        self._control_b = control_b

    @property
    def control_a(self) -> PositionSource:
        return self._control_a

    @property
    def control_b(self) -> PositionSource:
        return self._control_b

    def control_polygon(self) -> tuple[Vector2, Vector2, Vector2, Vector2]:
        """Current (P0, P1, P2, P3)."""
        return (
            self.anchor_start,
            self._control_a.position,
            self._control_b.position,
            self.anchor_end,
        )

    def position(self, t: float) -> Vector2:
        p0, p1, p2, p3 = self.control_polygon()
        u = 1.0 - t
        b0 = u * u * u
        b1 = 3.0 * u * u * t
        b2 = 3.0 * u * t * t
        b3 = t * t * t
        return Vector2(
            b0 * p0.x + b1 * p1.x + b2 * p2.x + b3 * p3.x,
            b0 * p0.y + b1 * p1.y + b2 * p2.y + b3 * p3.y,
        )

    def tangent(self, t: float) -> Vector2:
        """
        First derivative dB/dt.

        May be the zero vector on degenerate configurations; callers that
        normalize should use ``unit_tangent``.
        """
        p0, p1, p2, p3 = self.control_polygon()
        u = 1.0 - t
        c1 = 3.0 * u * u
        c2 = 6.0 * u * t
        c3 = 3.0 * t * t
        return Vector2(
            c1 * (p1.x - p0.x) + c2 * (p2.x - p1.x) + c3 * (p3.x - p2.x),
            c1 * (p1.y - p0.y) + c2 * (p2.y - p1.y) + c3 * (p3.y - p2.y),
        )

    def unit_tangent(self, t: float, fallback: Vector2 | None = None) -> Vector2:
        """Normalized tangent, or ``fallback`` (zero vector) if it has no length."""
        d = self.tangent(t)
        length = d.magnitude()
        if length == 0:
            return fallback if fallback is not None else Vector2()
        return d / length

    def sample(self, step_count: int) -> CurveSamples:
        """``step_count + 1`` positions at t = 0, 1/step_count, ..., 1."""
        return CurveSamples(self, step_count)

    def tangent_ticks(self, spacing: float = 0.05, length: float = 24.0) -> list[TangentTick]:
        """
        Direction markers along the curve.

        Args:
            spacing: Parameter distance between ticks, in (0, 1]
            length: Full length of each tick segment

        Returns:
            One tick per parameter value where the tangent is non-zero
        """
        if not 0 < spacing <= 1:
            raise ValueError(f"spacing must be in (0, 1], got {spacing}")

        half = length / 2.0
        count = int(1.0 / spacing + 1e-9)
        ticks = []
        for i in range(count + 1):
            t = i * spacing
            d = self.tangent(t)
            if d.magnitude() == 0:
                continue
            direction = d.normalized()
            center = self.position(t)
            ticks.append(TangentTick(
                t=t,
                start=center - direction * half,
                end=center + direction * half,
            ))
        return ticks
