"""Serializable snapshots of a rope, for export and display."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from bezier_rope.physics.curve import CubicCurve, TangentTick
from bezier_rope.physics.spring import DampedSpringPoint

Point = tuple[float, float]

# Distance (points) and speed (points/s) below which a control point counts as at rest.
SETTLE_DISTANCE = 0.1
SETTLE_SPEED = 0.5


class ControlPointState(BaseModel):
    """State of one spring-driven control point."""

    position: Point
    velocity: Point
    target: Point
    distance_to_target: float
    speed: float = 0.0

    @classmethod
    def from_point(cls, point: DampedSpringPoint) -> ControlPointState:
        return cls(
            position=point.position.as_tuple(),
            velocity=point.velocity.as_tuple(),
            target=point.target.as_tuple(),
            distance_to_target=point.position.distance_to(point.target),
            speed=point.velocity.magnitude(),
        )


class TickSegment(BaseModel):
    t: float
    start: Point
    end: Point

    @classmethod
    def from_tick(cls, tick: TangentTick) -> TickSegment:
        return cls(t=tick.t, start=tick.start.as_tuple(), end=tick.end.as_tuple())


class RopeSnapshot(BaseModel):
    """
    Everything a renderer needs for one frame.

    ``samples`` is the polyline, ``ticks`` the optional tangent markers.
    """

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=datetime.now)

    frame: int = 0
    simulated_time: float = 0.0

    anchor_start: Point
    anchor_end: Point
    control_a: ControlPointState
    control_b: ControlPointState

    samples: list[Point] = Field(default_factory=list)
    ticks: list[TickSegment] = Field(default_factory=list)

    @property
    def is_settled(self) -> bool:
        return self.settled()

    def settled(
        self,
        tolerance: float = SETTLE_DISTANCE,
        speed_tolerance: float = SETTLE_SPEED,
    ) -> bool:
        """Both points rest near their targets; passing through one does not count."""
        return all(
            state.distance_to_target < tolerance and state.speed < speed_tolerance
            for state in (self.control_a, self.control_b)
        )

    @classmethod
    def capture(
        cls,
        curve: CubicCurve,
        point_a: DampedSpringPoint,
        point_b: DampedSpringPoint,
        sample_steps: int,
        ticks: list[TangentTick] | None = None,
        frame: int = 0,
        simulated_time: float = 0.0,
    ) -> RopeSnapshot:
        return cls(
            frame=frame,
            simulated_time=simulated_time,
            anchor_start=curve.anchor_start.as_tuple(),
            anchor_end=curve.anchor_end.as_tuple(),
            control_a=ControlPointState.from_point(point_a),
            control_b=ControlPointState.from_point(point_b),
            samples=[p.as_tuple() for p in curve.sample(sample_steps)],
            ticks=[TickSegment.from_tick(t) for t in ticks or []],
        )
