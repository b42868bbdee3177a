"""
Frame orchestration for the rope.

``SimulationStep`` advances both spring points by the same ``dt``; the curve
reads their positions live, so it is up to date as soon as ``tick`` returns.

``FrameDriver`` is the frame clock side: it turns variable wall-clock frame
times into fixed sub-steps, which keeps integration reproducible and inside
the integrator's stability limit.
"""

from __future__ import annotations

import math

import structlog

from bezier_rope.physics.curve import CubicCurve
from bezier_rope.physics.spring import DampedSpringPoint

logger = structlog.get_logger(__name__)

DEFAULT_FIXED_DT = 1.0 / 60.0
DEFAULT_MAX_FRAME_DT = 0.1


class SimulationStep:
    """Advances the two dynamic control points of one curve."""

    def __init__(
        self,
        point_a: DampedSpringPoint,
        point_b: DampedSpringPoint,
        curve: CubicCurve,
    ):
        self.point_a = point_a
        self.point_b = point_b
        self.curve = curve

    @property
    def points(self) -> tuple[DampedSpringPoint, DampedSpringPoint]:
        return (self.point_a, self.point_b)

    def tick(self, dt: float) -> None:
        """
        Step both points by ``dt``.

        The springs are independent, so the order does not matter. A
        non-finite or non-positive ``dt`` is a no-op in both points.
        """
        self.point_a.step(dt)
        self.point_b.step(dt)


class FrameDriver:
    """
    Fixed-step accumulator in front of ``SimulationStep.tick``.

    Each frame's elapsed time is clamped to ``max_frame_dt`` (so a long stall
    does not trigger a burst of catch-up steps) and added to an accumulator;
    ``tick(fixed_dt)`` then runs once per whole ``fixed_dt`` available. The
    remainder carries over to the next frame.
    """

    def __init__(
        self,
        simulation: SimulationStep,
        fixed_dt: float = DEFAULT_FIXED_DT,
        max_frame_dt: float = DEFAULT_MAX_FRAME_DT,
    ):
        """
        Args:
            simulation: The step to drive
            fixed_dt: Integration step in seconds
            max_frame_dt: Upper bound on the elapsed time taken from one frame

        Raises:
            ValueError: If the steps are non-positive, or ``fixed_dt`` is not
                below the stability limit of both points
        """
        if not math.isfinite(fixed_dt) or fixed_dt <= 0:
            raise ValueError(f"fixed_dt must be a finite value > 0, got {fixed_dt}")
        if not math.isfinite(max_frame_dt) or max_frame_dt <= 0:
            raise ValueError(f"max_frame_dt must be a finite value > 0, got {max_frame_dt}")

        limit = min(point.critical_dt for point in simulation.points)
        if fixed_dt >= limit:
            raise ValueError(
                f"fixed_dt {fixed_dt:.6f}s is not below the stability limit {limit:.6f}s"
            )

        self.simulation = simulation
        self.fixed_dt = fixed_dt
        self.max_frame_dt = max_frame_dt

        self._accumulator = 0.0
        self.frames = 0
        self.substeps = 0

    @property
    def simulated_time(self) -> float:
        return self.substeps * self.fixed_dt

    @property
    def alpha(self) -> float:
        """Fraction of a step left in the accumulator, in [0, 1)."""
        return self._accumulator / self.fixed_dt

    def advance(self, elapsed: float) -> int:
        """
        Consume one frame's elapsed time.

        Returns:
            Number of fixed sub-steps run
        """
        if not math.isfinite(elapsed) or elapsed <= 0:
            logger.debug("Ignoring frame time", elapsed=elapsed)
            return 0

        if elapsed > self.max_frame_dt:
            logger.debug(
                "Clamping frame time",
                elapsed=elapsed,
                max_frame_dt=self.max_frame_dt,
            )
            elapsed = self.max_frame_dt

        self._accumulator += elapsed
        steps = 0
        while self._accumulator >= self.fixed_dt:
            self.simulation.tick(self.fixed_dt)
            self._accumulator -= self.fixed_dt
            steps += 1

        self.frames += 1
        self.substeps += steps
        return steps

    def reset(self) -> None:
        """Drop any accumulated remainder and counters."""
        self._accumulator = 0.0
        self.frames = 0
        self.substeps = 0
