"""High-level wiring of one rope visualization."""

from __future__ import annotations

import structlog

from bezier_rope.adapters.input import PointerInputMapper, TiltInputMapper
from bezier_rope.adapters.layout import ViewportLayout
from bezier_rope.config import RopeSettings
from bezier_rope.models import RopeSnapshot
from bezier_rope.physics.curve import CubicCurve
from bezier_rope.physics.spring import DampedSpringPoint
from bezier_rope.physics.vector import Vector2
from bezier_rope.simulation import FrameDriver, SimulationStep

logger = structlog.get_logger()

# Below this damping ratio the rope keeps visibly ringing after each move.
LOW_DAMPING_RATIO = 0.3


class RopeRig:
    """
    Main interface for driving a rope from a platform front end.

    Owns both spring points, the curve, the simulation step and the frame
    driver for the lifetime of one visualization. The front end only
    forwards viewport sizes, input and frame times, and renders snapshots.

    Example:
        ```python
        rig = RopeRig(RopeSettings())
        rig.resize(800, 600)

        # every display refresh
        rig.apply_tilt(pitch=0.1, roll=-0.2)
        rig.frame(1 / 60)
        snapshot = rig.snapshot()
        ```
    """

    def __init__(self, settings: RopeSettings | None = None):
        self.settings = settings or RopeSettings()
        s = self.settings

        self.layout = ViewportLayout(margin=s.margin, lift=s.lift)
        self.tilt_mapper = TiltInputMapper(
            layout=self.layout,
            sensitivity=s.tilt_sensitivity,
            gain=s.input_gain,
        )
        self.pointer_mapper = PointerInputMapper(layout=self.layout, gain=s.input_gain)

        self.point_a = DampedSpringPoint(
            Vector2(), mass=s.mass, stiffness=s.stiffness, damping=s.damping
        )
        self.point_b = DampedSpringPoint(
            Vector2(), mass=s.mass, stiffness=s.stiffness, damping=s.damping
        )
        self.curve = CubicCurve(Vector2(), Vector2(), self.point_a, self.point_b)
        self.simulation = SimulationStep(self.point_a, self.point_b, self.curve)
        self.driver = FrameDriver(
            self.simulation,
            fixed_dt=s.fixed_dt,
            max_frame_dt=s.max_frame_dt,
        )

        self._placed = False

        if self.point_a.damping_ratio < LOW_DAMPING_RATIO:
            logger.warning(
                "Rope is strongly underdamped",
                damping_ratio=round(self.point_a.damping_ratio, 3),
            )

        logger.info(
            "Rope rig created",
            mass=s.mass,
            stiffness=s.stiffness,
            damping=s.damping,
            fixed_dt=s.fixed_dt,
            critical_dt=round(self.point_a.critical_dt, 6),
        )

    @property
    def is_placed(self) -> bool:
        return self._placed

    def resize(self, width: float, height: float) -> None:
        """
        Lay the rope out across a ``width`` x ``height`` viewport.

        The first call also seats both control points at their initial
        positions; later calls only move the anchors and let the springs
        follow their targets.
        """
        p0, p3 = self.layout.anchors(width, height)
        self.curve.anchor_start = p0
        self.curve.anchor_end = p3

        if not self._placed:
            start_a, start_b = self.layout.initial_controls(p0, p3)
            self.point_a.reset(start_a)
            self.point_b.reset(start_b)
            self._placed = True

        logger.info("Rope laid out", width=width, height=height)

    def _set_targets(self, targets: tuple[Vector2, Vector2]) -> None:
        target_a, target_b = targets
        self.point_a.set_target(target_a)
        self.point_b.set_target(target_b)

    def apply_tilt(self, pitch: float, roll: float) -> None:
        """Set targets from device attitude in radians."""
        self._set_targets(self.tilt_mapper.targets(
            pitch, roll, self.curve.anchor_start, self.curve.anchor_end
        ))

    def apply_pointer(self, pointer: Vector2 | None) -> None:
        """Set targets from a drag position, or back to rest when ``None``."""
        self._set_targets(self.pointer_mapper.targets(
            pointer, self.curve.anchor_start, self.curve.anchor_end
        ))

    def frame(self, elapsed: float) -> int:
        """Advance by one display frame. Returns the sub-steps run."""
        if not self._placed:
            raise RuntimeError("resize() must be called before the first frame")
        return self.driver.advance(elapsed)

    def snapshot(self, include_ticks: bool = True) -> RopeSnapshot:
        s = self.settings
        ticks = None
        if include_ticks:
            ticks = self.curve.tangent_ticks(s.tick_spacing, s.tick_length)
        return RopeSnapshot.capture(
            self.curve,
            self.point_a,
            self.point_b,
            sample_steps=s.sample_steps,
            ticks=ticks,
            frame=self.driver.frames,
            simulated_time=self.driver.simulated_time,
        )
