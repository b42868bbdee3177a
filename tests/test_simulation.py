"""
Tests for frame orchestration: SimulationStep and FrameDriver.
"""

import math

import pytest

from bezier_rope.physics.curve import CubicCurve
from bezier_rope.physics.spring import DampedSpringPoint
from bezier_rope.physics.vector import Vector2
from bezier_rope.simulation import FrameDriver, SimulationStep


def make_simulation(**params) -> SimulationStep:
    """Rope from (0, 0) to (100, 0) with both control points at (50, -50)."""
    a = DampedSpringPoint(Vector2(50, -50), **params)
    b = DampedSpringPoint(Vector2(50, -50), **params)
    curve = CubicCurve(Vector2(0, 0), Vector2(100, 0), a, b)
    return SimulationStep(a, b, curve)


def pull(sim: SimulationStep, target: Vector2) -> None:
    sim.point_a.set_target(target)
    sim.point_b.set_target(target)


class TestSimulationStep:
    """Tests for SimulationStep.tick."""

    def test_tick_steps_both_points_with_same_dt(self):
        """tick(dt) is equivalent to stepping each point by dt."""
        sim = make_simulation()
        sim.point_a.set_target(Vector2(20, -80))
        sim.point_b.set_target(Vector2(80, -20))

        ref_a = DampedSpringPoint(Vector2(50, -50))
        ref_b = DampedSpringPoint(Vector2(50, -50))
        ref_a.set_target(Vector2(20, -80))
        ref_b.set_target(Vector2(80, -20))

        for _ in range(30):
            sim.tick(1 / 60)
            ref_a.step(1 / 60)
            ref_b.step(1 / 60)

        assert sim.point_a.position == ref_a.position
        assert sim.point_b.position == ref_b.position

    def test_tick_zero_changes_nothing(self):
        sim = make_simulation()
        pull(sim, Vector2(50, -100))
        sim.tick(1 / 60)
        before = (sim.point_a.position, sim.point_b.position)

        sim.tick(0)

        assert (sim.point_a.position, sim.point_b.position) == before

    @pytest.mark.parametrize("dt", [-1.0, math.nan])
    def test_tick_invalid_dt_is_noop(self, dt):
        sim = make_simulation()
        pull(sim, Vector2(50, -100))
        sim.tick(1 / 60)
        a_pos, a_vel = sim.point_a.position, sim.point_a.velocity

        sim.tick(dt)

        assert sim.point_a.position is a_pos
        assert sim.point_a.velocity is a_vel

    def test_tick_returns_none(self):
        assert make_simulation().tick(1 / 60) is None

    def test_curve_is_current_after_tick(self):
        """The curve reads positions live; no refresh step is needed."""
        sim = make_simulation()
        before = sim.curve.position(0.5)
        pull(sim, Vector2(50, -100))

        sim.tick(1 / 60)

        after = sim.curve.position(0.5)
        assert after.y < before.y
        assert sim.curve.position(0) == Vector2(0, 0)
        assert sim.curve.position(1) == Vector2(100, 0)

    def test_settling_scenario(self):
        """Both points settle on a new target and stay there."""
        sim = make_simulation(mass=1, stiffness=80, damping=14)
        target = Vector2(50, -100)
        pull(sim, target)

        for _ in range(1000):
            sim.tick(1 / 60)

        for _ in range(100):
            sim.tick(1 / 60)
            assert sim.point_a.position.distance_to(target) < 0.1
            assert sim.point_b.position.distance_to(target) < 0.1


class TestFrameDriver:
    """Tests for FrameDriver fixed-step sub-stepping."""

    def test_driver_creation(self):
        driver = FrameDriver(make_simulation())
        assert driver.fixed_dt == pytest.approx(1 / 60)
        assert driver.max_frame_dt == pytest.approx(0.1)
        assert driver.frames == 0
        assert driver.substeps == 0

    def test_one_step_per_nominal_frame(self):
        driver = FrameDriver(make_simulation(), fixed_dt=1 / 60)
        for _ in range(10):
            assert driver.advance(1 / 60) == 1

        assert driver.frames == 10
        assert driver.substeps == 10
        assert driver.simulated_time == pytest.approx(10 / 60)
        assert driver.alpha == 0.0

    def test_remainder_carries_over(self):
        """Partial steps accumulate across frames."""
        driver = FrameDriver(make_simulation(), fixed_dt=1 / 60)

        assert driver.advance(0.04) == 2
        assert driver.alpha == pytest.approx(0.4)

        assert driver.advance(0.015) == 1
        assert driver.alpha == pytest.approx(0.3)

    def test_long_frames_are_clamped(self):
        """A stall is clamped to max_frame_dt instead of replayed in full."""
        driver = FrameDriver(make_simulation(), fixed_dt=0.02, max_frame_dt=0.25)

        assert driver.advance(1.0) == 12
        assert driver.alpha == pytest.approx(0.5)

    @pytest.mark.parametrize("elapsed", [0.0, -0.5, math.nan, math.inf])
    def test_invalid_elapsed_is_ignored(self, elapsed):
        sim = make_simulation()
        pull(sim, Vector2(50, -100))
        driver = FrameDriver(sim)
        position = sim.point_a.position

        assert driver.advance(elapsed) == 0
        assert driver.frames == 0
        assert sim.point_a.position is position

    def test_matches_direct_ticks(self):
        """Driving at the nominal rate reproduces plain tick() calls exactly."""
        driven = make_simulation()
        direct = make_simulation()
        pull(driven, Vector2(10, -90))
        pull(direct, Vector2(10, -90))

        driver = FrameDriver(driven, fixed_dt=1 / 60)
        for _ in range(120):
            driver.advance(1 / 60)
            direct.tick(1 / 60)

        assert driven.point_a.position == direct.point_a.position
        assert driven.point_b.velocity == direct.point_b.velocity

    def test_irregular_frames_still_settle(self):
        sim = make_simulation()
        target = Vector2(50, -100)
        pull(sim, target)
        driver = FrameDriver(sim)

        for elapsed in [0.016, 0.033, 0.5, 0.008, 0.017] * 200:
            driver.advance(elapsed)

        assert sim.point_a.position.distance_to(target) < 0.1

    @pytest.mark.parametrize("fixed_dt", [0.0, -1 / 60, math.nan])
    def test_rejects_invalid_fixed_dt(self, fixed_dt):
        with pytest.raises(ValueError, match="fixed_dt"):
            FrameDriver(make_simulation(), fixed_dt=fixed_dt)

    def test_rejects_unstable_fixed_dt(self):
        """The fixed step must sit below the springs' stability limit."""
        sim = make_simulation(stiffness=80, damping=14)
        with pytest.raises(ValueError, match="stability limit"):
            FrameDriver(sim, fixed_dt=0.2)

    def test_rejects_invalid_max_frame_dt(self):
        with pytest.raises(ValueError, match="max_frame_dt"):
            FrameDriver(make_simulation(), max_frame_dt=0)

    def test_reset(self):
        driver = FrameDriver(make_simulation())
        driver.advance(0.03)
        driver.reset()
        assert driver.frames == 0
        assert driver.substeps == 0
        assert driver.alpha == 0.0
