"""
Damped spring integrator for the rope's movable control points.

Each point is pulled toward a target by a force proportional to its
displacement (spring) and slowed by a force proportional to its velocity
(damper):

    a = (-k * (x - target) - c * v) / m

and advanced with semi-implicit (symplectic) Euler:

    v <- v + a * dt
    x <- x + v * dt

Stability:
    The integrator is only conditionally stable. For a given mass, stiffness
    and damping there is a critical step (``DampedSpringPoint.critical_dt``)
    above which oscillations grow instead of decaying. The point never clamps
    ``dt`` itself; whoever drives the frame loop must clamp or sub-step
    (see ``bezier_rope.simulation.FrameDriver``).
"""

from __future__ import annotations

import math

import structlog

from bezier_rope.physics.vector import Vector2

logger = structlog.get_logger(__name__)

DEFAULT_MASS = 1.0
DEFAULT_STIFFNESS = 80.0
DEFAULT_DAMPING = 14.0


def critical_damping(stiffness: float, mass: float) -> float:
    """Damping coefficient at which the spring settles without overshoot."""
    if mass <= 0:
        raise ValueError(f"mass must be > 0, got {mass}")
    if stiffness < 0:
        raise ValueError(f"stiffness must be >= 0, got {stiffness}")
    return 2.0 * math.sqrt(stiffness * mass)


class DampedSpringPoint:
    """
    One movable anchor of the rope.

    ``target`` is reassigned by the input mapper every frame. ``position``
    and ``velocity`` are read-only from the outside and change only inside
    ``step``.

    Example:
        ```python
        point = DampedSpringPoint(Vector2(50, -50))
        point.set_target(Vector2(50, -100))
        for _ in range(60):
            point.step(1 / 60)
        ```
    """

    def __init__(
        self,
        position: Vector2,
        mass: float = DEFAULT_MASS,
        stiffness: float = DEFAULT_STIFFNESS,
        damping: float = DEFAULT_DAMPING,
    ):
        """
        Create a point at rest on its own target.

        Args:
            position: Initial position, also used as the first target
            mass: Point mass, must be > 0
            stiffness: Spring constant k, must be >= 0
            damping: Damper coefficient c, must be >= 0

        Raises:
            ValueError: If any physical parameter is out of range
        """
        if not math.isfinite(mass) or mass <= 0:
            raise ValueError(f"mass must be a finite value > 0, got {mass}")
        if not math.isfinite(stiffness) or stiffness < 0:
            raise ValueError(f"stiffness must be a finite value >= 0, got {stiffness}")
        if not math.isfinite(damping) or damping < 0:
            raise ValueError(f"damping must be a finite value >= 0, got {damping}")

        self.mass = float(mass)
        self.stiffness = float(stiffness)
        self.damping = float(damping)

        self._position = position
        self._velocity = Vector2()
        self.target = position

    def __repr__(self) -> str:
        return (
            f"DampedSpringPoint(position={self._position!r}, "
            f"velocity={self._velocity!r}, target={self.target!r})"
        )

    @property
    def position(self) -> Vector2:
        return self._position

    @property
    def velocity(self) -> Vector2:
        return self._velocity

    @property
    def damping_ratio(self) -> float:
        """c / c_critical; 1.0 is critical, below 1.0 overshoots."""
        if self.stiffness == 0:
            return math.inf
        return self.damping / critical_damping(self.stiffness, self.mass)

    @property
    def critical_dt(self) -> float:
        """
        Time step above which the integrator diverges.

        Derived from the Jury conditions of the semi-implicit Euler update
        matrix: ``k*dt^2 + 2*c*dt < 4*m``. Below it a damped point decays;
        an undamped one (``c == 0``) stays bounded but keeps oscillating.
        Without damping the limit reduces to ``2 * sqrt(m / k)``.
        """
        k, c, m = self.stiffness, self.damping, self.mass
        if k > 0:
            return (-c + math.sqrt(c * c + 4.0 * k * m)) / k
        if c > 0:
            return 2.0 * m / c
        return math.inf

    def set_target(self, target: Vector2) -> None:
        """Move the equilibrium point. Takes effect on the next ``step``."""
        self.target = target

    def reset(self, position: Vector2) -> None:
        """Seat the point at rest on ``position`` (target follows)."""
        self._position = position
        self._velocity = Vector2()
        self.target = position

    def step(self, dt: float) -> None:
        """
        Advance one semi-implicit Euler step.

        A non-finite or non-positive ``dt`` leaves the state untouched so
        that a stalled frame clock cannot corrupt it.
        """
        if not math.isfinite(dt) or dt <= 0:
            logger.debug("Ignoring time step", dt=dt)
            return

        displacement = self._position - self.target
        acceleration = (
            displacement * -self.stiffness - self._velocity * self.damping
        ) / self.mass

        self._velocity = self._velocity + acceleration * dt
        self._position = self._position + self._velocity * dt
