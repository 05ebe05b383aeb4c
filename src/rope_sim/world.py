# MIT License (see LICENSE)
"""
The simulation world and its tick.

The World class owns the particle and constraint stores and is the only
thing that mutates them. It manages:
- Fixed configuration (dt, solver iterations, integrator, boundary).
- The tick (advance_tick):
    1. Accumulate external accelerations (gravity, drag, queued pushes).
    2. Integrate positions (semi-implicit Euler or Verlet).
    3. Relax distance constraints for a fixed number of iterations.
    4. Clamp to the domain and reflect velocities.
- Read-only access for presentation code (snapshots, creation-order
  enumeration).
- Rigid bodies, which are registered here but only change through impulses.

Structure:
    - Caller creates a World.
    - Caller adds particles and constraints.
    - A scheduler calls world.advance_tick() at a fixed cadence and reads
      positions afterwards.
"""
from __future__ import annotations
import logging
import math
from contextlib import nullcontext
from dataclasses import dataclass, field

import numpy as np

from .constraints.solver import solve_distance_constraints, CORRECTION_MODES
from .core.boundary import resolve_bounds
from .core.forces import apply_gravity, apply_acceleration, apply_linear_drag
from .core.integrators import integrate
from .errors import ConfigurationError, Diagnostics
from .profiler import Profiler
from .rigid import RigidBody, get_displacement, apply_displacement
from .store import ParticleStore, ConstraintStore, INTEGRATORS
from .types import ParticleId, ConstraintId, ParticleState, DistanceConstraint
from .util import vec2

logger = logging.getLogger(__name__)


@dataclass
class World:
    """
    Particle/constraint simulation world.

    Attributes:
        dt: Fixed tick length in seconds. Never derived from wall-clock time.
        iterations: Constraint solver passes per tick (1-4 is typical). In
                    position mode more passes give a stiffer rope. In
                    velocity mode each pass adds the same velocity
                    correction again, so the count scales the correction.
        integrator: "euler" (stored velocity) or "verlet" (position history).
        correction: "position" or "velocity". None picks the integrator's
                    natural mode: Verlet corrects positions, Euler corrects
                    velocities.
        position_scale: Strength multiplier used in position mode.
        velocity_scale: Strength multiplier used in velocity mode.
        restitution: Velocity factor on boundary contact (-1.0 = elastic).
        bounds: Domain half-extents (hx, hy), or None for an open domain.
        inset_by_radius: Shrink the domain by each particle's radius.
        gravity: Uniform acceleration applied to every particle.
        drag_c: Linear drag coefficient (0 disables drag).
        profiler: Optional Profiler timing the tick phases.
    """
    dt: float = 1 / 60
    iterations: int = 4
    integrator: str = "verlet"
    correction: str | None = None
    position_scale: float = 1.0
    velocity_scale: float = 2.0
    restitution: float = -1.0
    bounds: tuple[float, float] | None = None
    inset_by_radius: bool = False
    gravity: tuple[float, float] = (0.0, 0.0)
    drag_c: float = 0.0
    profiler: Profiler | None = None

    # Internal state
    bodies: list[RigidBody] = field(default_factory=list)
    tick: int = 0
    time: float = 0.0

    def __post_init__(self) -> None:
        """Validate configuration and create the stores."""
        if not self.dt > 0 or not math.isfinite(self.dt):
            raise ConfigurationError(f"Time step must be positive, got {self.dt}")
        if int(self.iterations) != self.iterations or self.iterations < 0:
            raise ConfigurationError(f"Iteration count must be a non-negative integer, got {self.iterations}")
        if self.integrator not in INTEGRATORS:
            raise ConfigurationError(f"Unknown integrator: {self.integrator}")

        if self.correction is None:
            self.correction = "position" if self.integrator == "verlet" else "velocity"
        if self.correction not in CORRECTION_MODES:
            raise ConfigurationError(f"Unknown correction mode: {self.correction}")
        if self.correction == "velocity" and self.integrator == "verlet":
            raise ConfigurationError("Velocity correction needs the euler integrator; verlet particles have no velocity")

        for name in ("position_scale", "velocity_scale", "restitution", "drag_c"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite, got {getattr(self, name)}")

        self.dt = float(self.dt)
        self.iterations = int(self.iterations)
        self._bounds = self._check_bounds(self.bounds)
        try:
            self._g = vec2(self.gravity, "gravity")
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        self.particles = ParticleStore(integrator=self.integrator, dt=self.dt)
        self.constraints = ConstraintStore()
        self._next_body_id = 1

        logger.info(
            f"World initialized with {self.integrator} integrator "
            f"({self.correction} correction), dt={self.dt}, iterations={self.iterations}"
        )

    @staticmethod
    def _check_bounds(bounds) -> np.ndarray | None:
        if bounds is None:
            return None
        try:
            b = vec2(bounds, "bounds")
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        if np.any(b < 0):
            raise ConfigurationError(f"Bounds must be non-negative half-extents, got {b.tolist()}")
        return b

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def create_particle(self, position, mass: float, radius: float = 0.0,
                        friction: float = 1.0, velocity=None) -> ParticleId:
        """
        Add a particle.

        Raises:
            ConfigurationError: If mass <= 0 or another argument is out of range.
        """
        return self.particles.create(position, mass, radius=radius, friction=friction, velocity=velocity)

    def create_constraint(self, a: int, b: int, rest_length: float, strength: float = 1.0) -> ConstraintId:
        """
        Add a distance constraint between particles a and b.

        Raises:
            ConfigurationError: If a == b or rest_length/strength is out of range.
        """
        return self.constraints.create(a, b, rest_length, strength)

    def add_body(self, body: RigidBody) -> int:
        """
        Register a rigid body and assign it an id.

        Bodies are listed by enumerate_bodies() but never advanced by a tick.
        """
        body.id = self._next_body_id
        self._next_body_id += 1
        self.bodies.append(body)
        logger.debug(f"Added rigid body {body.id} ({type(body.shape).__name__})")
        return body.id

    # -------------------------------------------------------------------------
    # External input
    # -------------------------------------------------------------------------

    def apply_acceleration(self, pid: int, accel) -> None:
        """
        Queue an acceleration for one particle, consumed by the next tick.

        Raises:
            KeyError: If pid is unknown.
        """
        apply_acceleration(self.particles.get(pid), vec2(accel, "acceleration"))

    def apply_impulse(self, body_id: int, point, force) -> None:
        """Push a rigid body at a world point (see rigid.get_displacement)."""
        body = next((b for b in self.bodies if b.id == body_id), None)
        if body is None:
            logger.warning(f"Rigid body {body_id} not found for impulse application")
            return
        ft = get_displacement(body, point, force)
        apply_displacement(body, ft)
        logger.debug(f"Applied impulse {ft.force.tolist()} (torque {ft.torque}) to body {body_id}")

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def _section(self, name: str):
        if self.profiler is None:
            return nullcontext()
        return self.profiler.section(name)

    def advance_tick(self, dt: float | None = None, iterations: int | None = None,
                     bounds=None) -> Diagnostics:
        """
        Advance the simulation by one tick.

        Args:
            dt: Tick length. Defaults to the configured dt. A value different
                from the configured one is allowed but makes trajectories
                depend on the caller.
            iterations: Solver passes. Defaults to the configured count.
            bounds: Domain half-extents for this tick. Defaults to the
                    configured bounds; None in both places means no boundary.

        Returns:
            Diagnostics listing constraints skipped during the tick.

        Raises:
            ConfigurationError: If dt or iterations is negative. Raised before
                                any state is touched.
        """
        dt = self.dt if dt is None else float(dt)
        iterations = self.iterations if iterations is None else iterations
        if not dt >= 0 or not math.isfinite(dt):
            raise ConfigurationError(f"Time step must be non-negative, got {dt}")
        if int(iterations) != iterations or iterations < 0:
            raise ConfigurationError(f"Iteration count must be a non-negative integer, got {iterations}")
        iterations = int(iterations)
        domain = self._bounds if bounds is None else self._check_bounds(bounds)

        with self._section("forces"):
            for p in self.particles:
                apply_gravity(p, self._g)
                apply_linear_drag(p, self.drag_c, dt)

        with self._section("integrate"):
            integrate(self.particles, dt, self.integrator)

        with self._section("solve"):
            scale = self.position_scale if self.correction == "position" else self.velocity_scale
            faults, degenerate = solve_distance_constraints(
                self.particles, self.constraints, iterations,
                correction=self.correction, scale=scale,
            )

        if domain is not None:
            with self._section("bounds"):
                resolve_bounds(self.particles, domain, self.restitution, self.inset_by_radius)

        for p in self.particles:
            p.clear_acceleration()

        self.tick += 1
        self.time += dt
        self._validate_state()
        return Diagnostics(tick=self.tick, faults=faults, degenerate=degenerate)

    def _validate_state(self) -> None:
        """Log particles whose state became non-finite."""
        for pid, p in self.particles.items():
            if not np.all(np.isfinite(p.position)):
                logger.error(f"Non-finite position in particle {pid} at tick {self.tick}")

    # -------------------------------------------------------------------------
    # Read-only access
    # -------------------------------------------------------------------------

    def get_particle(self, pid: int) -> ParticleState:
        """Snapshot of one particle. Raises KeyError if pid is unknown."""
        return self.particles.get(pid).snapshot()

    def enumerate_particles(self) -> list[tuple[ParticleId, ParticleState]]:
        """All particles as (id, snapshot), in creation order."""
        return [(pid, p.snapshot()) for pid, p in self.particles.items()]

    def enumerate_constraints(self) -> list[tuple[ConstraintId, DistanceConstraint]]:
        """All constraints as (id, constraint), in creation order."""
        return list(self.constraints.items())

    def enumerate_bodies(self) -> list[RigidBody]:
        """Registered rigid bodies in registration order."""
        return list(self.bodies)

    def debug_info(self) -> dict:
        """Counters for overlays and logs."""
        return {
            "tick": self.tick,
            "time": self.time,
            "dt": self.dt,
            "particles": len(self.particles),
            "constraints": len(self.constraints),
            "bodies": len(self.bodies),
        }
