# MIT License (see LICENSE)
"""
Dense, index-addressed containers for particles and constraints.

Both stores hand out integer ids equal to the creation index. Lookups are
O(1) list indexing and enumeration always follows creation order, which the
solver relies on for reproducible results.
"""
from __future__ import annotations
import logging
import math
from typing import Iterator

import numpy as np

from .errors import ConfigurationError
from .types import Particle, DistanceConstraint, ParticleId, ConstraintId
from .util import vec2

logger = logging.getLogger(__name__)

INTEGRATORS = ("euler", "verlet")


class ParticleStore:
    """
    Creation-ordered particle container.

    The integration mode decides which history field new particles carry:
    "euler" particles store a velocity, "verlet" particles store their
    previous position.
    """

    def __init__(self, integrator: str = "euler", dt: float = 1 / 60) -> None:
        if integrator not in INTEGRATORS:
            raise ConfigurationError(f"Unknown integrator: {integrator}")
        self.integrator = integrator
        self.dt = float(dt)
        self._items: list[Particle] = []

    def create(
        self,
        position,
        mass: float,
        radius: float = 0.0,
        friction: float = 1.0,
        velocity=None,
    ) -> ParticleId:
        """
        Add a particle and return its id.

        Args:
            position: Initial position [x, y].
            mass: Must be > 0.
            radius: Must be >= 0.
            friction: Damping factor in (0, 1].
            velocity: Optional initial velocity. Verlet particles encode it as
                      previous_position = position - velocity * dt.

        Raises:
            ConfigurationError: If any argument violates its range. The store
                                is left unchanged.
        """
        mass = float(mass)
        radius = float(radius)
        friction = float(friction)
        if not mass > 0 or not math.isfinite(mass):
            raise ConfigurationError(f"Particle mass must be positive, got {mass}")
        if not radius >= 0:
            raise ConfigurationError(f"Particle radius must be non-negative, got {radius}")
        if not 0.0 < friction <= 1.0:
            raise ConfigurationError(f"Particle friction must be in (0, 1], got {friction}")
        try:
            pos = vec2(position, "position")
            vel = vec2((0.0, 0.0) if velocity is None else velocity, "velocity")
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if self.integrator == "euler":
            p = Particle(position=pos, mass=mass, radius=radius, friction=friction, velocity=vel)
        else:
            p = Particle(
                position=pos, mass=mass, radius=radius, friction=friction,
                previous_position=pos - vel * self.dt,
            )

        pid = ParticleId(len(self._items))
        self._items.append(p)
        logger.debug(f"Created particle {pid} at {pos.tolist()} (mass={mass})")
        return pid

    def get(self, pid: int) -> Particle:
        """Return the live particle for pid. Raises KeyError if unknown."""
        if not 0 <= pid < len(self._items):
            raise KeyError(pid)
        return self._items[pid]

    def set(self, pid: int, particle: Particle) -> None:
        """Replace the particle stored under an existing id."""
        if not 0 <= pid < len(self._items):
            raise KeyError(pid)
        if not particle.mass > 0:
            raise ConfigurationError(f"Particle mass must be positive, got {particle.mass}")
        self._items[pid] = particle

    def get_pair(self, a: int, b: int) -> tuple[Particle, Particle]:
        """
        Fetch two distinct particles at once.

        Raises:
            ValueError: If a == b.
            KeyError: If either id is unknown.
        """
        if a == b:
            raise ValueError(f"get_pair requires distinct ids, got {a} twice")
        return self.get(a), self.get(b)

    def missing(self, *pids: int) -> tuple[int, ...]:
        """Return the subset of pids that are not in the store."""
        n = len(self._items)
        return tuple(pid for pid in pids if not 0 <= pid < n)

    def items(self) -> Iterator[tuple[ParticleId, Particle]]:
        """Yield (id, particle) pairs in creation order."""
        for i, p in enumerate(self._items):
            yield ParticleId(i), p

    def positions(self) -> np.ndarray:
        """Stack all positions into an [N, 2] array (a copy)."""
        if not self._items:
            return np.zeros((0, 2), dtype=np.float64)
        return np.stack([p.position for p in self._items])

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, pid: object) -> bool:
        return isinstance(pid, int) and 0 <= pid < len(self._items)


class ConstraintStore:
    """Creation-ordered, append-only container of distance constraints."""

    def __init__(self) -> None:
        self._items: list[DistanceConstraint] = []

    def create(self, a: int, b: int, rest_length: float, strength: float = 1.0) -> ConstraintId:
        """
        Add a distance constraint between particles a and b.

        Particle existence is not checked here. A constraint pointing at an
        unknown id is reported as a DataFault on every tick until the id
        exists.

        Raises:
            ConfigurationError: If a == b, rest_length < 0 or strength is
                                outside (0, 1].
        """
        a, b = int(a), int(b)
        rest_length = float(rest_length)
        strength = float(strength)
        if a == b:
            raise ConfigurationError(f"Constraint endpoints must differ, got {a} twice")
        if not rest_length >= 0 or not math.isfinite(rest_length):
            raise ConfigurationError(f"Rest length must be non-negative, got {rest_length}")
        if not 0.0 < strength <= 1.0:
            raise ConfigurationError(f"Constraint strength must be in (0, 1], got {strength}")

        cid = ConstraintId(len(self._items))
        self._items.append(DistanceConstraint(a=a, b=b, rest_length=rest_length, strength=strength))
        logger.debug(f"Created constraint {cid}: {a} <-> {b} (rest={rest_length}, strength={strength})")
        return cid

    def get(self, cid: int) -> DistanceConstraint:
        """Return the constraint for cid. Raises KeyError if unknown."""
        if not 0 <= cid < len(self._items):
            raise KeyError(cid)
        return self._items[cid]

    def items(self) -> Iterator[tuple[ConstraintId, DistanceConstraint]]:
        """Yield (id, constraint) pairs in creation order."""
        for i, c in enumerate(self._items):
            yield ConstraintId(i), c

    def __iter__(self) -> Iterator[DistanceConstraint]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
