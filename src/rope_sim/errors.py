# MIT License (see LICENSE)
"""
Error types and per-tick diagnostics.

Three failure classes exist in the simulation:

- ConfigurationError is raised. It rejects a single construction call
  (bad mass, self-referencing constraint, ...) or an invalid global setting
  (negative dt, negative iteration count) and leaves existing state intact.
- DataFault is recorded, not raised. A constraint that points at a particle
  id the store does not hold is skipped for the tick and reported here.
- DegenerateGeometry is recorded, not raised. A constraint whose endpoints
  coincide cannot define a correction direction; it is skipped for that one
  solver iteration only.
"""
from __future__ import annotations
from dataclasses import dataclass, field


class ConfigurationError(ValueError):
    """Invalid construction argument or simulation setting."""


@dataclass(frozen=True)
class DataFault:
    """
    A constraint referenced particle ids that do not exist.

    Attributes:
        constraint_id: Id of the skipped constraint.
        missing: The particle ids that could not be resolved.
    """
    constraint_id: int
    missing: tuple[int, ...]


@dataclass(frozen=True)
class DegenerateGeometry:
    """A constraint was skipped for one iteration because its endpoints coincide."""
    constraint_id: int
    iteration: int


@dataclass
class Diagnostics:
    """
    Result of one advance_tick call.

    Attributes:
        tick: Index of the completed tick (1 for the first tick).
        faults: Constraints skipped for the whole tick.
        degenerate: Per-iteration skips caused by coincident endpoints.
    """
    tick: int = 0
    faults: list[DataFault] = field(default_factory=list)
    degenerate: list[DegenerateGeometry] = field(default_factory=list)

    @property
    def skipped(self) -> list[int]:
        """Ids of every constraint that was skipped at least once, in first-seen order."""
        seen: dict[int, None] = {}
        for f in self.faults:
            seen.setdefault(f.constraint_id, None)
        for d in self.degenerate:
            seen.setdefault(d.constraint_id, None)
        return list(seen)

    @property
    def ok(self) -> bool:
        """True when no constraint was skipped."""
        return not self.faults and not self.degenerate
