# MIT License (see LICENSE)
"""
Constraint solvers for the particle simulation.

This subpackage provides:
    - solve_distance_constraints: iterative relaxation of all distance
      constraints in creation order.
    - constraint_correction: the per-constraint, mass-weighted correction.

Typical usage:
    from rope_sim.constraints import solve_distance_constraints

    faults, degenerate = solve_distance_constraints(particles, constraints, iterations=4)
"""
from .solver import solve_distance_constraints, constraint_correction, CORRECTION_MODES

__all__ = [
    "solve_distance_constraints",
    "constraint_correction",
    "CORRECTION_MODES",
]
