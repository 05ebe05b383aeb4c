# MIT License (see LICENSE)
"""
Utility functions for vector math and numeric operations.

Provides the small set of 2D vector operations the particle solver and the
rigid body impulse model share. All functions operate on 2D vectors
represented as numpy arrays of shape (2,).
"""
from __future__ import annotations

import numpy as np


def f64(x) -> np.ndarray:
    """
    Convert any array-like to a float64 numpy array.

    Used throughout the codebase to ensure consistent numeric precision
    and allow tuple/list inputs for positions and velocities.
    """
    return np.array(x, dtype=np.float64)


def vec2(x, name: str = "vector") -> np.ndarray:
    """
    Convert x to a finite float64 vector of shape (2,).

    Raises:
        ValueError: If x has the wrong shape or holds NaN/inf.
    """
    v = f64(x)
    if v.shape != (2,):
        raise ValueError(f"{name} must be a 2D vector, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"{name} must be finite, got {v.tolist()}")
    return v


def norm2(v: np.ndarray) -> float:
    """Squared magnitude of a 2D vector. Avoids sqrt for performance."""
    return float(v[0] * v[0] + v[1] * v[1])


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a 2D vector."""
    return float(np.sqrt(norm2(v)))


def cross2(a: np.ndarray, b: np.ndarray) -> float:
    """
    2D cross product (scalar result): a × b = ax*by - ay*bx.

    In 2D, the cross product yields a scalar representing the
    z-component of the 3D cross product (a, 0) × (b, 0).
    Positive result means b is counterclockwise from a.
    """
    return float(a[0] * b[1] - a[1] * b[0])


def as_tuple(v: np.ndarray | None) -> tuple[float, float] | None:
    """Convert a 2D array to a plain (x, y) tuple, passing None through."""
    if v is None:
        return None
    return (float(v[0]), float(v[1]))
