"""Zero and constant tests used by the function layer."""

from __future__ import annotations

import numpy as np

EPSILON = 1e-8


def is_zero(a: float, epsilon: float = EPSILON) -> bool:
    """Return True if ``|a| < epsilon``."""
    return bool(abs(a) < epsilon)


def is_constant(
    values: np.ndarray,
    value: float,
    start: int = 0,
    end: int | None = None,
) -> bool:
    """Return True if ``values[start:end]`` all equal ``value`` exactly.

    An empty range is constant.
    """
    return bool(np.all(np.asarray(values)[start:end] == value))
