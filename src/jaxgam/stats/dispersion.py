"""Dispersion statistics.

Population statistics over a 1-D vector. An empty vector has no
dispersion: ``variance`` and ``mad`` return 0 for it, ``mean`` returns 0.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array


def mean(values: Array) -> Array:
    """Arithmetic mean.

    Args:
        values: Input vector, shape (n,).

    Returns:
        Scalar mean, 0 for an empty vector.
    """
    values = jnp.asarray(values)
    if values.size == 0:
        return jnp.zeros((), dtype=values.dtype)
    return jnp.mean(values)


def variance(values: Array) -> Array:
    """Population variance, i.e. Σ (x - mean)² / n.

    Args:
        values: Input vector, shape (n,).

    Returns:
        Scalar variance, 0 for an empty vector.
    """
    values = jnp.asarray(values)
    if values.size == 0:
        return jnp.zeros((), dtype=values.dtype)
    return jnp.var(values)


def mad(values: Array, center: Array | float | None = None) -> Array:
    """Mean absolute deviation, i.e. Σ |x - center| / n.

    Args:
        values: Input vector, shape (n,).
        center: Reference point. Defaults to the mean of ``values``.

    Returns:
        Scalar mean absolute deviation, 0 for an empty vector.
    """
    values = jnp.asarray(values)
    if values.size == 0:
        return jnp.zeros((), dtype=values.dtype)
    if center is None:
        center = jnp.mean(values)
    return jnp.mean(jnp.abs(values - center))
