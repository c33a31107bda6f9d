"""Numeric utilities for jaxgam."""

from jaxgam.stats.dispersion import mad, mean, variance
from jaxgam.stats.predicates import EPSILON, is_constant, is_zero

__all__ = [
    "EPSILON",
    "is_zero",
    "is_constant",
    "mean",
    "variance",
    "mad",
]
