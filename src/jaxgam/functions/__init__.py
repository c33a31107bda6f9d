"""Univariate functions for jaxgam."""

from jaxgam.functions import serialization
from jaxgam.functions.step import StepFunction

__all__ = [
    "StepFunction",
    "serialization",
]
