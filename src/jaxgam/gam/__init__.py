"""Additive models for jaxgam."""

from jaxgam.gam.model import AdditiveModel, evaluate_regressor
from jaxgam.gam.serialization import load, read_model, save, write_model

__all__ = [
    "AdditiveModel",
    "evaluate_regressor",
    "read_model",
    "write_model",
    "load",
    "save",
]
