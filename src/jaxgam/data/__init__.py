"""Datasets for jaxgam."""

from jaxgam.data.instances import ArrayInstance, Instances, read_instances

__all__ = [
    "ArrayInstance",
    "Instances",
    "read_instances",
]
