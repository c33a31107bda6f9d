"""Core abstractions and protocols for jaxgam."""

from jaxgam.core.exceptions import (
    IncompatibleTermError,
    MalformedFunctionError,
    UnknownModeError,
)
from jaxgam.core.protocols import (
    Instance,
    ScoreableFunction,
    Term,
    TermModel,
    as_term,
)

__all__ = [
    "Instance",
    "ScoreableFunction",
    "TermModel",
    "Term",
    "as_term",
    "IncompatibleTermError",
    "MalformedFunctionError",
    "UnknownModeError",
]
