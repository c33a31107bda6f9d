"""Exceptions raised by jaxgam.

All of them are ``ValueError`` subclasses, so callers that already guard
against invalid arguments keep working.
"""

from __future__ import annotations


class IncompatibleTermError(ValueError):
    """Two functions defined over different attributes were combined."""


class MalformedFunctionError(ValueError):
    """Breakpoint/prediction arrays violate the step function invariants."""


class UnknownModeError(ValueError):
    """A diagnostic mode string could not be recognised."""
