"""
Core protocols (interfaces) for jaxgam.

All collaborators are defined as Protocols, enabling:
- Duck typing (no inheritance required)
- Plugging in model containers and datasets from other libraries
- Type safety with mypy/pyright
"""

from __future__ import annotations

import numbers
from typing import Iterable, Protocol, Sequence, Tuple, Union, runtime_checkable

# A term is an ordered tuple of attribute indices
Term = Tuple[int, ...]


def as_term(term: Union[int, Iterable[int]]) -> Term:
    """Normalize a term to a hashable tuple, e.g. ``[0, 3]`` -> ``(0, 3)``."""
    if isinstance(term, numbers.Integral):
        return (int(term),)
    return tuple(int(i) for i in term)


@runtime_checkable
class ScoreableFunction(Protocol):
    """Protocol for univariate functions that can be scored.

    Implementations map one attribute value to a contribution.
    NaN is the missing-value sentinel.
    """

    def evaluate(self, x: float) -> float:
        """Return the function value at ``x``."""
        ...


@runtime_checkable
class Instance(Protocol):
    """Protocol for a single data row."""

    def value_at(self, attribute_index: int) -> float:
        """Return the attribute value, NaN if missing."""
        ...


@runtime_checkable
class TermModel(Protocol):
    """Protocol for additive models.

    The i-th regressor contributes to the i-th term. A term may appear
    several times, e.g. once per boosting round.
    """

    def get_terms(self) -> Sequence[Sequence[int]]:
        """Return the terms, index aligned with the regressors."""
        ...

    def get_regressors(self) -> Sequence[ScoreableFunction]:
        """Return the regressors, index aligned with the terms."""
        ...
