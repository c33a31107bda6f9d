"""Term importance for additive models.

The importance of a term is the dispersion of its contribution to the
model output over a dataset:

    c_i = Σ_{g in term} g(x_i[attribute of g])
    weight = Var(c)            (L2)
    weight = mean |c - mean(c)|  (L1)

A term whose contribution is the same for every instance has weight 0,
however large that contribution is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, NamedTuple, Sequence, Union

import jax.numpy as jnp
import numpy as np
from jax import Array

from jaxgam.core.exceptions import UnknownModeError
from jaxgam.core.protocols import Instance, Term, TermModel, as_term
from jaxgam.data import Instances
from jaxgam.gam.model import evaluate_regressor
from jaxgam.stats import mad, variance

Entries = Union[TermModel, Iterable[tuple[Any, Any]]]


class Mode(str, Enum):
    """Dispersion statistic used as the term weight."""

    L1 = "L1"  # mean absolute deviation
    L2 = "L2"  # variance

    @classmethod
    def parse(cls, mode: str | Mode | None) -> Mode:
        """Parse a mode name. ``None`` gives the default, ``L2``.

        Accepts ``L1``/``L2`` and the long names ``MeanAbsoluteDeviation``
        and ``Variance``, ignoring case.

        Raises:
            UnknownModeError: If the name is not recognised.
        """
        if mode is None:
            return cls.L2
        if isinstance(mode, Mode):
            return mode
        key = str(mode).strip().lower()
        if key in ("l1", "meanabsolutedeviation", "mad"):
            return cls.L1
        if key in ("l2", "variance"):
            return cls.L2
        raise UnknownModeError(f"Invalid mode: {mode}")


class TermWeight(NamedTuple):
    """Importance of one term."""

    term: Term
    weight: float

    def to_line(self) -> str:
        """Format as ``[0, 3]: 0.25``."""
        return "[" + ", ".join(str(i) for i in self.term) + f"]: {self.weight!r}"


@dataclass
class DiagnosticsConfig:
    """Configuration for term diagnostics.

    Attributes:
        mode: Dispersion statistic for the term weight.
        verbose: Whether to print one line per term.
    """
    mode: Mode = Mode.L2
    verbose: bool = False

    def __post_init__(self) -> None:
        self.mode = Mode.parse(self.mode)


def group_by_term(entries: Entries) -> dict[Term, list[Any]]:
    """Group functions by term, keeping their order.

    Args:
        entries: A model with ``get_terms``/``get_regressors``, or
            ``(term, function)`` pairs.

    Returns:
        Mapping from term to its functions, in first-seen term order.
    """
    if isinstance(entries, TermModel):
        entries = zip(entries.get_terms(), entries.get_regressors())
    groups: dict[Term, list[Any]] = {}
    for term, function in entries:
        groups.setdefault(as_term(term), []).append(function)
    return groups


class TermAggregator:
    """Computes an importance weight per term.

    Example:
        >>> aggregator = TermAggregator(DiagnosticsConfig(mode=Mode.L1))
        >>> weights = aggregator.diagnose(model, X_train)
        >>> rank_terms(weights)[0].term
        (3,)
    """

    def __init__(self, config: DiagnosticsConfig | None = None):
        """Initialize aggregator.

        Args:
            config: Diagnostics configuration. If None, uses defaults.
        """
        self.config = config or DiagnosticsConfig()

    def contribution(
        self,
        functions: Sequence[Any],
        instances: Instances | Sequence[Instance],
    ) -> Array:
        """Sum the functions' outputs per instance.

        Returns:
            Contributions, shape (n_instances,).
        """
        total = jnp.zeros((len(instances),), dtype=jnp.float64)
        for function in functions:
            total = total + evaluate_regressor(function, instances)
        return total

    def weight(self, contribution: Array) -> float:
        """Dispersion of a contribution vector; 0 when it is empty."""
        if self.config.mode is Mode.L2:
            return float(variance(contribution))
        return float(mad(contribution))

    def diagnose(
        self,
        entries: Entries,
        instances: Instances | Sequence[Instance] | np.ndarray,
    ) -> list[TermWeight]:
        """Compute the weight of every distinct term.

        Args:
            entries: A model with ``get_terms``/``get_regressors``, or
                ``(term, function)`` pairs.
            instances: Dataset to evaluate on. Arrays are read as
                (n_instances, n_attributes).

        Returns:
            One weight per distinct term, in first-seen term order.
        """
        if isinstance(instances, np.ndarray):
            instances = Instances(instances)
        groups = group_by_term(entries)

        weights = []
        for term, functions in groups.items():
            weight = self.weight(self.contribution(functions, instances))
            weights.append(TermWeight(term, weight))
            if self.config.verbose:
                print(
                    f"  Term {list(term)}: {len(functions)} function(s), "
                    f"weight={weight:.6g}"
                )
        return weights


def diagnose(
    entries: Entries,
    instances: Instances | Sequence[Instance] | np.ndarray,
    mode: Mode | str | None = Mode.L2,
) -> list[TermWeight]:
    """Compute the weight of every distinct term.

    Shortcut for ``TermAggregator(DiagnosticsConfig(mode)).diagnose(...)``.
    """
    config = DiagnosticsConfig(mode=mode)
    return TermAggregator(config).diagnose(entries, instances)


def rank_terms(weights: Iterable[TermWeight]) -> list[TermWeight]:
    """Sort by weight, largest first. Ties keep their order."""
    return sorted(weights, key=lambda element: element.weight, reverse=True)
