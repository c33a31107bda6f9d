"""Additive model container.

An additive model predicts

    f(x) = intercept + Σ_k g_k(x[term_k])

where each component g_k is a fitted function attached to a term. A
boosted model usually has many components per term, one per round.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import jax.numpy as jnp
import numpy as np
from jax import Array

from jaxgam.core.protocols import Instance, Term, as_term
from jaxgam.data import Instances
from jaxgam.functions import StepFunction


def evaluate_regressor(
    regressor: Any, instances: Instances | Sequence[Instance]
) -> Array:
    """Evaluate one univariate regressor on every instance.

    Regressors with ``evaluate_batch`` are evaluated column-wise on an
    ``Instances`` dataset; anything else is evaluated one instance at a
    time through ``evaluate``.

    Args:
        regressor: Function with ``attribute_index`` and ``evaluate``.
        instances: Dataset or sequence of instances.

    Returns:
        Contributions, shape (n_instances,).
    """
    index = regressor.attribute_index
    if isinstance(instances, Instances) and hasattr(regressor, "evaluate_batch"):
        return regressor.evaluate_batch(instances.column(index))
    return jnp.asarray(
        [regressor.evaluate(instance.value_at(index)) for instance in instances],
        dtype=jnp.float64,
    )


@dataclass
class AdditiveModel:
    """A fitted additive model.

    Example:
        >>> model = AdditiveModel(intercept=1.0)
        >>> model.add((0,), StepFunction(0, [0.0, np.inf], [-1.0, 1.0]))
        >>> model.predict(np.array([[-2.0], [2.0]]))
        array([0., 2.])
    """

    intercept: float = 0.0
    terms: list[Term] = field(default_factory=list)
    regressors: list[Any] = field(default_factory=list)

    def add(self, term: int | Iterable[int], regressor: Any) -> None:
        """Append a component."""
        self.terms.append(as_term(term))
        self.regressors.append(regressor)

    def get_terms(self) -> list[Term]:
        return list(self.terms)

    def get_regressors(self) -> list[Any]:
        return list(self.regressors)

    def __len__(self) -> int:
        return len(self.regressors)

    def regress(self, instance: Instance) -> float:
        """Predict a single instance."""
        return self.intercept + sum(
            regressor.regress(instance) for regressor in self.regressors
        )

    def predict(self, X: np.ndarray | Instances) -> np.ndarray:
        """Make predictions on new data.

        Args:
            X: Features, shape (n_samples, n_features). NaN marks a
                missing value.

        Returns:
            Predictions, shape (n_samples,).
        """
        instances = X if isinstance(X, Instances) else Instances(X)
        output = jnp.full((len(instances),), self.intercept, dtype=jnp.float64)
        for regressor in self.regressors:
            output = output + evaluate_regressor(regressor, instances)
        return np.array(output)

    def compress(self) -> AdditiveModel:
        """Fold the step functions of each univariate term into one.

        Components that are not step functions on their own term's
        attribute are kept unchanged. The original model is not modified.

        Returns:
            A new model with the same predictions.
        """
        model = AdditiveModel(intercept=self.intercept)
        merged: dict[Term, StepFunction] = {}
        for term, regressor in zip(self.terms, self.regressors):
            foldable = (
                isinstance(regressor, StepFunction)
                and len(term) == 1
                and regressor.attribute_index == term[0]
            )
            if not foldable:
                model.add(term, regressor)
            elif term in merged:
                merged[term].merge_add(regressor)
            else:
                merged[term] = regressor.copy()
                model.add(term, merged[term])
        return model
