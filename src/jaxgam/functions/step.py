"""Step functions.

A step function is a piecewise-constant function of a single attribute.
Segments are right-closed intervals defined by a split array, e.g.
[3, 5, +inf] defines three segments: (-inf, 3], (3, 5], (5, +inf).
The last split is always +inf. The prediction array holds the value of
each segment, and NaN inputs get a dedicated prediction.

Example:
    >>> f = StepFunction(0, [3.0, 5.0, np.inf], [1.0, 2.0, 3.0])
    >>> f.evaluate(4.0)
    2.0
    >>> g = StepFunction(0, [4.0, np.inf], [10.0, 20.0])
    >>> f.merge_add(g).splits
    array([ 3.,  4.,  5., inf])
"""

from __future__ import annotations

import numbers
from typing import Any

import jax.numpy as jnp
import numpy as np
from jax import Array

from jaxgam.core.exceptions import IncompatibleTermError, MalformedFunctionError
from jaxgam.core.protocols import Instance
from jaxgam.stats import is_constant, is_zero


def _as_attribute_index(value: Any) -> int:
    if not isinstance(value, numbers.Integral):
        raise MalformedFunctionError(
            f"attribute_index must be an integer, got {value!r}"
        )
    return int(value)


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MalformedFunctionError(f"{name} must be numeric: {e}") from e


def _as_float_array(values: Any, name: str) -> np.ndarray:
    """Copy ``values`` into a fresh 1-D float64 array."""
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedFunctionError(f"{name} must be numeric: {e}") from e
    if array.ndim != 1:
        raise MalformedFunctionError(f"{name} must be 1-D, got shape {array.shape}")
    return array


def _check_invariants(splits: np.ndarray, predictions: np.ndarray) -> None:
    if splits.size == 0:
        raise MalformedFunctionError("splits must not be empty")
    if splits.size != predictions.size:
        raise MalformedFunctionError(
            f"splits and predictions differ in length: "
            f"{splits.size} != {predictions.size}"
        )
    if np.isnan(splits).any():
        raise MalformedFunctionError("splits must not contain NaN")
    if splits[-1] != np.inf:
        raise MalformedFunctionError(f"last split must be +inf, got {splits[-1]}")
    if not np.all(np.diff(splits) > 0):
        raise MalformedFunctionError("splits must be strictly increasing")


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class StepFunction:
    """Segmented 1D function over one attribute.

    Scalar arithmetic and ``merge_add`` mutate the function in place and
    return it, so calls can be chained:

        >>> f.copy().scale_by(0.5).offset_by(1.0)
    """

    def __init__(
        self,
        attribute_index: int,
        splits: Any,
        predictions: Any,
        prediction_on_missing: float = 0.0,
    ) -> None:
        """Initialize a step function.

        Args:
            attribute_index: Index of the attribute this function reads.
            splits: Strictly increasing segment upper bounds, ending with +inf.
            predictions: Value of each segment, same length as ``splits``.
            prediction_on_missing: Value returned for NaN inputs.

        Raises:
            MalformedFunctionError: If the arrays violate the invariants, the
                attribute index is not an integer or the missing-value
                prediction is not numeric.
        """
        splits = _as_float_array(splits, "splits")
        predictions = _as_float_array(predictions, "predictions")
        _check_invariants(splits, predictions)
        self._attribute_index = _as_attribute_index(attribute_index)
        self._splits = splits
        self._predictions = predictions
        self.prediction_on_missing = _as_float(
            prediction_on_missing, "prediction_on_missing"
        )

    @classmethod
    def constant(cls, attribute_index: int, prediction: float) -> StepFunction:
        """Return a function with a single infinite segment.

        Missing values get the same prediction.
        """
        return cls(attribute_index, [np.inf], [prediction], prediction)

    @property
    def attribute_index(self) -> int:
        return self._attribute_index

    @attribute_index.setter
    def attribute_index(self, value: int) -> None:
        self._attribute_index = _as_attribute_index(value)

    @property
    def splits(self) -> np.ndarray:
        """Read-only view of the split array."""
        return _read_only(self._splits)

    @property
    def predictions(self) -> np.ndarray:
        """Read-only view of the prediction array."""
        return _read_only(self._predictions)

    def __len__(self) -> int:
        return int(self._splits.size)

    def __repr__(self) -> str:
        return (
            f"StepFunction(attribute_index={self._attribute_index}, "
            f"splits={self._splits.tolist()}, "
            f"predictions={self._predictions.tolist()}, "
            f"prediction_on_missing={self.prediction_on_missing})"
        )

    def segment_index(self, x: float) -> int:
        """Return the smallest i with ``x <= splits[i]``. ``x`` must not be NaN."""
        return int(np.searchsorted(self._splits, x, side="left"))

    def evaluate(self, x: float) -> float:
        """Return the function value at ``x``."""
        x = float(x)
        if np.isnan(x):
            return self.prediction_on_missing
        return float(self._predictions[self.segment_index(x)])

    def evaluate_batch(self, x: Array | np.ndarray) -> Array:
        """Vectorized ``evaluate``.

        Args:
            x: Attribute values, shape (batch,). NaN marks a missing value.

        Returns:
            Function values, shape (batch,).
        """
        x = jnp.asarray(x, dtype=jnp.float64)
        missing = jnp.isnan(x)
        # NaN has no position in the split array; look up a placeholder instead
        idx = jnp.searchsorted(
            jnp.asarray(self._splits), jnp.where(missing, 0.0, x), side="left"
        )
        values = jnp.asarray(self._predictions)[idx]
        return jnp.where(missing, self.prediction_on_missing, values)

    def regress(self, instance: Instance) -> float:
        """Evaluate on the instance's value of this function's attribute."""
        return self.evaluate(instance.value_at(self._attribute_index))

    def _lookup(self, x: np.ndarray) -> np.ndarray:
        # x must be free of NaN
        return self._predictions[np.searchsorted(self._splits, x, side="left")]

    def scale_by(self, c: float) -> StepFunction:
        """Multiply every prediction by ``c``."""
        self._predictions *= c
        self.prediction_on_missing *= c
        return self

    def divide_by(self, c: float) -> StepFunction:
        """Divide every prediction by ``c``.

        Dividing by zero follows IEEE semantics and yields inf or NaN.
        """
        with np.errstate(divide="ignore", invalid="ignore"):
            self._predictions /= c
            self.prediction_on_missing = float(
                np.float64(self.prediction_on_missing) / c
            )
        return self

    def offset_by(self, c: float) -> StepFunction:
        """Add ``c`` to every prediction."""
        self._predictions += c
        self.prediction_on_missing += c
        return self

    def merge_add(self, other: StepFunction) -> StepFunction:
        """Add ``other`` to this function.

        The result is defined over the union of both split arrays, so
        ``f.merge_add(g).evaluate(x) == f.evaluate(x) + g.evaluate(x)``
        for every x. A split counts as already present only if the
        exact same float is in this function's split array.

        Args:
            other: Function over the same attribute.

        Returns:
            This function.

        Raises:
            IncompatibleTermError: If the attribute indices differ.
        """
        if self._attribute_index != other._attribute_index:
            raise IncompatibleTermError(
                f"Cannot add functions on different attributes: "
                f"{self._attribute_index} and {other._attribute_index}"
            )
        # The terminal +inf is present in both
        candidates = other._splits[:-1]
        positions = np.searchsorted(self._splits, candidates, side="left")
        new_splits = candidates[self._splits[positions] != candidates]

        if new_splits.size > 0:
            splits = np.union1d(self._splits, new_splits)
            # Evaluated against the old arrays before they are replaced
            predictions = self._lookup(splits) + other._lookup(splits)
            self._splits = splits
            self._predictions = predictions
        else:
            self._predictions += other._lookup(self._splits)

        self.prediction_on_missing += other.prediction_on_missing
        return self

    def is_zero(self) -> bool:
        """Return True if the function is 0 everywhere, missing values included."""
        return is_constant(self._predictions, 0.0) and is_zero(
            self.prediction_on_missing
        )

    def is_constant(self) -> bool:
        """Return True if the function takes a single value, missing values included."""
        first = self._predictions[0]
        return is_constant(self._predictions, first, start=1) and is_zero(
            self.prediction_on_missing - first
        )

    def set_zero(self) -> None:
        """Reset this function to 0."""
        self._splits = np.array([np.inf])
        self._predictions = np.zeros(1)
        self.prediction_on_missing = 0.0

    def copy(self) -> StepFunction:
        """Return a deep copy."""
        return StepFunction(
            self._attribute_index,
            self._splits,
            self._predictions,
            self.prediction_on_missing,
        )
