"""Array-backed datasets.

Rows are instances, columns are attributes. NaN marks a missing value.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import numpy as np


class ArrayInstance:
    """A single row, readable through ``value_at``."""

    def __init__(self, values: np.ndarray) -> None:
        self.values = np.asarray(values, dtype=np.float64)

    def value_at(self, attribute_index: int) -> float:
        """Return the attribute value; NaN if missing or out of range."""
        if 0 <= attribute_index < self.values.shape[0]:
            return float(self.values[attribute_index])
        return float("nan")

    def __repr__(self) -> str:
        return f"ArrayInstance({self.values.tolist()})"


class Instances:
    """A dataset of instances with a shared attribute layout.

    Example:
        >>> data = Instances([[1.0, 2.0], [3.0, np.nan]])
        >>> data[1].value_at(1)
        nan
        >>> data.column(0)
        array([1., 3.])
    """

    def __init__(self, values: np.ndarray) -> None:
        """Initialize from a 2-D array of shape (n_instances, n_attributes).

        A 1-D array is read as a single attribute.
        """
        values = np.array(values, dtype=np.float64)
        if values.ndim == 1:
            values = values[:, None]
        if values.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got shape {values.shape}")
        self._values = values

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def num_attributes(self) -> int:
        return int(self._values.shape[1])

    def __len__(self) -> int:
        return int(self._values.shape[0])

    def __getitem__(self, index: int) -> ArrayInstance:
        return ArrayInstance(self._values[index])

    def __iter__(self) -> Iterator[ArrayInstance]:
        for row in self._values:
            yield ArrayInstance(row)

    def column(self, attribute_index: int) -> np.ndarray:
        """Return one attribute for all instances; all NaN if out of range."""
        if 0 <= attribute_index < self.num_attributes:
            return self._values[:, attribute_index]
        return np.full(len(self), np.nan)


def read_instances(path: str | Path, delimiter: str | None = None) -> Instances:
    """Load a dataset from a text file.

    Args:
        path: File with one instance per line.
        delimiter: Field separator. None splits on whitespace.

    Returns:
        The dataset. ``?`` and empty fields are read as missing values.
    """
    values = np.genfromtxt(
        path,
        delimiter=delimiter,
        dtype=np.float64,
        missing_values="?",
        filling_values=np.nan,
        comments="#",
        ndmin=2,
    )
    return Instances(values)
