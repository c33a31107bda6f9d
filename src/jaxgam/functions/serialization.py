"""Line-oriented text format for step functions.

A function is written as six lines:

    AttIndex: 2
    PredictionOnMV: 0.0
    Splits: 3
    [3.0, 5.0, Infinity]
    Predictions: 3
    [1.0, 2.0, 3.0]

Key names are not checked on read, and an optional ``[Predictor: ...]``
header line before the block is skipped.
"""

from __future__ import annotations

import io
import math
from typing import Iterable, TextIO

from jaxgam.core.exceptions import MalformedFunctionError
from jaxgam.functions.step import StepFunction


def format_float(value: float) -> str:
    """Format a float so that ``float()`` reads it back exactly."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def format_array(values: Iterable[float]) -> str:
    return "[" + ", ".join(format_float(v) for v in values) + "]"


def parse_array(line: str) -> list[float]:
    """Parse ``[a, b, ...]`` into a list of floats."""
    line = line.strip()
    if not (line.startswith("[") and line.endswith("]")):
        raise MalformedFunctionError(f"Expected a bracketed array, got {line!r}")
    body = line[1:-1].strip()
    if not body:
        return []
    try:
        return [float(token) for token in body.split(",")]
    except ValueError as e:
        raise MalformedFunctionError(f"Invalid number in {line!r}") from e


def next_line(stream: TextIO) -> str:
    """Return the next non-blank line without its line break."""
    for line in stream:
        line = line.strip()
        if line:
            return line
    raise MalformedFunctionError("Unexpected end of input")


def field(line: str) -> str:
    """Return the value of a ``Key: value`` line."""
    _, sep, value = line.partition(": ")
    if not sep:
        raise MalformedFunctionError(f"Expected 'Key: value', got {line!r}")
    return value.strip()


def parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise MalformedFunctionError(f"Expected an integer, got {text!r}") from e


def parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError as e:
        raise MalformedFunctionError(f"Expected a number, got {text!r}") from e


def _read_counted_array(stream: TextIO) -> list[float]:
    count = parse_int(field(next_line(stream)))
    values = parse_array(next_line(stream))
    if len(values) != count:
        raise MalformedFunctionError(
            f"Declared {count} values but found {len(values)}"
        )
    return values


def read(stream: TextIO) -> StepFunction:
    """Read one step function from a text stream.

    Args:
        stream: Text stream positioned at the start of a function block.

    Returns:
        The parsed function.

    Raises:
        MalformedFunctionError: If the block is truncated, a count does
            not match its array, or the arrays violate the invariants.
    """
    line = next_line(stream)
    if line.startswith("[Predictor"):
        line = next_line(stream)
    attribute_index = parse_int(field(line))
    prediction_on_missing = parse_float(field(next_line(stream)))
    splits = _read_counted_array(stream)
    predictions = _read_counted_array(stream)
    return StepFunction(attribute_index, splits, predictions, prediction_on_missing)


def write(function: StepFunction, stream: TextIO) -> None:
    """Write one step function to a text stream."""
    stream.write(f"AttIndex: {function.attribute_index}\n")
    stream.write(f"PredictionOnMV: {format_float(function.prediction_on_missing)}\n")
    stream.write(f"Splits: {len(function.splits)}\n")
    stream.write(format_array(function.splits) + "\n")
    stream.write(f"Predictions: {len(function.predictions)}\n")
    stream.write(format_array(function.predictions) + "\n")


def loads(text: str) -> StepFunction:
    """Parse a step function from a string."""
    return read(io.StringIO(text))


def dumps(function: StepFunction) -> str:
    """Serialize a step function to a string."""
    buffer = io.StringIO()
    write(function, buffer)
    return buffer.getvalue()
