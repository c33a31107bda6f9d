"""Text format for additive models.

    [Predictor: AdditiveModel]
    Intercept: 0.5
    Components: 2
    Term: [0]
    <step function block>
    Term: [3]
    <step function block>

Each step function block uses the format of
``jaxgam.functions.serialization``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from jaxgam.core.exceptions import MalformedFunctionError
from jaxgam.core.protocols import Term
from jaxgam.functions import StepFunction
from jaxgam.functions import serialization as step_format
from jaxgam.gam.model import AdditiveModel

HEADER = "[Predictor: AdditiveModel]"


def _parse_term(text: str) -> Term:
    text = text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        raise MalformedFunctionError(f"Expected a bracketed term, got {text!r}")
    body = text[1:-1].strip()
    try:
        return tuple(int(token) for token in body.split(",")) if body else ()
    except ValueError as e:
        raise MalformedFunctionError(f"Invalid term {text!r}") from e


def _next_value(stream: TextIO) -> str:
    return step_format.field(step_format.next_line(stream))


def read_model(stream: TextIO) -> AdditiveModel:
    """Read an additive model from a text stream.

    Raises:
        MalformedFunctionError: If the header, a count or a component
            block is malformed.
    """
    line = step_format.next_line(stream)
    if not line.startswith("[Predictor"):
        raise MalformedFunctionError(f"Expected a predictor header, got {line!r}")
    intercept = step_format.parse_float(_next_value(stream))
    count = step_format.parse_int(_next_value(stream))
    if count < 0:
        raise MalformedFunctionError(f"Negative component count: {count}")

    model = AdditiveModel(intercept=intercept)
    for _ in range(count):
        term = _parse_term(_next_value(stream))
        model.add(term, step_format.read(stream))
    return model


def write_model(model: AdditiveModel, stream: TextIO) -> None:
    """Write an additive model of step functions to a text stream."""
    stream.write(HEADER + "\n")
    stream.write(f"Intercept: {step_format.format_float(model.intercept)}\n")
    stream.write(f"Components: {len(model)}\n")
    for term, regressor in zip(model.get_terms(), model.get_regressors()):
        if not isinstance(regressor, StepFunction):
            raise ValueError(
                f"Only step functions can be written, got {type(regressor).__name__}"
            )
        stream.write("Term: [" + ", ".join(str(i) for i in term) + "]\n")
        step_format.write(regressor, stream)


def load(path: str | Path) -> AdditiveModel:
    """Read an additive model from a file."""
    with open(path) as f:
        return read_model(f)


def save(model: AdditiveModel, path: str | Path) -> None:
    """Write an additive model to a file."""
    with open(path, "w") as f:
        write_model(model, f)
