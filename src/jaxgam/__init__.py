"""
jaxgam: Step functions and term diagnostics for additive models.

Two main capabilities:
1. Step functions - exact piecewise-constant functions of one attribute
   with in-place arithmetic and lossless merge-addition
2. Term diagnostics - rank the terms of an additive model by how much
   their contribution varies over a dataset

Features:
- O(log n) evaluation, vectorized batch evaluation with JAX
- Merge-addition over the union of breakpoints
- Variance (L2) and mean absolute deviation (L1) term weights
- Line-oriented text format for functions and models
- ``jaxgam-diagnose`` command line tool

Quick Start (Step Functions):
    >>> from jaxgam import StepFunction
    >>> f = StepFunction(0, [3.0, 5.0, float("inf")], [1.0, 2.0, 3.0])
    >>> f.evaluate(4.0)
    2.0
    >>> f.merge_add(StepFunction(0, [4.0, float("inf")], [10.0, 20.0]))

Quick Start (Diagnostics):
    >>> from jaxgam import AdditiveModel, diagnose, rank_terms
    >>> model = AdditiveModel()
    >>> model.add((0,), f)
    >>> for element in rank_terms(diagnose(model, X_train, mode="L1")):
    ...     print(element.to_line())
"""

import jax

# Splits and predictions are float64; JAX would otherwise truncate to float32
jax.config.update("jax_enable_x64", True)

from jaxgam._version import __version__  # noqa: E402

# High-level API (recommended)
from jaxgam.diagnostics import (  # noqa: E402
    DiagnosticsConfig,
    Mode,
    TermAggregator,
    TermWeight,
    diagnose,
    rank_terms,
)

# Low-level components
from jaxgam.core import (  # noqa: E402
    IncompatibleTermError,
    MalformedFunctionError,
    UnknownModeError,
)
from jaxgam.data import ArrayInstance, Instances, read_instances  # noqa: E402
from jaxgam.functions import StepFunction  # noqa: E402
from jaxgam.gam import AdditiveModel  # noqa: E402

__all__ = [
    "__version__",
    # High-level API
    "DiagnosticsConfig",
    "Mode",
    "TermAggregator",
    "TermWeight",
    "diagnose",
    "rank_terms",
    # Functions
    "StepFunction",
    # Models
    "AdditiveModel",
    # Data
    "ArrayInstance",
    "Instances",
    "read_instances",
    # Errors
    "IncompatibleTermError",
    "MalformedFunctionError",
    "UnknownModeError",
]
