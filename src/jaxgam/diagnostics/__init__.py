"""Diagnostics for additive models."""

from jaxgam.diagnostics.term_importance import (
    DiagnosticsConfig,
    Mode,
    TermAggregator,
    TermWeight,
    diagnose,
    group_by_term,
    rank_terms,
)

__all__ = [
    "DiagnosticsConfig",
    "Mode",
    "TermAggregator",
    "TermWeight",
    "diagnose",
    "group_by_term",
    "rank_terms",
]
