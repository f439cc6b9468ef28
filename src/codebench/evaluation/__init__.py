"""Evaluation package for validating generated code and scoring it.

Provides the validators, severity-weighted decay scoring, validator
aggregation and batch summaries.
"""

from __future__ import annotations

from codebench.evaluation.aggregation import summarize_results
from codebench.evaluation.scorer import SEVERITY_WEIGHTS, aggregate_results, decay_score
from codebench.evaluation.validators import VALIDATOR_REGISTRY, default_validators
from codebench.evaluation.validators.base import BaseValidator

__all__ = [
    "SEVERITY_WEIGHTS",
    "VALIDATOR_REGISTRY",
    "BaseValidator",
    "aggregate_results",
    "decay_score",
    "default_validators",
    "summarize_results",
]
