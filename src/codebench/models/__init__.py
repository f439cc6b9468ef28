"""codebench data models - re-exports all public model classes."""

from codebench.models.baseline import BaselineRecord
from codebench.models.config import ProjectConfig, ScoringConfig
from codebench.models.result import (
    BaselineComparison,
    EvaluationReport,
    EvaluationResult,
    EvaluationSummary,
    ValidationResult,
    Violation,
)
from codebench.models.scenario import (
    UNSET,
    JudgeConfig,
    LintConfig,
    PatternRules,
    Scenario,
    ValidationStrategy,
)

__all__ = [
    "UNSET",
    "BaselineComparison",
    "BaselineRecord",
    "EvaluationReport",
    "EvaluationResult",
    "EvaluationSummary",
    "JudgeConfig",
    "LintConfig",
    "PatternRules",
    "ProjectConfig",
    "Scenario",
    "ScoringConfig",
    "ValidationResult",
    "ValidationStrategy",
    "Violation",
]
