"""Result data models for codebench evaluation outputs.

These models encode the evaluation output contract: individual
violations, per-validator results, per-scenario outcomes, and the
batch report with its summary counters.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from codebench.models.scenario import Scenario, Severity


class Violation(BaseModel):
    """A single rule breach found by a validator."""

    model_config = {"frozen": True}

    kind: str
    message: str
    file: str | None = None
    line: int | None = None
    severity: Severity
    details: str | None = None


class ValidationResult(BaseModel):
    """One validator's verdict for one scenario.

    ``score`` is ``None`` when the validator did not run (disabled, not
    configured, or a required dependency is missing). Skipped results
    never participate in score averaging and never carry an ``error``.
    """

    model_config = {"frozen": True}

    kind: str
    passed: bool
    score: float | None = Field(default=None, ge=0.0, le=1.0)
    violations: list[Violation] = Field(default_factory=list)
    error: str | None = None
    skip_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.score is None

    @classmethod
    def skip(cls, kind: str, reason: str | None = None) -> ValidationResult:
        """Build a Skipped result for a validator that did not apply."""
        return cls(kind=kind, passed=True, score=None, skip_reason=reason)

    @classmethod
    def failure(cls, kind: str, error: str) -> ValidationResult:
        """Build a result for a validator that could not complete its check."""
        return cls(kind=kind, passed=False, score=0.0, error=error)


class BaselineComparison(BaseModel):
    """Score delta between the current run and the stored baseline."""

    model_config = {"frozen": True}

    baseline_score: float
    delta: float
    is_improvement: bool


class EvaluationResult(BaseModel):
    """Complete outcome of evaluating one scenario."""

    model_config = {"frozen": True}

    scenario: Scenario
    passed: bool
    score: float
    validation_results: list[ValidationResult] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    generated_files: list[str] | None = None
    duration_ms: int
    status: Literal["complete", "failed"] = "complete"
    error: str | None = None
    baseline_comparison: BaselineComparison | None = None


class EvaluationSummary(BaseModel):
    """Aggregate counters for a batch of scenario results."""

    model_config = {"frozen": True}

    total: int
    passed: int
    failed: int
    skipped: int
    average_score: float
    total_violations: int


class EvaluationReport(BaseModel):
    """Batch container for one evaluation run.

    Designed for JSON export and lossless round-trip deserialization.
    """

    model_config = {"frozen": True}

    adapter: str
    model: str | None = None
    adapter_model: str | None = None
    timestamp: datetime
    results: list[EvaluationResult] = Field(default_factory=list)
    summary: EvaluationSummary
    total_duration_ms: int
