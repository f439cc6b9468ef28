"""Tests for batch summary computation."""

from __future__ import annotations

from codebench.evaluation.aggregation import summarize_results
from codebench.models.result import EvaluationResult, Violation
from codebench.models.scenario import Scenario


def _make_result(
    scenario_id: str = "s",
    passed: bool = True,
    score: float = 1.0,
    error: str | None = None,
    n_violations: int = 0,
) -> EvaluationResult:
    scenario = Scenario(id=scenario_id, description="d", prompt="p")
    return EvaluationResult(
        scenario=scenario,
        passed=passed,
        score=score,
        violations=[
            Violation(kind="pattern", message="m", severity="minor")
            for _ in range(n_violations)
        ],
        duration_ms=10,
        status="failed" if error else "complete",
        error=error,
    )


class TestSummarizeResults:
    """Test summarize_results counters."""

    def test_empty_batch(self) -> None:
        summary = summarize_results([])
        assert summary.total == 0
        assert summary.passed == 0
        assert summary.failed == 0
        assert summary.skipped == 0
        assert summary.average_score == 0.0
        assert summary.total_violations == 0

    def test_mixed_batch(self) -> None:
        results = [
            _make_result("a", passed=True, score=1.0),
            _make_result("b", passed=False, score=0.5, n_violations=2),
            _make_result("c", passed=False, score=0.0, error="Evaluation failed: boom"),
        ]
        summary = summarize_results(results)
        assert summary.total == 3
        assert summary.passed == 1
        assert summary.failed == 1
        assert summary.skipped == 1
        assert summary.average_score == 0.5
        assert summary.total_violations == 2

    def test_counts_partition_total(self) -> None:
        results = [
            _make_result("a"),
            _make_result("b", passed=False, score=0.2),
            _make_result("c", passed=False, score=0.0, error="x"),
            _make_result("d", passed=False, score=0.0, error="y"),
        ]
        summary = summarize_results(results)
        assert summary.passed + summary.failed + summary.skipped == summary.total

    def test_errored_result_counts_as_skipped_not_failed(self) -> None:
        summary = summarize_results(
            [_make_result(passed=False, score=0.0, error="Evaluation failed: timeout")]
        )
        assert summary.failed == 0
        assert summary.skipped == 1
