"""Batch summary computation across scenario results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from codebench.models.result import EvaluationSummary

if TYPE_CHECKING:
    from codebench.models.result import EvaluationResult


def summarize_results(results: list[EvaluationResult]) -> EvaluationSummary:
    """Compute summary counters for a batch of scenario results.

    A result carrying an ``error`` counts as skipped, never as failed.
    The average includes every result, so errored scenarios pull it
    down with their 0.0 score.

    Args:
        results: Scenario results in evaluation order.

    Returns:
        EvaluationSummary with pass/fail/skip counts, average score and
        total violation count.
    """
    total = len(results)
    passed = sum(1 for r in results if r.passed)
    failed = sum(1 for r in results if not r.passed and r.error is None)
    skipped = sum(1 for r in results if r.error is not None)
    average_score = sum(r.score for r in results) / total if total else 0.0
    total_violations = sum(len(r.violations) for r in results)

    return EvaluationSummary(
        total=total,
        passed=passed,
        failed=failed,
        skipped=skipped,
        average_score=average_score,
        total_violations=total_violations,
    )
