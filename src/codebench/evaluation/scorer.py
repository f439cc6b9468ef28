"""Severity-weighted exponential-decay scoring and validator aggregation.

Violations are weighted by severity and folded into a bounded score
with ``exp(-total_weight / dampening)``. Validator results are then
averaged, ignoring skipped validators, and checked against the pass
threshold.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from codebench.models.result import ValidationResult, Violation

SEVERITY_WEIGHTS: dict[str, float] = {
    "critical": 1.0,
    "major": 0.7,
    "minor": 0.3,
}

DEFAULT_PASS_THRESHOLD = 0.8


def total_weight(violations: Iterable[Violation]) -> float:
    """Sum of severity weights; repeated violations each count."""
    return sum(SEVERITY_WEIGHTS[v.severity] for v in violations)


def decay_score(violations: list[Violation], dampening: float = 1.0) -> float:
    """Compute a score in [0.0, 1.0] from a list of violations.

    Args:
        violations: Violations found by a single validator.
        dampening: Divisor applied to the total weight. Larger values
            make the score decay more slowly.

    Returns:
        Exactly 1.0 for no violations, otherwise
        ``exp(-total_weight / dampening)`` clamped to [0.0, 1.0].
    """
    if not violations:
        return 1.0
    score = math.exp(-total_weight(violations) / dampening)
    return max(0.0, min(1.0, score))


def aggregate_results(
    results: list[ValidationResult],
    threshold: float = DEFAULT_PASS_THRESHOLD,
) -> tuple[float, list[Violation], bool]:
    """Fold per-validator results into a single scenario verdict.

    Args:
        results: Validator results in validator order.
        threshold: Minimum score to pass (0.0 to 1.0).

    Returns:
        Tuple of (score, violations, passed):
        - score: Mean of scored (non-skipped) results, 0.0 if none.
        - violations: Concatenation of every result's violations.
        - passed: True if score >= threshold and there are no violations.
    """
    active = [r.score for r in results if r.score is not None]
    score = sum(active) / len(active) if active else 0.0

    violations: list[Violation] = []
    for result in results:
        violations.extend(result.violations)

    passed = score >= threshold and not violations
    return (score, violations, passed)
