"""PatternValidator -- textual and filename rules over generated files.

Checks forbidden/required content regexes, forbidden/required import
markers (literal substrings) and forbidden/required filename regexes.
Every rule category is evaluated; nothing short-circuits except an
unreadable file, which aborts validation with an error result.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from codebench.evaluation.scorer import decay_score
from codebench.evaluation.validators.base import BaseValidator
from codebench.execution.workspace import relative_to_root, resolve_file_paths
from codebench.models.result import ValidationResult, Violation
from codebench.models.scenario import PatternRules, Scenario

logger = logging.getLogger(__name__)


def find_pattern_matches(content: str, pattern: re.Pattern[str]) -> list[tuple[int, str]]:
    """Return (1-indexed line number, stripped line text) for every matching line."""
    matches: list[tuple[int, str]] = []
    for index, line in enumerate(content.split("\n"), start=1):
        if pattern.search(line):
            matches.append((index, line.strip()))
    return matches


def find_line_with_text(content: str, text: str) -> tuple[int, str] | None:
    """Return the first line containing ``text``, or None if no single line does."""
    for index, line in enumerate(content.split("\n"), start=1):
        if text in line:
            return (index, line.strip())
    return None


class PatternValidator(BaseValidator):
    """Regex and substring rule checker.

    Every violation carries the scenario's severity. The score is the
    exponential-decay score over all violations found across files.
    """

    kind = "pattern"

    def __init__(self, workspace_root: Path, dampening: float = 1.0) -> None:
        self.workspace_root = workspace_root
        self.dampening = dampening

    async def validate(self, files: list[str], scenario: Scenario) -> ValidationResult:
        rules = scenario.validation_strategy.patterns
        if rules is None or rules.is_empty:
            return ValidationResult.skip(self.kind, "no pattern rules configured")
        return self.check(files, scenario, rules)

    def check(
        self, files: list[str], scenario: Scenario, rules: PatternRules
    ) -> ValidationResult:
        """Synchronously apply ``rules`` to ``files``.

        Args:
            files: Changed file paths (relative to the workspace root or
                absolute).
            scenario: Scenario supplying the violation severity.
            rules: The non-empty rule set to apply.

        Returns:
            Scored ValidationResult, or an error result if an existing
            file could not be read.
        """
        severity = scenario.severity
        violations: list[Violation] = []
        absolute_paths = resolve_file_paths(self.workspace_root, files)

        for path in absolute_paths:
            if not path.exists():
                logger.debug("Skipping missing file %s", path)
                continue

            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                return ValidationResult.failure(
                    self.kind, f"Failed to read file {path}: {exc}"
                )

            rel_path = relative_to_root(self.workspace_root, path)
            violations.extend(
                self._check_content(content, rel_path, rules, severity)
            )
            violations.extend(
                self._check_file_name(path.name, rel_path, rules, severity)
            )

        if rules.required_file_name_patterns:
            names = [p.name for p in absolute_paths]
            found = any(
                pattern.search(name)
                for name in names
                for pattern in rules.required_file_name_patterns
            )
            if not found:
                listed = ", ".join(p.pattern for p in rules.required_file_name_patterns)
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"Required file name pattern not found: {listed}",
                        severity=severity,
                    )
                )

        score = decay_score(violations, self.dampening)
        return ValidationResult(
            kind=self.kind,
            passed=not violations,
            score=score,
            violations=violations,
        )

    def _check_content(
        self, content: str, rel_path: str, rules: PatternRules, severity: str
    ) -> list[Violation]:
        violations: list[Violation] = []

        for pattern in rules.forbidden_patterns:
            for line_no, text in find_pattern_matches(content, pattern):
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"Forbidden pattern found: {pattern.pattern}",
                        file=rel_path,
                        line=line_no,
                        severity=severity,
                        details=f'Matched: "{text}"',
                    )
                )

        for pattern in rules.required_patterns:
            if not pattern.search(content):
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"Required pattern not found: {pattern.pattern}",
                        file=rel_path,
                        severity=severity,
                    )
                )

        for marker in rules.forbidden_imports:
            if marker in content:
                location = find_line_with_text(content, marker)
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"Forbidden import found: {marker}",
                        file=rel_path,
                        line=location[0] if location else None,
                        severity=severity,
                        details=f'Line: "{location[1]}"' if location else None,
                    )
                )

        for marker in rules.required_imports:
            if marker not in content:
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"Required import not found: {marker}",
                        file=rel_path,
                        severity=severity,
                    )
                )

        return violations

    def _check_file_name(
        self, file_name: str, rel_path: str, rules: PatternRules, severity: str
    ) -> list[Violation]:
        return [
            Violation(
                kind=self.kind,
                message=f"Forbidden file name pattern: {pattern.pattern}",
                file=rel_path,
                severity=severity,
                details=f'File name: "{file_name}"',
            )
            for pattern in rules.forbidden_file_name_patterns
            if pattern.search(file_name)
        ]
