"""LintValidator -- ESLint over generated JavaScript/TypeScript files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from codebench.evaluation.scorer import decay_score
from codebench.evaluation.validators.base import BaseValidator
from codebench.execution.process import run_process
from codebench.execution.workspace import relative_to_root, resolve_file_paths
from codebench.models.result import ValidationResult, Violation
from codebench.models.scenario import Scenario, Severity

logger = logging.getLogger(__name__)

LINTABLE_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})
LINT_TIMEOUT_MS = 120_000


def parse_eslint_output(output: str, rel_path: str, kind: str = "eslint") -> list[Violation]:
    """Convert ``eslint --format json`` output into violations.

    ESLint severity 2 (error) maps to ``major``; anything else to ``minor``.

    Raises:
        ValueError: If ``output`` is not the expected JSON array.
    """
    results = json.loads(output)
    if not isinstance(results, list):
        raise ValueError("ESLint output is not a JSON array")

    violations: list[Violation] = []
    for result in results:
        for message in result.get("messages") or []:
            severity: Severity = "major" if message.get("severity") == 2 else "minor"
            violations.append(
                Violation(
                    kind=kind,
                    message=f"{message.get('ruleId')}: {message.get('message')}",
                    file=rel_path,
                    line=message.get("line"),
                    severity=severity,
                    details=f"Column {message.get('column')}",
                )
            )
    return violations


class LintValidator(BaseValidator):
    """Runs ``npx eslint`` on each changed JS/TS file.

    Skips when the scenario does not enable it or when ESLint is not
    installed in the workspace. Scores with a dampening of 2.0 by
    default, so lint findings weigh half as much as pattern findings.
    """

    kind = "eslint"

    def __init__(self, workspace_root: Path, dampening: float = 2.0) -> None:
        self.workspace_root = workspace_root
        self.dampening = dampening
        self._available: bool | None = None

    async def check_availability(self) -> bool:
        """True if ``npx eslint --version`` succeeds in the workspace. Cached."""
        if self._available is None:
            try:
                result = await run_process(
                    ["npx", "eslint", "--version"],
                    cwd=self.workspace_root,
                    timeout_ms=LINT_TIMEOUT_MS,
                )
                self._available = result.returncode == 0
            except (OSError, TimeoutError):
                self._available = False
        return self._available

    async def validate(self, files: list[str], scenario: Scenario) -> ValidationResult:
        lint_config = scenario.validation_strategy.eslint
        if lint_config is None or not lint_config.enabled:
            return ValidationResult.skip(self.kind, "eslint not enabled")

        if not await self.check_availability():
            logger.warning("ESLint not found in project, skipping ESLint validation")
            return ValidationResult.skip(self.kind, "ESLint not found")

        violations: list[Violation] = []
        for path in resolve_file_paths(self.workspace_root, files):
            if not path.exists() or path.suffix.lower() not in LINTABLE_EXTENSIONS:
                continue

            cmd = ["npx", "eslint"]
            if lint_config.config_path:
                cmd += ["--config", lint_config.config_path]
            cmd += ["--format", "json", str(path)]

            rel_path = relative_to_root(self.workspace_root, path)
            try:
                result = await run_process(
                    cmd, cwd=self.workspace_root, timeout_ms=LINT_TIMEOUT_MS
                )
            except (OSError, TimeoutError) as exc:
                return ValidationResult.failure(
                    self.kind, f"ESLint validation failed: {exc}"
                )

            # eslint exits 1 when it reports problems; the JSON is still on stdout
            try:
                violations.extend(parse_eslint_output(result.stdout, rel_path, self.kind))
            except ValueError:
                violations.append(
                    Violation(
                        kind=self.kind,
                        message=f"ESLint failed for {path.name}",
                        file=rel_path,
                        severity=scenario.severity,
                        details=result.stderr.strip() or f"exit code {result.returncode}",
                    )
                )

        return ValidationResult(
            kind=self.kind,
            passed=not violations,
            score=decay_score(violations, self.dampening),
            violations=violations,
        )
