"""JudgeValidator -- LLM-as-judge review of generated code.

Sends the scenario and the generated files to a model on the GitHub
Models OpenAI-compatible endpoint and converts each FAIL criterion into
a violation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from codebench.evaluation.judge.auth import get_github_token
from codebench.evaluation.judge.extraction import parse_judge_response
from codebench.evaluation.judge.prompt import JUDGE_SYSTEM_PROMPT, build_judgment_prompt
from codebench.evaluation.validators.base import BaseValidator
from codebench.execution.workspace import ContextFile, relative_to_root, resolve_file_paths
from codebench.models.result import ValidationResult, Violation
from codebench.models.scenario import Scenario

logger = logging.getLogger(__name__)

GITHUB_MODELS_BASE_URL = "https://models.github.ai/inference"
DEFAULT_JUDGE_MODEL = "openai/gpt-4.1"
JUDGE_PASS_SCORE = 0.7

_UNRESOLVED = object()


class JudgeValidator(BaseValidator):
    """LLM-as-judge validator.

    Skips when the scenario does not enable it, when no GitHub token
    can be found, or when the ``openai`` package is not installed.
    Passing requires no FAIL criteria and an overall score of at least
    0.7.
    """

    kind = "llm-judge"

    def __init__(
        self,
        workspace_root: Path,
        default_model: str = DEFAULT_JUDGE_MODEL,
        token: str | None | object = _UNRESOLVED,
        client: Any = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.default_model = default_model
        self._token = token
        self._client = client

    @property
    def token(self) -> str | None:
        """GitHub token, discovered on first use."""
        if self._token is _UNRESOLVED:
            self._token = get_github_token()
        return self._token  # type: ignore[return-value]

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncOpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(base_url=GITHUB_MODELS_BASE_URL, api_key=self.token)
        return self._client

    async def validate(self, files: list[str], scenario: Scenario) -> ValidationResult:
        judge_config = scenario.validation_strategy.llm_judge
        if judge_config is None or not judge_config.enabled:
            return ValidationResult.skip(self.kind, "llm judge not enabled")

        if not self.token:
            logger.warning("GITHUB_TOKEN not found, skipping LLM judge validation")
            return ValidationResult.skip(self.kind, "GITHUB_TOKEN not found")

        try:
            client = self._get_client()
        except ImportError:
            logger.warning("openai package not installed, skipping LLM judge validation")
            return ValidationResult.skip(
                self.kind,
                "openai package not installed (pip install codebench-ai[judge])",
            )

        model = judge_config.model or self.default_model
        try:
            generated = self._read_files(files)
            prompt = build_judgment_prompt(scenario, generated, judge_config.judgment_prompt)
            logger.debug("Calling judge model %s for scenario %s", model, scenario.id)
            response = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": JUDGE_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content if response.choices else None
            judgment = parse_judge_response(content)
        except Exception as exc:
            logger.debug("LLM judge failed for scenario %s", scenario.id, exc_info=True)
            return ValidationResult.failure(self.kind, f"LLM judge failed: {exc}")

        violations = [
            Violation(
                kind=self.kind,
                message=f"{e.criterion}: {e.explanation}",
                severity=scenario.severity,
                details=judgment.summary,
            )
            for e in judgment.failed
        ]
        score = max(0.0, min(1.0, judgment.overall_score))
        passed = not violations and judgment.overall_score >= JUDGE_PASS_SCORE

        return ValidationResult(
            kind=self.kind,
            passed=passed,
            score=score,
            violations=violations,
        )

    def _read_files(self, files: list[str]) -> list[ContextFile]:
        contents: list[ContextFile] = []
        for path in resolve_file_paths(self.workspace_root, files):
            if not path.exists():
                continue
            contents.append(
                ContextFile(
                    path=relative_to_root(self.workspace_root, path),
                    content=path.read_text(encoding="utf-8"),
                )
            )
        return contents
