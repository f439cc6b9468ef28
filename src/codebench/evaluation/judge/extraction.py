"""Judge response extraction and validation.

Parses the judge model's text into a validated JudgeResponse. JSON is
located with a text fallback chain in case the model wraps its answer
in prose or a fenced block.
"""

from __future__ import annotations

import json
import re
from typing import Literal

from pydantic import BaseModel, Field, ValidationError


class CriterionEvaluation(BaseModel):
    """One criterion verdict returned by the judge."""

    criterion: str
    result: Literal["PASS", "FAIL", "N/A"]
    explanation: str = ""


class JudgeResponse(BaseModel):
    """Validated judge answer. ``overallScore`` is accepted as the wire name."""

    model_config = {"populate_by_name": True}

    evaluations: list[CriterionEvaluation]
    overall_score: float = Field(alias="overallScore")
    summary: str

    @property
    def failed(self) -> list[CriterionEvaluation]:
        return [e for e in self.evaluations if e.result == "FAIL"]


class JudgeParseError(ValueError):
    """Raised when the judge response is not the expected JSON document."""


def extract_json_from_text(text: str) -> dict | None:
    """Extract a JSON object from a model response.

    Tries three strategies in order:
    1. Direct json.loads on the full text
    2. Markdown code block (```json...```)
    3. Brace extraction (first '{' to last '}')

    Args:
        text: Raw text content from the LLM response.

    Returns:
        Parsed dict or None if all strategies fail.
    """
    if not text:
        return None

    candidates = [text]
    match = re.search(r"```(?:json)?\s*\n(.*?)\n\s*```", text, re.DOTALL)
    if match:
        candidates.append(match.group(1))
    first_brace = text.find("{")
    last_brace = text.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        candidates.append(text[first_brace : last_brace + 1])

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(result, dict):
            return result
    return None


def parse_judge_response(content: str | None) -> JudgeResponse:
    """Parse and validate the judge's message content.

    Raises:
        JudgeParseError: If the content is empty, not JSON, or misses
            any of ``evaluations``, ``overallScore`` or ``summary``.
    """
    if not content:
        raise JudgeParseError("No content in LLM response")
    data = extract_json_from_text(content)
    if data is None:
        raise JudgeParseError(f"Failed to parse LLM response as JSON\nContent: {content}")
    try:
        return JudgeResponse.model_validate(data)
    except ValidationError as exc:
        raise JudgeParseError(
            f"Invalid judgment structure: {exc}\nContent: {content}"
        ) from exc
