"""Scenario data models for codebench evaluations.

These models encode the user-facing YAML contract for defining
coding-agent scenarios: the prompt handed to the agent CLI and the
validation strategy applied to the files it produces.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["critical", "major", "minor"]

Category = Literal[
    "typescript",
    "react",
    "testing",
    "architecture",
    "performance",
    "general",
]


class _Unset(Enum):
    """Marker type for a timeout that was never configured."""

    UNSET = "unset"


UNSET = _Unset.UNSET
"""Timeout value meaning "not configured here, fall through to the next level"."""

TimeoutSetting = int | None | _Unset


class PatternRules(BaseModel):
    """Textual and filename rules checked by the pattern validator.

    Regex fields accept pattern strings and are compiled at load time.
    Import fields are literal substrings, not regexes.
    """

    model_config = {"extra": "forbid", "frozen": True}

    forbidden_patterns: list[re.Pattern[str]] = Field(default_factory=list)
    required_patterns: list[re.Pattern[str]] = Field(default_factory=list)
    forbidden_imports: list[str] = Field(default_factory=list)
    required_imports: list[str] = Field(default_factory=list)
    forbidden_file_name_patterns: list[re.Pattern[str]] = Field(default_factory=list)
    required_file_name_patterns: list[re.Pattern[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no rule list carries any entry."""
        return not (
            self.forbidden_patterns
            or self.required_patterns
            or self.forbidden_imports
            or self.required_imports
            or self.forbidden_file_name_patterns
            or self.required_file_name_patterns
        )


class JudgeConfig(BaseModel):
    """LLM-as-judge settings for a scenario."""

    model_config = {"extra": "forbid", "frozen": True}

    enabled: bool = False
    judgment_prompt: str | None = None
    model: str | None = None


class LintConfig(BaseModel):
    """ESLint settings for a scenario."""

    model_config = {"extra": "forbid", "frozen": True}

    enabled: bool = False
    config_path: str | None = None


class ValidationStrategy(BaseModel):
    """Per-validator sub-configurations, each independently optional."""

    model_config = {"extra": "forbid", "frozen": True}

    patterns: PatternRules | None = None
    llm_judge: JudgeConfig | None = None
    eslint: LintConfig | None = None


class Scenario(BaseModel):
    """A coding task given to an agent CLI plus the checks applied to its output.

    ``timeout_ms`` is tri-state: leaving it out of the YAML means "use the
    configured default", an explicit ``null`` means "no timeout", and an
    integer is an explicit deadline in milliseconds. Use
    :attr:`timeout_setting` to read it with that distinction preserved.
    """

    model_config = {"extra": "forbid", "frozen": True}

    id: str = Field(min_length=1)
    category: Category = "general"
    severity: Severity = "major"
    tags: list[str] = Field(default_factory=list)
    description: str
    prompt: str = Field(min_length=1)
    context: str | None = None
    context_files: list[str] = Field(default_factory=list)
    validation_strategy: ValidationStrategy = Field(default_factory=ValidationStrategy)
    timeout_ms: int | None = Field(default=None, gt=0)

    @property
    def timeout_setting(self) -> TimeoutSetting:
        """Timeout as configured on this scenario, or UNSET when omitted."""
        if "timeout_ms" not in self.model_fields_set:
            return UNSET
        return self.timeout_ms

    @property
    def full_prompt(self) -> str:
        """Prompt with the inline context appended, if any."""
        if self.context:
            return f"{self.prompt}\n\n{self.context}"
        return self.prompt
