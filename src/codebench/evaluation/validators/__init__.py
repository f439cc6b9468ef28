"""Validator registry -- maps validator kinds to validator classes."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from codebench.evaluation.validators.base import BaseValidator
from codebench.evaluation.validators.judge import JudgeValidator
from codebench.evaluation.validators.lint import LintValidator
from codebench.evaluation.validators.pattern import PatternValidator

if TYPE_CHECKING:
    from codebench.models.config import ProjectConfig

# Insertion order is the order validators run in.
VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
    "pattern": PatternValidator,
    "llm-judge": JudgeValidator,
    "eslint": LintValidator,
}


def default_validators(
    workspace_root: Path, config: ProjectConfig | None = None
) -> list[BaseValidator]:
    """Instantiate every registered validator, in run order.

    Args:
        workspace_root: Directory generated files are resolved against.
        config: Project configuration supplying the judge model and the
            per-kind dampening factors. Defaults apply when None.

    Returns:
        Validators ordered pattern, llm-judge, eslint.
    """
    from codebench.models.config import ProjectConfig

    config = config or ProjectConfig()
    return [
        PatternValidator(workspace_root, dampening=config.scoring.pattern_dampening),
        JudgeValidator(workspace_root, default_model=config.default_model),
        LintValidator(workspace_root, dampening=config.scoring.lint_dampening),
    ]


__all__ = [
    "VALIDATOR_REGISTRY",
    "BaseValidator",
    "JudgeValidator",
    "LintValidator",
    "PatternValidator",
    "default_validators",
]
