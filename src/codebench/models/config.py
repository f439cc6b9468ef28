"""Project configuration model for codebench.

Captures codebench.yaml fields with sensible defaults for
project-level settings like adapter, judge model, timeouts and paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from codebench.errors import ConfigError
from codebench.models.scenario import UNSET, TimeoutSetting

CONFIG_FILENAME = "codebench.yaml"
BENCHMARKS_DIR = ".benchmarks"


class ScoringConfig(BaseModel):
    """Exponential-decay dampening per validator kind.

    A larger dampening factor makes the score fall off more slowly
    as violation weight accumulates.
    """

    model_config = {"extra": "forbid"}

    pattern_dampening: float = Field(default=1.0, gt=0.0)
    lint_dampening: float = Field(default=2.0, gt=0.0)


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from codebench.yaml.

    ``default_timeout_ms`` follows the same tri-state rule as the
    scenario field: omitted means "use the built-in default", ``null``
    means "no timeout".
    """

    model_config = {"extra": "forbid"}

    default_adapter: Literal["copilot", "claude-code"] = "copilot"
    default_model: str = "openai/gpt-4.1"
    adapter_model: str | None = None
    default_timeout_ms: int | None = Field(default=None, gt=0)
    workspace_root: str | None = None
    scenarios_dir: str = "scenarios"
    output_dir: str = ".benchmarks/reports"
    pass_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    save_baseline: bool = False
    compare_baseline: bool = False
    reset_workspace: bool = False
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

    @property
    def timeout_setting(self) -> TimeoutSetting:
        """Batch default timeout, or UNSET when omitted from the file."""
        if "default_timeout_ms" not in self.model_fields_set:
            return UNSET
        return self.default_timeout_ms


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for codebench.yaml or .benchmarks/.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        Path to the project root directory containing codebench.yaml or
        .benchmarks/, or cwd if neither is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists() or (current / BENCHMARKS_DIR).is_dir():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from codebench.yaml. Returns defaults if not found.

    Args:
        project_root: Path to the project root directory. If None,
            uses find_project_root() to locate it.

    Returns:
        Validated ProjectConfig instance.

    Raises:
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
    if raw is None:
        return ProjectConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")
    try:
        return ProjectConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
