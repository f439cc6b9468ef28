"""Scenario loading: YAML parsing with line tracking plus pydantic validation.

A scenario file holds either a single scenario mapping or a mapping
with a ``scenarios:`` list. Errors from both stages are enriched with
source positions and collected so every problem is reported at once.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from codebench.errors import ConfigError
from codebench.loader.yaml_parser import LineMap, YAMLParseError, parse_yaml_file
from codebench.models.scenario import Scenario

VALID_SCENARIO_FIELDS: list[str] = list(Scenario.model_fields.keys())

SCENARIO_SUFFIXES = (".yaml", ".yml")


@dataclass
class ScenarioError:
    """A single scenario file problem with its source position.

    Attributes:
        file: Path of the scenario file.
        field: Dotted field path that caused the error, or '<yaml>'.
        message: Human-readable error description.
        type: Error type string (pydantic type or a loader code).
        line: 1-indexed line number, or None if unknown.
        col: 1-indexed column number, or None if unknown.
        suggestion: 'Did you mean X?' hint for misspelled fields.
    """

    file: str
    field: str
    message: str
    type: str
    line: int | None = None
    col: int | None = None
    suggestion: str | None = None

    def format(self) -> str:
        location = self.file
        if self.line is not None:
            location += f":{self.line}"
            if self.col is not None:
                location += f":{self.col}"
        text = f"{location}: {self.field}: {self.message}"
        if self.suggestion:
            text += f" ({self.suggestion})"
        return text


def _find_position(field_path: str, line_map: LineMap) -> tuple[int | None, int | None]:
    """Position of ``field_path`` or of its nearest recorded ancestor."""
    parts = field_path.split(".")
    while parts:
        prefix = ".".join(parts)
        if prefix in line_map:
            return line_map[prefix]
        parts.pop()
    return None, None


def _suggest(field_name: str) -> str | None:
    matches = difflib.get_close_matches(field_name, VALID_SCENARIO_FIELDS, n=1, cutoff=0.6)
    return f"Did you mean '{matches[0]}'?" if matches else None


def _validate_entry(
    raw: Any, prefix: str, line_map: LineMap, filename: str
) -> tuple[Scenario | None, list[ScenarioError]]:
    try:
        return Scenario.model_validate(raw), []
    except ValidationError as e:
        errors: list[ScenarioError] = []
        for err in e.errors():
            loc = tuple(str(part) for part in err.get("loc", ()))
            field_path = ".".join(filter(None, [prefix, *loc]))
            error_type = err.get("type", "unknown")
            line, col = _find_position(field_path, line_map)
            suggestion = None
            if error_type == "extra_forbidden" and len(loc) == 1:
                suggestion = _suggest(loc[0])
            errors.append(
                ScenarioError(
                    file=filename,
                    field=field_path or "<root>",
                    message=err.get("msg", "Validation error"),
                    type=error_type,
                    line=line,
                    col=col,
                    suggestion=suggestion,
                )
            )
        return None, errors


def load_scenario_file(filepath: Path) -> tuple[list[Scenario], list[ScenarioError]]:
    """Parse and validate every scenario in one YAML file.

    Returns:
        Tuple of (valid scenarios, errors). Valid entries are returned
        even when sibling entries in a ``scenarios:`` list fail.
    """
    filename = str(filepath)
    try:
        data, line_map = parse_yaml_file(filepath)
    except YAMLParseError as e:
        return [], [
            ScenarioError(
                file=filename,
                field="<yaml>",
                message=e.message,
                type="yaml_syntax_error",
                line=e.line,
                col=e.column,
            )
        ]

    if data is None:
        return [], [
            ScenarioError(
                file=filename,
                field="<yaml>",
                message="File is empty or contains only comments",
                type="empty_file",
            )
        ]

    if not isinstance(data, dict):
        return [], [
            ScenarioError(
                file=filename,
                field="<yaml>",
                message="Expected a scenario mapping or a 'scenarios:' list",
                type="invalid_document",
            )
        ]

    if "scenarios" in data and "id" not in data:
        entries = data["scenarios"]
        if not isinstance(entries, list):
            line, col = line_map.get("scenarios", (None, None))
            return [], [
                ScenarioError(
                    file=filename,
                    field="scenarios",
                    message="'scenarios' must be a list",
                    type="list_type",
                    line=line,
                    col=col,
                )
            ]
        pairs = [(entry, f"scenarios.{i}") for i, entry in enumerate(entries)]
    else:
        pairs = [(data, "")]

    scenarios: list[Scenario] = []
    errors: list[ScenarioError] = []
    for raw, prefix in pairs:
        scenario, entry_errors = _validate_entry(raw, prefix, line_map, filename)
        if scenario is not None:
            scenarios.append(scenario)
        errors.extend(entry_errors)
    return scenarios, errors


def discover_scenario_files(directory: Path) -> list[Path]:
    """All ``*.yaml``/``*.yml`` files below ``directory``, sorted by path."""
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.rglob("*") if p.is_file() and p.suffix in SCENARIO_SUFFIXES
    )


def collect_scenarios(paths: list[Path]) -> tuple[list[Scenario], list[ScenarioError]]:
    """Load scenarios from files and directories, checking id uniqueness.

    Directories are searched recursively. Scenarios keep file order,
    then in-file order.
    """
    files: list[Path] = []
    for path in paths:
        files.extend(discover_scenario_files(path) if path.is_dir() else [path])

    scenarios: list[Scenario] = []
    errors: list[ScenarioError] = []
    seen: dict[str, str] = {}
    for filepath in files:
        file_scenarios, file_errors = load_scenario_file(filepath)
        errors.extend(file_errors)
        for scenario in file_scenarios:
            if scenario.id in seen:
                errors.append(
                    ScenarioError(
                        file=str(filepath),
                        field="id",
                        message=(
                            f"Duplicate scenario id '{scenario.id}' "
                            f"(first defined in {seen[scenario.id]})"
                        ),
                        type="duplicate_id",
                    )
                )
                continue
            seen[scenario.id] = str(filepath)
            scenarios.append(scenario)
    return scenarios, errors


def load_scenarios(scenarios_dir: Path) -> list[Scenario]:
    """Load every scenario under a directory for evaluation.

    Raises:
        ConfigError: If the directory holds no scenario files, or any
            file fails to parse or validate.
    """
    if not discover_scenario_files(scenarios_dir):
        raise ConfigError(
            f"No scenario files found in {scenarios_dir}. "
            f"Run 'codebench init' to create example scenarios."
        )
    scenarios, errors = collect_scenarios([scenarios_dir])
    if errors:
        details = "\n".join(f"  {e.format()}" for e in errors)
        raise ConfigError(f"Invalid scenario files:\n{details}")
    return scenarios
