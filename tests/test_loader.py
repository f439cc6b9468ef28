"""Tests for scenario YAML loading with line-tracked error reporting."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from codebench.errors import ConfigError
from codebench.loader.scenarios import (
    collect_scenarios,
    discover_scenario_files,
    load_scenario_file,
    load_scenarios,
)
from codebench.loader.yaml_parser import YAMLParseError, parse_yaml_with_lines

SINGLE = """\
id: typescript-no-any
category: typescript
severity: critical
description: No any
prompt: Write an interface
validation_strategy:
  patterns:
    forbidden_patterns:
      - ':\\s*any\\b'
"""

LIST = """\
scenarios:
  - id: first
    description: First
    prompt: Do one
  - id: second
    description: Second
    prompt: Do two
    tags: [a, b]
"""


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestYamlParser:
    """Test parse_yaml_with_lines."""

    def test_records_key_positions(self) -> None:
        data, line_map = parse_yaml_with_lines("id: x\nprompt: y\nvalidation_strategy:\n  patterns: {}\n")
        assert data["id"] == "x"
        assert line_map["id"] == (1, 1)
        assert line_map["prompt"] == (2, 1)
        assert line_map["validation_strategy.patterns"] == (4, 3)

    def test_list_items_contribute_index(self) -> None:
        _, line_map = parse_yaml_with_lines(LIST)
        assert line_map["scenarios.1.tags"] == (8, 5)

    def test_empty_document(self) -> None:
        data, line_map = parse_yaml_with_lines("# only a comment\n")
        assert data is None
        assert line_map == {}

    def test_syntax_error_has_position(self) -> None:
        with pytest.raises(YAMLParseError) as exc_info:
            parse_yaml_with_lines("id: x\nprompt: [unclosed\n", filename="bad.yaml")
        assert exc_info.value.line is not None
        assert exc_info.value.filename == "bad.yaml"


class TestLoadScenarioFile:
    """Test load_scenario_file."""

    def test_single_scenario(self, tmp_path: Path) -> None:
        scenarios, errors = load_scenario_file(_write(tmp_path, "one.yaml", SINGLE))
        assert errors == []
        assert len(scenarios) == 1
        scenario = scenarios[0]
        assert scenario.id == "typescript-no-any"
        assert scenario.severity == "critical"
        pattern = scenario.validation_strategy.patterns.forbidden_patterns[0]
        assert isinstance(pattern, re.Pattern)
        assert pattern.search("let x: any = 1")

    def test_scenario_list(self, tmp_path: Path) -> None:
        scenarios, errors = load_scenario_file(_write(tmp_path, "many.yaml", LIST))
        assert errors == []
        assert [s.id for s in scenarios] == ["first", "second"]
        assert scenarios[0].category == "general"
        assert scenarios[0].severity == "major"
        assert scenarios[1].tags == ["a", "b"]

    def test_unknown_field_has_line_and_suggestion(self, tmp_path: Path) -> None:
        content = "id: x\ndescription: d\nprompt: p\nseverty: major\n"
        _, errors = load_scenario_file(_write(tmp_path, "typo.yaml", content))
        assert len(errors) == 1
        error = errors[0]
        assert error.field == "severty"
        assert error.type == "extra_forbidden"
        assert error.line == 4
        assert error.suggestion == "Did you mean 'severity'?"
        assert "typo.yaml:4:1" in error.format()

    def test_errors_in_list_entry_are_prefixed(self, tmp_path: Path) -> None:
        content = "scenarios:\n  - id: ok\n    description: d\n    prompt: p\n  - id: bad\n    description: d\n    prompt: p\n    severity: fatal\n"
        scenarios, errors = load_scenario_file(_write(tmp_path, "mixed.yaml", content))
        assert [s.id for s in scenarios] == ["ok"]
        assert len(errors) == 1
        assert errors[0].field == "scenarios.1.severity"
        assert errors[0].line == 8

    def test_missing_required_fields(self, tmp_path: Path) -> None:
        _, errors = load_scenario_file(_write(tmp_path, "missing.yaml", "id: x\n"))
        fields = {e.field for e in errors}
        assert {"description", "prompt"} <= fields

    def test_invalid_regex_is_reported(self, tmp_path: Path) -> None:
        content = "id: x\ndescription: d\nprompt: p\nvalidation_strategy:\n  patterns:\n    forbidden_patterns: ['(unclosed']\n"
        scenarios, errors = load_scenario_file(_write(tmp_path, "regex.yaml", content))
        assert scenarios == []
        assert errors
        assert errors[0].field.startswith("validation_strategy.patterns.forbidden_patterns")

    def test_yaml_syntax_error(self, tmp_path: Path) -> None:
        _, errors = load_scenario_file(_write(tmp_path, "broken.yaml", "id: [\n"))
        assert len(errors) == 1
        assert errors[0].type == "yaml_syntax_error"

    def test_empty_file(self, tmp_path: Path) -> None:
        _, errors = load_scenario_file(_write(tmp_path, "empty.yaml", ""))
        assert errors[0].type == "empty_file"

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        _, errors = load_scenario_file(_write(tmp_path, "list.yaml", "- a\n- b\n"))
        assert errors[0].type == "invalid_document"

    def test_scenarios_key_must_be_list(self, tmp_path: Path) -> None:
        _, errors = load_scenario_file(_write(tmp_path, "bad.yaml", "scenarios: nope\n"))
        assert errors[0].type == "list_type"
        assert errors[0].line == 1


class TestCollectScenarios:
    """Test discovery, ordering and id uniqueness."""

    def test_discovers_yaml_and_yml_sorted(self, tmp_path: Path) -> None:
        _write(tmp_path, "b.yml", "")
        _write(tmp_path, "a.yaml", "")
        _write(tmp_path, "nested/c.yaml", "")
        _write(tmp_path, "notes.txt", "")
        names = [p.relative_to(tmp_path).as_posix() for p in discover_scenario_files(tmp_path)]
        assert names == ["a.yaml", "b.yml", "nested/c.yaml"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert discover_scenario_files(tmp_path / "nope") == []

    def test_duplicate_ids_reported(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", "id: dup\ndescription: d\nprompt: p\n")
        _write(tmp_path, "b.yaml", "id: dup\ndescription: d\nprompt: p\n")
        scenarios, errors = collect_scenarios([tmp_path])
        assert len(scenarios) == 1
        assert len(errors) == 1
        assert errors[0].type == "duplicate_id"
        assert "a.yaml" in errors[0].message

    def test_file_and_in_file_order(self, tmp_path: Path) -> None:
        _write(tmp_path, "b.yaml", LIST)
        _write(tmp_path, "a.yaml", SINGLE)
        scenarios, _ = collect_scenarios([tmp_path])
        assert [s.id for s in scenarios] == ["typescript-no-any", "first", "second"]


class TestLoadScenarios:
    """Test load_scenarios for evaluation."""

    def test_loads_all(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", SINGLE)
        assert len(load_scenarios(tmp_path)) == 1

    def test_no_files_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="No scenario files found"):
            load_scenarios(tmp_path)

    def test_invalid_file_raises_with_details(self, tmp_path: Path) -> None:
        _write(tmp_path, "a.yaml", "id: x\n")
        with pytest.raises(ConfigError, match="Invalid scenario files"):
            load_scenarios(tmp_path)
