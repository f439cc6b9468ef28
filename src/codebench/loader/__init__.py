"""codebench YAML loader - parsing, validation, and error reporting."""

from codebench.loader.scenarios import (
    ScenarioError,
    collect_scenarios,
    discover_scenario_files,
    load_scenario_file,
    load_scenarios,
)
from codebench.loader.yaml_parser import (
    YAMLParseError,
    parse_yaml_file,
    parse_yaml_with_lines,
)

__all__ = [
    "ScenarioError",
    "YAMLParseError",
    "collect_scenarios",
    "discover_scenario_files",
    "load_scenario_file",
    "load_scenarios",
    "parse_yaml_file",
    "parse_yaml_with_lines",
]
