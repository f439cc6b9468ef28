"""YAML parser with line tracking for scenario error reporting.

A PyYAML SafeLoader subclass records the source position of every
mapping key under its dotted path (list items contribute their index),
so validation errors can point at the offending line of a scenario
file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

LineMap = dict[str, tuple[int, int]]


class YAMLParseError(Exception):
    """Raised when YAML syntax cannot be parsed.

    Attributes:
        line: 1-indexed line number where the error occurred.
        column: 1-indexed column number where the error occurred.
        message: Human-readable description of the syntax error.
        filename: Name of the file being parsed, or '<string>'.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        filename: str = "<string>",
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename
        super().__init__(message)


class LineTrackingLoader(yaml.SafeLoader):
    """SafeLoader that fills ``line_map`` with 1-indexed key positions."""

    def __init__(self, stream: str) -> None:
        super().__init__(stream)
        self.line_map: LineMap = {}
        self._path: list[str] = []

    def _record(self, key: str, node: yaml.Node) -> None:
        mark = node.start_mark
        if mark is not None:
            self.line_map[".".join([*self._path, key])] = (mark.line + 1, mark.column + 1)

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        self.flatten_mapping(node)
        mapping: dict[Any, Any] = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=deep)
            if isinstance(key, str):
                self._record(key, key_node)
                self._path.append(key)
                try:
                    mapping[key] = self.construct_object(value_node, deep=deep)
                finally:
                    self._path.pop()
            else:
                mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping

    def construct_sequence(self, node: yaml.SequenceNode, deep: bool = False) -> list[Any]:
        items: list[Any] = []
        for index, child in enumerate(node.value):
            self._path.append(str(index))
            try:
                items.append(self.construct_object(child, deep=deep))
            finally:
                self._path.pop()
        return items

    def construct_yaml_map(self, node: yaml.MappingNode) -> Any:
        yield self.construct_mapping(node, deep=True)

    def construct_yaml_seq(self, node: yaml.SequenceNode) -> Any:
        yield self.construct_sequence(node, deep=True)


LineTrackingLoader.add_constructor("tag:yaml.org,2002:map", LineTrackingLoader.construct_yaml_map)
LineTrackingLoader.add_constructor("tag:yaml.org,2002:seq", LineTrackingLoader.construct_yaml_seq)


def parse_yaml_with_lines(source: str, filename: str = "<string>") -> tuple[Any, LineMap]:
    """Parse a YAML string and return (data, line_map).

    Args:
        source: YAML content as a string.
        filename: Filename for error messages.

    Returns:
        A tuple of (parsed_data, line_map). ``parsed_data`` is None for
        empty or comment-only input.

    Raises:
        YAMLParseError: If the YAML contains syntax errors.
    """
    loader = LineTrackingLoader(source)
    try:
        data = loader.get_single_data()
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise YAMLParseError(
            message=str(e),
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
            filename=filename,
        ) from e
    finally:
        loader.dispose()
    return data, loader.line_map


def parse_yaml_file(filepath: Path) -> tuple[Any, LineMap]:
    """Parse a YAML file and return (data, line_map).

    Raises:
        YAMLParseError: If the file contains YAML syntax errors.
        FileNotFoundError: If the file does not exist.
    """
    return parse_yaml_with_lines(filepath.read_text(encoding="utf-8"), filename=str(filepath))
