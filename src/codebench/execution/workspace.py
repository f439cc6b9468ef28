"""Workspace root resolution and file path helpers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from codebench.errors import WorkspaceError
from codebench.execution.git import get_git_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextFile:
    """A reference file handed to the agent alongside the prompt."""

    path: str
    content: str


def resolve_workspace_root(explicit_root: str | Path | None = None) -> Path:
    """Resolve the directory generated files are read from.

    Priority: the explicit root, then the enclosing git repository root,
    then the current working directory.

    Args:
        explicit_root: Optional root from configuration or the CLI.

    Returns:
        Absolute workspace root path.

    Raises:
        WorkspaceError: If an explicit root is given but does not exist.
    """
    if explicit_root:
        resolved = Path(explicit_root).resolve()
        if not resolved.exists():
            raise WorkspaceError(f"Specified workspace root does not exist: {resolved}")
        return resolved

    try:
        return get_git_root()
    except WorkspaceError:
        logger.debug("Not inside a git repository, using cwd as workspace root")

    return Path.cwd()


def resolve_file_paths(workspace_root: Path, paths: list[str]) -> list[Path]:
    """Resolve relative paths against the workspace root; absolute paths pass through."""
    resolved: list[Path] = []
    for raw in paths:
        path = Path(raw)
        resolved.append(path if path.is_absolute() else workspace_root / path)
    return resolved


def relative_to_root(workspace_root: Path, path: Path) -> str:
    """Path as reported to users: relative to the workspace root, posix separators."""
    return Path(os.path.relpath(path, workspace_root)).as_posix()


def read_context_files(workspace_root: Path, context_files: list[str]) -> list[ContextFile]:
    """Read context files, skipping (with a warning) any that are missing or unreadable."""
    results: list[ContextFile] = []
    for absolute in resolve_file_paths(workspace_root, context_files):
        if not absolute.exists():
            logger.warning("Context file not found: %s", absolute)
            continue
        try:
            content = absolute.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read context file %s: %s", absolute, exc)
            continue
        results.append(
            ContextFile(path=relative_to_root(workspace_root, absolute), content=content)
        )
    return results
