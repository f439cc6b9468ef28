"""Git helpers for tracking which files a generation run touched.

Changed files are detected by snapshotting ``git status --porcelain``
together with a content digest of every listed path. Comparing the
snapshots taken before and after generation yields only the paths the
agent actually modified, even when the workspace was already dirty.
"""

from __future__ import annotations

import hashlib
import logging
import subprocess
from pathlib import Path

from codebench.errors import WorkspaceError

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 60
_MISSING = "<missing>"

WorkspaceSnapshot = dict[str, tuple[str, str]]
"""Path -> (porcelain status code, content digest)."""


def _run_git(args: list[str], cwd: Path | None = None) -> str:
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT_SECONDS,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise WorkspaceError(
            f"'{' '.join(cmd)}' timed out after {GIT_TIMEOUT_SECONDS}s"
        ) from exc
    except FileNotFoundError as exc:
        raise WorkspaceError("git executable not found on PATH") from exc

    if result.returncode != 0:
        raise WorkspaceError(
            f"'{' '.join(cmd)}' failed with exit code {result.returncode}: "
            f"{result.stderr.strip()}"
        )
    return result.stdout


def git_status_porcelain(workspace_root: Path) -> str:
    """Return ``git status --porcelain`` output with untracked files expanded.

    Raises:
        WorkspaceError: If git is unavailable or the command fails.
    """
    return _run_git(
        ["-c", "core.quotepath=off", "status", "--porcelain", "--untracked-files=all"],
        cwd=workspace_root,
    )


def _unquote(path: str) -> str:
    if len(path) >= 2 and path.startswith('"') and path.endswith('"'):
        return path[1:-1]
    return path


def parse_status_entries(status_output: str) -> list[tuple[str, str]]:
    """Parse porcelain output into (status code, path) pairs.

    Each porcelain line is ``XY <path>``. Renames appear as
    ``old -> new`` and are reported under the new path.
    """
    entries: list[tuple[str, str]] = []
    for line in status_output.splitlines():
        if len(line) <= 3:
            continue
        code = line[:2]
        filename = line[3:].strip()
        if " -> " in filename:
            filename = filename.split(" -> ", 1)[1]
        entries.append((code, _unquote(filename)))
    return entries


def parse_git_status(status_output: str) -> list[str]:
    """Parse porcelain output into the list of changed file paths."""
    return [path for _, path in parse_status_entries(status_output)]


def get_changed_files(workspace_root: Path) -> list[str]:
    """List every path git currently reports as modified or untracked."""
    return parse_git_status(git_status_porcelain(workspace_root))


def _digest(path: Path) -> str:
    if not path.is_file():
        return _MISSING
    hasher = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def take_snapshot(workspace_root: Path) -> WorkspaceSnapshot:
    """Capture status code and content digest for every dirty path.

    Raises:
        WorkspaceError: If git status cannot be read.
    """
    snapshot: WorkspaceSnapshot = {}
    for code, rel_path in parse_status_entries(git_status_porcelain(workspace_root)):
        snapshot[rel_path] = (code, _digest(workspace_root / rel_path))
    return snapshot


def diff_snapshots(before: WorkspaceSnapshot, after: WorkspaceSnapshot) -> list[str]:
    """Paths whose status or content differs between two snapshots.

    A path that was dirty before and is clean afterwards was reverted
    by the agent and counts as changed.
    """
    changed = [path for path in after if before.get(path) != after[path]]
    changed.extend(path for path in before if path not in after)
    return sorted(changed)


def get_git_root(cwd: Path | None = None) -> Path:
    """Return the top-level directory of the enclosing git repository.

    Raises:
        WorkspaceError: If ``cwd`` is not inside a git repository.
    """
    try:
        output = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    except WorkspaceError as exc:
        raise WorkspaceError("Not inside a git repository") from exc
    return Path(output.strip())


def is_git_repository(directory: Path) -> bool:
    """True when ``directory`` is inside a git work tree."""
    try:
        _run_git(["rev-parse", "--git-dir"], cwd=directory)
    except WorkspaceError:
        return False
    return True


def reset_working_directory(workspace_root: Path) -> None:
    """Discard all uncommitted changes and untracked files.

    Runs ``git reset --hard HEAD`` followed by ``git clean -fd``.

    Raises:
        WorkspaceError: If either command fails.
    """
    logger.info("Resetting git working directory at %s", workspace_root)
    _run_git(["reset", "--hard", "HEAD"], cwd=workspace_root)
    _run_git(["clean", "-fd"], cwd=workspace_root)
