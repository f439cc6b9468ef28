"""Project scaffolding for `codebench init`.

Writes codebench.yaml, a set of example scenarios and a .gitignore
entry for the .benchmarks/ directory. Non-interactive.
"""

from __future__ import annotations

from pathlib import Path

# Template files to generate: (template_name, output_path)
_FILE_MAP: list[tuple[str, str]] = [
    ("codebench.yaml", "codebench.yaml"),
    ("scenarios/typescript-no-any.yaml", "scenarios/typescript-no-any.yaml"),
    ("scenarios/typescript.yaml", "scenarios/typescript.yaml"),
    ("scenarios/react.yaml", "scenarios/react.yaml"),
    ("scenarios/general.yaml", "scenarios/general.yaml"),
]

GITIGNORE_ENTRY = ".benchmarks/"


class ProjectExistsError(Exception):
    """Raised when scaffold_project would overwrite existing files."""

    def __init__(self, conflicting_files: list[str]) -> None:
        self.conflicting_files = conflicting_files
        super().__init__(f"Files already exist: {', '.join(conflicting_files)}")


def _get_templates_dir() -> Path:
    return Path(__file__).parent / "templates"


def _ensure_gitignore(directory: Path) -> str | None:
    gitignore_path = directory / ".gitignore"
    if not gitignore_path.exists():
        gitignore_path.write_text(GITIGNORE_ENTRY + "\n", encoding="utf-8")
        return ".gitignore"
    content = gitignore_path.read_text(encoding="utf-8")
    if GITIGNORE_ENTRY in content.splitlines():
        return None
    if content and not content.endswith("\n"):
        content += "\n"
    gitignore_path.write_text(content + GITIGNORE_ENTRY + "\n", encoding="utf-8")
    return ".gitignore (updated)"


def scaffold_project(directory: Path, force: bool = False) -> list[str]:
    """Generate a codebench project in the given directory.

    Args:
        directory: Target directory for the project.
        force: If True, overwrite existing files. If False, raise
            ProjectExistsError when any target file already exists.

    Returns:
        List of created file paths (relative to directory).

    Raises:
        ProjectExistsError: If target files exist and force is False.
    """
    directory = directory.resolve()
    templates_dir = _get_templates_dir()

    if not force:
        conflicts = [out for _, out in _FILE_MAP if (directory / out).exists()]
        if conflicts:
            raise ProjectExistsError(conflicts)

    created: list[str] = []
    for template_name, output_path in _FILE_MAP:
        target = directory / output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            (templates_dir / template_name).read_text(encoding="utf-8"), encoding="utf-8"
        )
        created.append(output_path)

    gitignore = _ensure_gitignore(directory)
    if gitignore is not None:
        created.append(gitignore)
    return created
