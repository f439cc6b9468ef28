"""codebench init CLI command for project scaffolding.

Creates codebench.yaml, example scenarios and a .gitignore entry for
the benchmarks directory. Non-interactive.
"""

from __future__ import annotations

from pathlib import Path

import typer

from codebench.scaffold.init import ProjectExistsError, scaffold_project


def init(
    directory: str = typer.Argument(".", help="Directory to initialize"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite existing files"
    ),
) -> None:
    """Initialize a new codebench project with example scenarios."""
    target = Path(directory).resolve()

    try:
        created = scaffold_project(target, force=force)
    except ProjectExistsError as e:
        typer.echo(f"Error: Files already exist: {', '.join(e.conflicting_files)}", err=True)
        typer.echo("Use --force to overwrite existing files.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Initialized codebench project in {target}")
    for path in created:
        typer.echo(f"  created {path}")
    typer.echo("\nNext: run 'codebench check', then 'codebench evaluate'.")
