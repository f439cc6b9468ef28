"""codebench validate CLI command for scenario file validation.

Validates YAML scenario files against the scenario schema, reporting
all errors at once with their source positions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from codebench.errors import ConfigError
from codebench.loader.scenarios import collect_scenarios, discover_scenario_files
from codebench.models.config import find_project_root, load_project_config


def validate(
    scenarios: Optional[list[str]] = typer.Argument(
        None, help="Scenario files or directories (default: the configured scenarios dir)"
    ),
) -> None:
    """Validate scenario YAML files.

    Checks YAML syntax, schema validation and id uniqueness, reporting
    all errors at once. Exits with code 0 if all valid, 1 if any errors.
    """
    console = Console()
    err_console = Console(stderr=True)

    paths: list[Path] = []
    if scenarios:
        for s in scenarios:
            p = Path(s)
            if not p.exists():
                err_console.print(f"[bold red]Error:[/bold red] File not found: {s}")
                raise typer.Exit(code=1)
            paths.append(p)
    else:
        project_root = find_project_root()
        try:
            config = load_project_config(project_root)
        except ConfigError as exc:
            err_console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=1)
        scenarios_dir = project_root / config.scenarios_dir
        if not discover_scenario_files(scenarios_dir):
            err_console.print(
                "No scenario files found. Specify files or create a scenarios/ directory."
            )
            raise typer.Exit(code=1)
        paths.append(scenarios_dir)

    valid, errors = collect_scenarios(paths)

    for error in errors:
        err_console.print(f"[red]✗[/red] {escape(error.format())}", highlight=False)
    for scenario in valid:
        console.print(f"[green]✓[/green] {scenario.id}", highlight=False)

    console.print(f"\n{len(valid)} scenario(s) valid, {len(errors)} error(s)")

    if errors:
        raise typer.Exit(code=1)
