"""codebench list -- show available scenarios."""

from __future__ import annotations

from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codebench.cli.evaluate_cmd import split_list
from codebench.errors import ConfigError
from codebench.execution.engine import filter_scenarios
from codebench.loader.scenarios import load_scenarios
from codebench.models.config import find_project_root, load_project_config


def list_scenarios(
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Comma-separated categories to include"
    ),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Comma-separated tags to include"),
) -> None:
    """List scenarios in the project's scenarios directory."""
    err_console = Console(stderr=True)
    project_root = find_project_root()
    try:
        config = load_project_config(project_root)
        scenarios = load_scenarios(project_root / config.scenarios_dir)
    except ConfigError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    scenarios = filter_scenarios(scenarios, categories=split_list(category), tags=split_list(tag))
    if not scenarios:
        err_console.print("[yellow]No scenarios match the given filters.[/yellow]")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("ID", style="bold")
    table.add_column("Description")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Tags", style="dim")
    for s in scenarios:
        table.add_row(s.id, s.description, s.category, s.severity, ", ".join(s.tags))

    console = Console()
    console.print(table)
    console.print(f"[dim]{len(scenarios)} scenario(s)[/dim]")
