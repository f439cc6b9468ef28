"""codebench check -- report agent CLI and judge credential availability."""

from __future__ import annotations

import asyncio

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from codebench.adapters.registry import BUILTIN_ADAPTERS, get_adapter
from codebench.evaluation.judge.auth import check_github_auth
from codebench.execution.workspace import resolve_workspace_root


async def _check_adapters() -> dict[str, bool]:
    workspace = resolve_workspace_root()
    availability: dict[str, bool] = {}
    for name in BUILTIN_ADAPTERS:
        availability[name] = await get_adapter(name, workspace).check_availability()
    return availability


def check() -> None:
    """Check which agent CLIs are installed and whether the LLM judge can authenticate.

    Exits with code 1 when no agent CLI is available.
    """
    console = Console()
    availability = asyncio.run(_check_adapters())

    table = Table(box=box.SIMPLE)
    table.add_column("Component", style="bold")
    table.add_column("Status")
    table.add_column("Details", style="dim")
    for name, available in availability.items():
        status = "[green]✓ available[/green]" if available else "[red]✗ not found[/red]"
        table.add_row(f"adapter: {name}", status, "")

    auth = check_github_auth()
    auth_status = "[green]✓ available[/green]" if auth.available else "[yellow]○ missing[/yellow]"
    table.add_row("llm-judge token", auth_status, auth.message)
    console.print(table)

    if not any(availability.values()):
        console.print("[bold red]No agent CLI found.[/bold red] Install copilot or claude.")
        raise typer.Exit(code=1)
