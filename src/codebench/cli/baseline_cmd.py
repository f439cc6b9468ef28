"""codebench baseline -- inspect and delete stored baselines."""

from __future__ import annotations

from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codebench.errors import BaselineStoreError, ConfigError
from codebench.models.config import find_project_root, load_project_config
from codebench.storage.baseline_store import DEFAULT_MODEL_KEY, BaselineStore

baseline_app = typer.Typer(
    name="baseline",
    help="Inspect and delete stored baselines",
    no_args_is_help=True,
)


def _default_adapter() -> str:
    try:
        return load_project_config(find_project_root()).default_adapter
    except ConfigError:
        return "copilot"


@baseline_app.command("list")
def list_baselines(
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Adapter name"),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Only baselines for this generation model"
    ),
) -> None:
    """List stored baselines for an adapter."""
    adapter_name = adapter or _default_adapter()
    store = BaselineStore(find_project_root())
    records = store.list_baselines(adapter_name, model)

    console = Console()
    if not records:
        console.print(f"No baselines stored for adapter '{adapter_name}'.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Scenario", style="bold")
    table.add_column("Model")
    table.add_column("Score", justify="right")
    table.add_column("Violations", justify="right")
    table.add_column("Saved", style="dim")
    for record in records:
        table.add_row(
            record.scenario_id,
            record.model,
            f"{record.score:.2f}",
            str(len(record.violations)),
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


@baseline_app.command("delete")
def delete_baselines(
    scenario_id: Optional[str] = typer.Argument(None, help="Scenario id to delete"),
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Adapter name"),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Generation model the baseline was saved for"
    ),
    delete_all: bool = typer.Option(
        False, "--all", help="Delete every baseline for the adapter (and model, if given)"
    ),
) -> None:
    """Delete one baseline, or all baselines with --all."""
    err_console = Console(stderr=True)
    if scenario_id is None and not delete_all:
        err_console.print("[bold red]Error:[/bold red] Give a scenario id or use --all.")
        raise typer.Exit(code=1)

    adapter_name = adapter or _default_adapter()
    store = BaselineStore(find_project_root())
    try:
        if delete_all:
            count = store.delete_all_baselines(adapter_name, model)
            typer.echo(f"Deleted {count} baseline(s) for adapter '{adapter_name}'.")
            return
        assert scenario_id is not None
        deleted = store.delete_baseline(adapter_name, model or DEFAULT_MODEL_KEY, scenario_id)
    except BaselineStoreError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if not deleted:
        err_console.print(f"No baseline found for scenario '{scenario_id}'.")
        raise typer.Exit(code=1)
    typer.echo(f"Deleted baseline for scenario '{scenario_id}'.")
