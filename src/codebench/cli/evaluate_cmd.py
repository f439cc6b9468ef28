"""codebench evaluate -- run scenarios through a coding agent and score them.

Loads project configuration and scenarios, resolves the workspace and
adapter, drives the evaluation engine with live Rich progress, renders
the summary, optionally exports a JSON report, and exits non-zero when
any scenario failed or was skipped.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from codebench.adapters.registry import get_adapter
from codebench.cli.output import (
    ProgressReporter,
    configure_logging,
    output_json,
    render_summary,
)
from codebench.errors import ConfigError, WorkspaceError
from codebench.evaluation.validators import default_validators
from codebench.execution.engine import EngineOptions, EvaluationEngine, filter_scenarios
from codebench.execution.events import EventBus
from codebench.execution.workspace import resolve_workspace_root
from codebench.loader.scenarios import load_scenarios
from codebench.models.config import find_project_root, load_project_config
from codebench.models.result import EvaluationReport
from codebench.models.scenario import Scenario
from codebench.storage.baseline_store import BaselineStore
from codebench.storage.reports import default_report_path, write_report

console = Console(stderr=True)


def split_list(value: str | None) -> list[str] | None:
    """Split a comma-separated option into trimmed, non-empty items."""
    if not value:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def evaluate(
    scenario: Optional[str] = typer.Option(
        None, "--scenario", "-s", help="Scenario id pattern (supports * wildcards)"
    ),
    category: Optional[str] = typer.Option(
        None, "--category", "-c", help="Comma-separated categories to include"
    ),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Comma-separated tags to include"),
    adapter: Optional[str] = typer.Option(
        None, "--adapter", "-a", help="Agent adapter (copilot, claude-code, or a dotted path)"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model for the LLM judge"),
    adapter_model: Optional[str] = typer.Option(
        None, "--adapter-model", help="Model passed to the agent CLI"
    ),
    threshold: Optional[float] = typer.Option(
        None, "--threshold", min=0.0, max=1.0, help="Override the pass threshold"
    ),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Show per-validator progress and debug logs"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write a JSON report to this path"),
    save_report: bool = typer.Option(
        False, "--report", help="Write a JSON report under the configured output_dir"
    ),
    save_baseline: bool = typer.Option(False, "--save-baseline", help="Save results as the new baseline"),
    compare_baseline: bool = typer.Option(
        False, "--compare-baseline", help="Compare results against the saved baseline"
    ),
    workspace_root: Optional[str] = typer.Option(
        None, "--workspace-root", help="Directory the agent works in (default: git root)"
    ),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """Evaluate coding-agent output against benchmark scenarios."""
    configure_logging(verbose)

    project_root = find_project_root()
    try:
        config = load_project_config(project_root)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    # 1. Workspace: CLI flag, then config (relative to the project), then git root / cwd
    explicit_root: str | Path | None = workspace_root
    if explicit_root is None and config.workspace_root:
        explicit_root = project_root / config.workspace_root
    try:
        workspace = resolve_workspace_root(explicit_root)
    except WorkspaceError as exc:
        console.print(f"[bold red]Workspace error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    # 2. Load and filter scenarios
    try:
        scenarios = load_scenarios(project_root / config.scenarios_dir)
    except ConfigError as exc:
        console.print(f"[bold red]Scenario error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    selected = filter_scenarios(
        scenarios, pattern=scenario, categories=split_list(category), tags=split_list(tag)
    )
    if not selected:
        console.print("[yellow]No scenarios match the given filters.[/yellow]")
        raise typer.Exit(code=0)

    # 3. Resolve adapter
    adapter_name = adapter or config.default_adapter
    generation_model = adapter_model or config.adapter_model
    try:
        agent = get_adapter(adapter_name, workspace, model=generation_model)
    except (ValueError, ImportError, TypeError) as exc:
        console.print(f"[bold red]Adapter error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    # 4. Build engine
    if model:
        config = config.model_copy(update={"default_model": model})
    options = EngineOptions(
        adapter_name=adapter_name,
        model=config.default_model,
        adapter_model=generation_model,
        pass_threshold=threshold if threshold is not None else config.pass_threshold,
        default_timeout=config.timeout_setting,
        save_baseline=save_baseline or config.save_baseline,
        compare_baseline=compare_baseline or config.compare_baseline,
        reset_workspace=config.reset_workspace,
    )
    events = EventBus()
    output_console = Console()
    if not format_json:
        events.subscribe(ProgressReporter(output_console, verbose=verbose))

    engine = EvaluationEngine(
        adapter=agent,
        validators=default_validators(workspace, config),
        workspace_root=workspace,
        options=options,
        baseline_store=BaselineStore(project_root),
        events=events,
    )

    # 5. Run
    report = asyncio.run(_evaluate_async(engine, selected))
    if report is None:
        console.print(
            f"[bold red]Adapter '{adapter_name}' is not available.[/bold red] "
            f"Make sure the agent CLI is installed and on PATH "
            f"(run 'codebench check')."
        )
        raise typer.Exit(code=1)

    # 6. Output
    if format_json:
        output_json(report)
    else:
        render_summary(report, output_console)

    if output is None and save_report:
        output = default_report_path(project_root, config.output_dir, report)
    if output is not None:
        path = write_report(report, output)
        if not format_json:
            output_console.print(f"[dim]Report saved: {path}[/dim]")

    if report.summary.failed > 0 or report.summary.skipped > 0:
        raise typer.Exit(code=1)


async def _evaluate_async(
    engine: EvaluationEngine, scenarios: list[Scenario]
) -> EvaluationReport | None:
    """Check adapter availability, then evaluate. None when unavailable."""
    if not await engine.check_adapter_availability():
        return None
    return await engine.evaluate(scenarios)
