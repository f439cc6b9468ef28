"""Rich terminal output layer for evaluation runs.

Provides the progress reporter that subscribes to engine events, the
per-scenario result lines, the summary table and JSON output.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from codebench.execution.events import (
    Event,
    EvaluationFinished,
    EvaluationStarted,
    LogMessage,
    PhaseChanged,
    ScenarioCompleted,
    ScenarioStarted,
)

if TYPE_CHECKING:
    from codebench.models.result import (
        BaselineComparison,
        EvaluationReport,
        EvaluationResult,
        Violation,
    )


# Status styling map: status -> (symbol, Rich markup style)
_STATUS_STYLES: dict[str, tuple[str, str]] = {
    "PASS": ("✓ PASS", "bold green"),
    "FAIL": ("✗ FAIL", "bold red"),
    "SKIP": ("○ SKIP", "bold yellow"),
}


def result_status(result: EvaluationResult) -> str:
    """PASS, FAIL or SKIP (the scenario errored before it could be scored)."""
    if result.error is not None:
        return "SKIP"
    return "PASS" if result.passed else "FAIL"


def format_duration(ms: int) -> str:
    if ms < 1000:
        return f"{ms}ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s"


def format_comparison(comparison: BaselineComparison) -> str:
    if comparison.delta > 0:
        style, arrow = "green", "↑"
    elif comparison.delta < 0:
        style, arrow = "red", "↓"
    else:
        style, arrow = "dim", "="
    return (
        f"[{style}]{arrow} {comparison.delta:+.2f}[/{style}] "
        f"[dim](baseline: {comparison.baseline_score:.2f})[/dim]"
    )


def render_violations(violations: list[Violation], console: Console) -> None:
    if not violations:
        return
    console.print(f"    {len(violations)} violation(s):")
    for i, v in enumerate(violations, 1):
        console.print(f"    {i}. " + escape(f"[{v.severity}] [{v.kind}] {v.message}"))
        if v.file:
            location = f"{v.file}:{v.line}" if v.line else v.file
            console.print(f"       [dim]File: {escape(location)}[/dim]")
        if v.details:
            console.print(f"       [dim]Details: {escape(v.details)}[/dim]")


def render_result(
    result: EvaluationResult,
    console: Console,
    index: int | None = None,
    total: int | None = None,
) -> None:
    """Print one scenario's outcome line plus violations and errors."""
    status = result_status(result)
    symbol, style = _STATUS_STYLES[status]
    prefix = f"[{index}/{total}] " if index is not None and total is not None else ""
    console.print(
        f"[{style}]{symbol}[/{style}] {escape(prefix)}{escape(result.scenario.id)} "
        f"[dim](score: {result.score:.2f}) {format_duration(result.duration_ms)}[/dim]"
    )
    if status != "PASS":
        render_violations(result.violations, console)
    if result.error:
        console.print(f"    [red]Error: {escape(result.error)}[/red]")
    if result.baseline_comparison is not None:
        console.print(f"    Baseline: {format_comparison(result.baseline_comparison)}")


def render_summary(report: EvaluationReport, console: Console) -> None:
    """Render the batch summary as a compact key-value table."""
    summary = report.summary
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Adapter", report.adapter + (f" ({report.adapter_model})" if report.adapter_model else ""))
    if report.model:
        table.add_row("Judge model", report.model)
    table.add_row("Total", str(summary.total))
    table.add_row("Passed", f"[green]{summary.passed}[/green]")
    table.add_row("Failed", f"[red]{summary.failed}[/red]" if summary.failed else "0")
    table.add_row("Skipped", f"[yellow]{summary.skipped}[/yellow]" if summary.skipped else "0")
    table.add_row("Average score", f"{summary.average_score:.2f}")
    table.add_row("Violations", str(summary.total_violations))
    table.add_row("Duration", format_duration(report.total_duration_ms))

    console.print()
    console.print("[bold]Summary[/bold]")
    console.print(table)


def create_progress(console: Console) -> Progress | None:
    """Create a transient progress display, or None when not on a terminal."""
    if not console.is_terminal:
        return None
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


class ProgressReporter:
    """Event subscriber that renders evaluation progress with Rich.

    On a terminal a transient progress bar shows the running scenario
    and its phase; otherwise only result lines are printed.
    """

    def __init__(self, console: Console, verbose: bool = False) -> None:
        self.console = console
        self.verbose = verbose
        self._progress: Progress | None = None
        self._task: int | None = None
        self._positions: dict[str, tuple[int, int]] = {}

    def __call__(self, event: Event) -> None:
        if isinstance(event, EvaluationStarted):
            self._on_start(len(event.scenarios))
        elif isinstance(event, ScenarioStarted):
            self._positions[event.scenario_id] = (event.index, event.total)
            self._describe(f"[{event.index}/{event.total}] {event.scenario_id}")
        elif isinstance(event, PhaseChanged):
            if event.phase in ("generating", "validating"):
                index, total = self._positions.get(event.scenario_id, (0, 0))
                self._describe(f"[{index}/{total}] {event.scenario_id} {event.phase}...")
        elif isinstance(event, LogMessage):
            if self.verbose:
                self.console.print(f"  [dim]{escape(event.message)}[/dim]")
        elif isinstance(event, ScenarioCompleted):
            index, total = self._positions.get(event.scenario_id, (None, None))
            render_result(event.result, self.console, index, total)
            if self._progress is not None and self._task is not None:
                self._progress.advance(self._task)
        elif isinstance(event, EvaluationFinished):
            self._stop()

    def _on_start(self, total: int) -> None:
        self.console.print(f"Evaluating {total} scenario(s)...")
        self._progress = create_progress(self.console)
        if self._progress is not None:
            self._progress.start()
            self._task = self._progress.add_task("starting", total=total)

    def _describe(self, text: str) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.update(self._task, description=escape(text))

    def _stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None


def output_json(report: EvaluationReport) -> None:
    """Write the report as pure JSON to stdout.

    No Rich markup, no color, no extra text. Suitable for CI pipeline
    consumption and machine parsing.
    """
    sys.stdout.write(report.model_dump_json(indent=2))
    sys.stdout.write("\n")


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through a RichHandler on stderr.

    WARNING and above by default; DEBUG when ``verbose`` is set.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
