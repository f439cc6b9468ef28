"""codebench CLI entry point."""

import typer

from codebench import __version__
from codebench.cli.baseline_cmd import baseline_app
from codebench.cli.check_cmd import check
from codebench.cli.evaluate_cmd import evaluate
from codebench.cli.init_cmd import init
from codebench.cli.list_cmd import list_scenarios
from codebench.cli.output import configure_logging
from codebench.cli.validate_cmd import validate

app = typer.Typer(
    name="codebench",
    help="Benchmark coding-agent CLIs against scenario rules",
    no_args_is_help=True,
)

# Register subcommands
app.command()(evaluate)
app.command(name="list")(list_scenarios)
app.command()(check)
app.command()(validate)
app.command()(init)
app.add_typer(baseline_app, name="baseline")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"codebench {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Benchmark coding-agent CLIs against scenario rules."""
    configure_logging()
