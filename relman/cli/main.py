"""CLI entrypoint that wires the release subcommands into a Typer app."""

import typer

from ..core.log import configure_logging
from .commands.deploy import app as deploy_app
from .commands.initialize import app as initialize_app
from .commands.prepare import app as prepare_app

app = typer.Typer(add_completion=False, help="Manages the multi-repository release pipeline and process.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    configure_logging(verbose=verbose, log_file=log_file)


app.add_typer(initialize_app, help="Open release pull requests")
app.add_typer(prepare_app, help="Validate pull requests and pipelines")
app.add_typer(deploy_app, help="Promote branches across environments")


if __name__ == "__main__":
    app()
