"""Main CLI application for rnbox."""

import logging
import sys
from typing import Annotated

import typer
from pydantic import ValidationError

from rnbox import __version__
from rnbox.config.settings import RnboxSettings, load_settings
from rnbox.core.logging import setup_logging

from .commands import register_all_commands
from .decorators import print_stack_trace_if_verbose


__all__ = ["app", "main", "AppContext"]

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        settings: RnboxSettings,
        verbose: int = 0,
        log_file: str | None = None,
    ):
        self.settings = settings
        self.verbose = verbose
        self.log_file = log_file


app = typer.Typer(
    name="rnbox",
    help=f"""rnbox React Native end-to-end testing harness v{__version__}

Tests a React Native release candidate locally against the artifacts
CircleCI built for the current branch.

Common workflows:
  • Test RNTester:    rnbox test-e2e-local -t RNTester -p Android -c $CIRCLE_CI_TOKEN
  • Test a new app:   rnbox test-e2e-local -t RNTestProject -p iOS
  • Find an artifact: rnbox artifacts resolve --branch main --job test_android --path app-hermes""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Also write JSON logs to this file")
    ] = None,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Render console logs as JSON")
    ] = False,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """rnbox React Native end-to-end testing harness."""
    if version:
        print(f"rnbox v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        raise typer.Exit(1) from e

    # Set log level based on verbosity, debug flag, or settings
    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = settings.log_level

    setup_logging(log_level_name=log_level_name, json_logs=json_logs, log_file=log_file)

    ctx.obj = AppContext(settings=settings, verbose=verbose, log_file=log_file)


register_all_commands(app)


def main() -> int:
    """Main CLI entry point."""
    try:
        app()
        exit_code = 0
    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
