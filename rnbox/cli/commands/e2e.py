"""Local end-to-end test command."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from rnbox.cli.decorators import handle_errors
from rnbox.e2e import E2EOptions, Platform, Target, run_e2e_local

from ._context import get_settings


logger = logging.getLogger(__name__)


@handle_errors
def e2e_local(
    ctx: typer.Context,
    target: Annotated[
        Target, typer.Option("--target", "-t", help="App to test")
    ] = Target.RNTESTER,
    platform: Annotated[
        Platform, typer.Option("--platform", "-p", help="Platform to run on")
    ] = Platform.IOS,
    hermes: Annotated[
        bool, typer.Option("--hermes/--no-hermes", help="Use Hermes instead of JSC")
    ] = True,
    circleci_token: Annotated[
        str | None,
        typer.Option(
            "--circleci-token",
            "-c",
            help="CircleCI API token (defaults to RNBOX_CIRCLECI_TOKEN)",
        ),
    ] = None,
    branch: Annotated[
        str | None,
        typer.Option("--branch", "-b", help="Branch to take artifacts from (defaults to the checked out one)"),
    ] = None,
    repo_root: Annotated[
        Path,
        typer.Option("--repo-root", help="Root of the react-native checkout"),
    ] = Path("."),
) -> None:
    """Test RNTester or a fresh project against the CI artifacts of a branch.

    Kills a running Metro, resolves the last CircleCI pipeline of the branch,
    downloads the artifacts and builds, installs and launches the app.
    """
    settings = get_settings(ctx, circleci_token=circleci_token)
    options = E2EOptions(target=target, platform=platform, hermes=hermes)
    run_e2e_local(options, settings, repo_root=repo_root, branch_name=branch)


def register_commands(app: typer.Typer) -> None:
    app.command(name="test-e2e-local")(e2e_local)
