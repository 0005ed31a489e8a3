"""Commands to look up and download single CircleCI artifacts."""

from pathlib import Path
from typing import Annotated
from urllib.parse import urlparse

import typer
from rich.console import Console

from rnbox.circleci.artifacts import CircleCIArtifacts
from rnbox.cli.decorators import handle_errors
from rnbox.config.settings import RnboxSettings
from rnbox.core.errors import ConfigError

from ._context import get_settings


console = Console()

artifacts_app = typer.Typer(
    name="artifacts",
    help="""Resolve CircleCI artifacts of the last pipeline of a branch.

Both the package_and_publish_release_dryrun and the tests workflows must have
succeeded. Artifacts are matched by job name and a fragment of their path.""",
    no_args_is_help=True,
)

BranchOption = Annotated[
    str, typer.Option("--branch", "-b", help="Branch whose last pipeline is used")
]
JobOption = Annotated[str, typer.Option("--job", "-j", help="Exact job name")]
PathOption = Annotated[
    str, typer.Option("--path", "-p", help="Fragment of the artifact path")
]
TokenOption = Annotated[
    str | None,
    typer.Option("--circleci-token", "-c", help="CircleCI API token"),
]


def _initialized_artifacts(settings: RnboxSettings, branch: str) -> CircleCIArtifacts:
    if not settings.circleci_token:
        raise ConfigError(
            "A CircleCI token is required, pass --circleci-token or set RNBOX_CIRCLECI_TOKEN"
        )
    artifacts = CircleCIArtifacts.from_settings(settings)
    artifacts.initialize(branch)
    return artifacts


@artifacts_app.command("resolve")
@handle_errors
def resolve(
    ctx: typer.Context,
    branch: BranchOption,
    job: JobOption,
    path: PathOption,
    circleci_token: TokenOption = None,
) -> None:
    """Print the URL of the first artifact of JOB whose path contains PATH."""
    settings = get_settings(ctx, circleci_token=circleci_token)
    artifacts = _initialized_artifacts(settings, branch)
    url = artifacts.find_artifact_url(job, path)
    console.print(url, highlight=False, soft_wrap=True)


@artifacts_app.command("download")
@handle_errors
def download(
    ctx: typer.Context,
    branch: BranchOption,
    job: JobOption,
    path: PathOption,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Destination (defaults to the staging directory)"),
    ] = None,
    circleci_token: TokenOption = None,
) -> None:
    """Download the first artifact of JOB whose path contains PATH."""
    settings = get_settings(ctx, circleci_token=circleci_token)
    artifacts = _initialized_artifacts(settings, branch)
    url = artifacts.find_artifact_url(job, path)
    destination = output or artifacts.base_tmp_path / Path(urlparse(url).path).name
    saved = artifacts.download_artifact(url, destination)
    console.print(f"[green]Downloaded[/green] {url} -> {saved}", highlight=False)
