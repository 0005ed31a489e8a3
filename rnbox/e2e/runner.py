"""Entry point of a local end-to-end run."""

from pathlib import Path

from rnbox.circleci.artifacts import setup_circleci_artifacts
from rnbox.config.settings import RnboxSettings
from rnbox.core.errors import ConfigError, ProcessError
from rnbox.core.structlog_logger import get_struct_logger
from rnbox.packager import check_packager_running
from rnbox.utils.stream_process import capture_output

from .options import E2EOptions, Target
from .project import run_test_project
from .rntester import run_rntester


logger = get_struct_logger(__name__)


def get_current_branch(repo_root: Path) -> str:
    cmd = ["git", "rev-parse", "--abbrev-ref", "HEAD"]
    output = capture_output(cmd, cwd=repo_root)
    if output.return_code != 0:
        raise ProcessError(
            f"Could not determine the current git branch: {output.stderr.strip()}",
            command=cmd,
            return_code=output.return_code,
        )
    return output.stdout.strip()


def run_e2e_local(
    options: E2EOptions,
    settings: RnboxSettings,
    repo_root: Path | None = None,
    branch_name: str | None = None,
) -> None:
    """Test RNTester or a new project built from the current branch's CI artifacts.

    Raises:
        ConfigError: If no CircleCI token is configured
    """
    if not settings.circleci_token:
        raise ConfigError(
            "A CircleCI token is required, pass --circleci-token or set RNBOX_CIRCLECI_TOKEN"
        )

    repo_root = (repo_root or Path.cwd()).resolve()

    # Start from a fresh Metro
    check_packager_running(settings.metro_port)

    branch_name = branch_name or get_current_branch(repo_root)
    on_release_branch = branch_name.endswith("-stable")
    logger.info(
        "e2e_run_started",
        branch=branch_name,
        target=options.target,
        platform=options.platform,
        hermes=options.hermes,
    )

    circleci_artifacts = setup_circleci_artifacts(
        settings.circleci_token, branch_name, settings=settings
    )
    if circleci_artifacts is None:
        raise ConfigError("CircleCI artifacts could not be set up without a token")

    if options.target == Target.RNTESTER:
        run_rntester(
            circleci_artifacts,
            repo_root,
            options,
            on_release_branch,
            metro_port=settings.metro_port,
            android_home=settings.android_home,
        )
    else:
        run_test_project(circleci_artifacts, repo_root, options)

    logger.info("e2e_run_finished", branch=branch_name)
