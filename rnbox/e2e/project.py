"""Create a fresh project from the packaged framework and run it."""

import json
import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path

from rnbox.circleci.artifacts import CircleCIArtifacts
from rnbox.utils.stream_process import LoggerOutputMiddleware, run_checked

from .artifacts import download_artifacts_from_circleci, update_template_package
from .options import E2EOptions, Platform


logger = logging.getLogger(__name__)

PROJECT_NAME = "RNTestProject"

# Install and scaffolding chatter goes to the log, the app run stays on the console
build_output = LoggerOutputMiddleware(logger, prefix="[build] ")


def release_version(base_version: str, now: datetime | None = None) -> str:
    """Base version with a unique timestamp suffix, e.g. ``1000.0.0-20240102-0304``.

    The suffix keeps npm and yarn from reusing locally cached tarballs.
    """
    now = now or datetime.now(timezone.utc)
    return f"{base_version}-{now.strftime('%Y%m%d-%H%M')}"


def read_package_version(react_native_package_path: Path) -> str:
    package_json = react_native_package_path / "package.json"
    return str(json.loads(package_json.read_text(encoding="utf-8"))["version"])


def run_test_project(
    circleci_artifacts: CircleCIArtifacts,
    repo_root: Path,
    options: E2EOptions,
    projects_dir: Path | None = None,
) -> Path:
    """Scaffold RNTestProject against the CI artifacts, install and launch it.

    Returns:
        The project directory
    """
    logger.info("We're going to test a fresh new RN project")

    react_native_package_path = repo_root / "packages" / "react-native"
    version = release_version(read_package_version(react_native_package_path))

    maven_local_path = circleci_artifacts.base_tmp_path / "maven-local.zip"
    local_node_tgz_path = react_native_package_path / f"react-native-{version}.tgz"

    artifacts = download_artifacts_from_circleci(
        circleci_artifacts, maven_local_path, local_node_tgz_path
    )

    update_template_package(
        react_native_package_path, {"react-native": f"file:{local_node_tgz_path}"}
    )

    run_checked(["npm", "pack"], middleware=build_output, cwd=react_native_package_path)

    projects_dir = projects_dir or circleci_artifacts.base_tmp_path.parent
    project_path = projects_dir / PROJECT_NAME
    if project_path.exists():
        logger.info("Removing previous %s at %s", PROJECT_NAME, project_path)
        shutil.rmtree(project_path)

    # Pods are installed later, once the Hermes tarball is wired in
    run_checked(
        [
            "node",
            str(react_native_package_path / "cli.js"),
            "init",
            PROJECT_NAME,
            "--template",
            str(local_node_tgz_path),
            "--skip-install",
        ],
        middleware=build_output,
        cwd=projects_dir,
    )

    run_checked(["yarn", "install"], middleware=build_output, cwd=project_path)

    gradle_properties = project_path / "android" / "gradle.properties"
    with gradle_properties.open("a", encoding="utf-8") as fh:
        fh.write(f"REACT_NATIVE_MAVEN_LOCAL_REPO={artifacts.maven_local_path}\n")

    ios_path = project_path / "ios"
    run_checked(["bundle", "install"], middleware=build_output, cwd=ios_path)
    run_checked(
        ["bundle", "exec", "pod", "install", "--ansi"],
        middleware=build_output,
        cwd=ios_path,
        env={
            "HERMES_ENGINE_TARBALL_PATH": str(artifacts.hermes_path),
            "USE_HERMES": "1" if options.hermes else "0",
        },
    )

    run_command = ["yarn", "ios"] if options.platform == Platform.IOS else ["yarn", "android"]
    run_checked(run_command, cwd=project_path)
    return project_path
