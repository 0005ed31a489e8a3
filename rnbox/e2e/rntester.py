"""Build and launch RNTester against CircleCI artifacts."""

import logging
from pathlib import Path

from rnbox.android import install_apk, maybe_launch_android_emulator, reverse_port
from rnbox.circleci.artifacts import CircleCIArtifacts
from rnbox.packager import launch_packager_in_separate_window
from rnbox.utils.stream_process import run_checked

from .options import E2EOptions, Platform


logger = logging.getLogger(__name__)

RNTESTER_ACTIVITY = "com.facebook.react.uiapp/com.facebook.react.uiapp.RNTesterActivity"
IOS_SIMULATOR = "iPhone 14"


def run_rntester_ios(
    circleci_artifacts: CircleCIArtifacts,
    rntester_path: Path,
    hermes: bool,
    on_release_branch: bool,
) -> None:
    """Install pods for RNTester and run it on the iOS simulator.

    Needs ``bundle install`` to have been run once in the local setup.
    """
    if hermes:
        hermes_url = circleci_artifacts.artifact_url_hermes_debug()
        hermes_path = circleci_artifacts.base_tmp_path / "hermes-ios-debug.tar.gz"
        circleci_artifacts.download_artifact(hermes_url, hermes_path)
        logger.info("Downloaded Hermes in %s", hermes_path)
        pod_env = {
            "HERMES_ENGINE_TARBALL_PATH": str(hermes_path),
            "RCT_NEW_ARCH_ENABLED": "1",
        }
    else:
        pod_env = {
            "USE_HERMES": "0",
            "CI": str(on_release_branch).lower(),
            "RCT_NEW_ARCH_ENABLED": "1",
        }

    run_checked(["bundle", "exec", "pod", "install", "--ansi"], cwd=rntester_path, env=pod_env)

    launch_packager_in_separate_window(rntester_path)

    run_checked(
        [
            "npx",
            "react-native",
            "run-ios",
            "--scheme",
            "RNTester",
            "--simulator",
            IOS_SIMULATOR,
        ],
        cwd=rntester_path,
    )


def run_rntester_android(
    circleci_artifacts: CircleCIArtifacts,
    rntester_path: Path,
    hermes: bool,
    metro_port: int = 8081,
    android_home: Path | None = None,
) -> None:
    """Install the prebuilt RNTester APK and start it."""
    maybe_launch_android_emulator(android_home)

    apk_url = (
        circleci_artifacts.artifact_url_for_hermes_rntester_apk()
        if hermes
        else circleci_artifacts.artifact_url_for_jsc_rntester_apk()
    )
    download_path = circleci_artifacts.base_tmp_path / "rntester.apk"

    logger.info("Start Downloading APK")
    circleci_artifacts.download_artifact(apk_url, download_path)

    install_apk(download_path)

    launch_packager_in_separate_window(rntester_path)

    run_checked(["adb", "shell", "am", "start", "-n", RNTESTER_ACTIVITY])

    # So the app can reach Metro on the host
    reverse_port(metro_port)


def run_rntester(
    circleci_artifacts: CircleCIArtifacts,
    repo_root: Path,
    options: E2EOptions,
    on_release_branch: bool,
    metro_port: int = 8081,
    android_home: Path | None = None,
) -> None:
    rntester_path = repo_root / "packages" / "rn-tester"
    logger.info(
        "We're going to test the %s version of RNTester %s with the new Architecture enabled",
        options.engine_name,
        options.platform,
    )

    if options.platform == Platform.IOS:
        run_rntester_ios(circleci_artifacts, rntester_path, options.hermes, on_release_branch)
    else:
        run_rntester_android(
            circleci_artifacts,
            rntester_path,
            options.hermes,
            metro_port=metro_port,
            android_home=android_home,
        )
