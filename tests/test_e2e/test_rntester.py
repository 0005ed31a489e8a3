"""Tests for the RNTester flows."""

from pathlib import Path
from unittest.mock import Mock, call, patch

import pytest

from rnbox.circleci.artifacts import CircleCIArtifacts
from rnbox.e2e.options import E2EOptions, Platform
from rnbox.e2e.rntester import run_rntester, run_rntester_android, run_rntester_ios


@pytest.fixture
def circleci_artifacts(tmp_path):
    artifacts = Mock(spec=CircleCIArtifacts)
    artifacts.base_tmp_path = tmp_path
    artifacts.artifact_url_hermes_debug.return_value = "https://a/hermes.tar.gz"
    artifacts.artifact_url_for_hermes_rntester_apk.return_value = "https://a/hermes.apk"
    artifacts.artifact_url_for_jsc_rntester_apk.return_value = "https://a/jsc.apk"
    return artifacts


@pytest.fixture
def rntester_path(tmp_path):
    return tmp_path / "packages" / "rn-tester"


class TestIOS:
    @patch("rnbox.e2e.rntester.launch_packager_in_separate_window")
    @patch("rnbox.e2e.rntester.run_checked")
    def test_hermes(self, mock_run, mock_packager, circleci_artifacts, rntester_path, tmp_path):
        run_rntester_ios(circleci_artifacts, rntester_path, hermes=True, on_release_branch=False)

        hermes_path = tmp_path / "hermes-ios-debug.tar.gz"
        circleci_artifacts.download_artifact.assert_called_once_with(
            "https://a/hermes.tar.gz", hermes_path
        )
        assert mock_run.call_args_list[0] == call(
            ["bundle", "exec", "pod", "install", "--ansi"],
            cwd=rntester_path,
            env={"HERMES_ENGINE_TARBALL_PATH": str(hermes_path), "RCT_NEW_ARCH_ENABLED": "1"},
        )
        assert mock_run.call_args_list[1] == call(
            ["npx", "react-native", "run-ios", "--scheme", "RNTester", "--simulator", "iPhone 14"],
            cwd=rntester_path,
        )
        mock_packager.assert_called_once_with(rntester_path)

    @patch("rnbox.e2e.rntester.launch_packager_in_separate_window")
    @patch("rnbox.e2e.rntester.run_checked")
    def test_jsc_on_release_branch(self, mock_run, mock_packager, circleci_artifacts, rntester_path):
        run_rntester_ios(circleci_artifacts, rntester_path, hermes=False, on_release_branch=True)

        circleci_artifacts.download_artifact.assert_not_called()
        assert mock_run.call_args_list[0].kwargs["env"] == {
            "USE_HERMES": "0",
            "CI": "true",
            "RCT_NEW_ARCH_ENABLED": "1",
        }


class TestAndroid:
    @patch("rnbox.e2e.rntester.reverse_port")
    @patch("rnbox.e2e.rntester.install_apk")
    @patch("rnbox.e2e.rntester.launch_packager_in_separate_window")
    @patch("rnbox.e2e.rntester.run_checked")
    @patch("rnbox.e2e.rntester.maybe_launch_android_emulator")
    def test_hermes(
        self,
        mock_emulator,
        mock_run,
        mock_packager,
        mock_install,
        mock_reverse,
        circleci_artifacts,
        rntester_path,
        tmp_path,
    ):
        run_rntester_android(
            circleci_artifacts, rntester_path, hermes=True, metro_port=8081, android_home=Path("/sdk")
        )

        mock_emulator.assert_called_once_with(Path("/sdk"))
        circleci_artifacts.artifact_url_for_jsc_rntester_apk.assert_not_called()
        circleci_artifacts.download_artifact.assert_called_once_with(
            "https://a/hermes.apk", tmp_path / "rntester.apk"
        )
        mock_install.assert_called_once_with(tmp_path / "rntester.apk")
        mock_run.assert_called_once_with(
            [
                "adb",
                "shell",
                "am",
                "start",
                "-n",
                "com.facebook.react.uiapp/com.facebook.react.uiapp.RNTesterActivity",
            ]
        )
        mock_reverse.assert_called_once_with(8081)

    @patch("rnbox.e2e.rntester.reverse_port")
    @patch("rnbox.e2e.rntester.install_apk")
    @patch("rnbox.e2e.rntester.launch_packager_in_separate_window")
    @patch("rnbox.e2e.rntester.run_checked")
    @patch("rnbox.e2e.rntester.maybe_launch_android_emulator")
    def test_jsc(self, mock_emulator, mock_run, mock_packager, mock_install, mock_reverse, circleci_artifacts, rntester_path):
        run_rntester_android(circleci_artifacts, rntester_path, hermes=False)

        circleci_artifacts.artifact_url_for_jsc_rntester_apk.assert_called_once_with()
        circleci_artifacts.artifact_url_for_hermes_rntester_apk.assert_not_called()


@pytest.mark.parametrize(
    ("platform", "expected"),
    [(Platform.IOS, "run_rntester_ios"), (Platform.ANDROID, "run_rntester_android")],
)
def test_run_rntester_dispatches_on_platform(circleci_artifacts, tmp_path, platform, expected):
    options = E2EOptions(platform=platform, hermes=True)

    with (
        patch("rnbox.e2e.rntester.run_rntester_ios") as mock_ios,
        patch("rnbox.e2e.rntester.run_rntester_android") as mock_android,
    ):
        run_rntester(circleci_artifacts, tmp_path, options, on_release_branch=False)

    called = {"run_rntester_ios": mock_ios, "run_rntester_android": mock_android}
    assert called[expected].call_count == 1
    assert sum(mock.call_count for mock in called.values()) == 1
    assert called[expected].call_args.args[1] == tmp_path / "packages" / "rn-tester"
