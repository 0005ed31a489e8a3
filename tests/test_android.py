"""Tests for Android device and emulator helpers."""

from pathlib import Path
from unittest.mock import patch

import pytest

from rnbox import android
from rnbox.core.errors import ProcessError
from rnbox.utils.stream_process import CapturedOutput


ADB_DEVICES_PHYSICAL = """List of devices attached
R58M123ABC\tdevice
emulator-5554\tdevice

"""

ADB_DEVICES_EMULATOR_ONLY = """List of devices attached
emulator-5554\tdevice

"""


class TestEmulatorCommand:
    def test_uses_android_home(self):
        assert android.get_emulator_command("/opt/sdk") == str(
            Path("/opt/sdk") / "emulator" / "emulator"
        )

    def test_reads_android_home_from_environment(self, monkeypatch):
        monkeypatch.setenv("ANDROID_HOME", "/env/sdk")

        assert android.get_emulator_command() == str(
            Path("/env/sdk") / "emulator" / "emulator"
        )

    def test_falls_back_to_path(self, monkeypatch):
        monkeypatch.delenv("ANDROID_HOME", raising=False)

        assert android.get_emulator_command() == "emulator"


class TestEmulators:
    @patch("rnbox.android.capture_output")
    def test_get_emulators(self, mock_capture):
        mock_capture.return_value = CapturedOutput(0, "Pixel_6_API_33\n\nPixel_4\n", "")

        assert android.get_emulators("/sdk") == ["Pixel_6_API_33", "Pixel_4"]
        mock_capture.assert_called_once_with(
            [str(Path("/sdk") / "emulator" / "emulator"), "-list-avds"]
        )

    @patch("rnbox.android.spawn_detached")
    @patch("rnbox.android.get_emulators", return_value=["Pixel_6", "Pixel_4"])
    def test_try_launch_uses_first(self, mock_get, mock_spawn):
        result = android.try_launch_emulator("/sdk")

        assert result.success
        mock_spawn.assert_called_once_with(
            [str(Path("/sdk") / "emulator" / "emulator"), "@Pixel_6"]
        )

    @patch("rnbox.android.get_emulators", return_value=[])
    def test_try_launch_without_emulators(self, mock_get):
        result = android.try_launch_emulator()

        assert not result.success
        assert "No emulators found" in (result.error or "")

    @patch("rnbox.android.spawn_detached", side_effect=FileNotFoundError("no emulator"))
    @patch("rnbox.android.get_emulators", return_value=["Pixel_6"])
    def test_try_launch_failure(self, mock_get, mock_spawn):
        result = android.try_launch_emulator()

        assert not result.success
        assert result.error == "no emulator"


class TestConnectedDevice:
    @patch("rnbox.android.capture_output")
    def test_physical_device(self, mock_capture):
        mock_capture.return_value = CapturedOutput(0, ADB_DEVICES_PHYSICAL, "")

        assert android.has_connected_device()

    @patch("rnbox.android.capture_output")
    def test_emulators_are_ignored(self, mock_capture):
        mock_capture.return_value = CapturedOutput(0, ADB_DEVICES_EMULATOR_ONLY, "")

        assert not android.has_connected_device()

    @patch("rnbox.android.capture_output")
    def test_adb_missing(self, mock_capture):
        mock_capture.return_value = CapturedOutput(127, "", "adb: not found")

        assert not android.has_connected_device()

    @patch("rnbox.android.try_launch_emulator")
    @patch("rnbox.android.has_connected_device", return_value=True)
    def test_skip_launch_with_device(self, mock_has_device, mock_launch):
        android.maybe_launch_android_emulator()

        mock_launch.assert_not_called()

    @patch("rnbox.android.try_launch_emulator")
    @patch("rnbox.android.has_connected_device", return_value=False)
    def test_launch_without_device(self, mock_has_device, mock_launch, caplog):
        mock_launch.return_value = android.EmulatorLaunchResult(success=False, error="boom")

        android.maybe_launch_android_emulator("/sdk")

        mock_launch.assert_called_once_with("/sdk")
        assert "Failed to launch emulator. Reason: boom." in caplog.text


class TestDeviceAbi:
    @patch("rnbox.android.capture_output")
    def test_reads_abi(self, mock_capture):
        mock_capture.return_value = CapturedOutput(0, "arm64-v8a\n", "")

        assert android.get_device_cpu_abi() == "arm64-v8a"
        mock_capture.assert_called_once_with(
            ["adb", "shell", "getprop", "ro.product.cpu.abi"]
        )

    @patch("rnbox.android.capture_output")
    def test_no_device(self, mock_capture):
        mock_capture.return_value = CapturedOutput(1, "", "error: no devices/emulators found")

        with pytest.raises(ProcessError, match="no devices"):
            android.get_device_cpu_abi()


class TestAdbCommands:
    @patch("rnbox.android.run_checked")
    def test_install_apk(self, mock_run, tmp_path):
        android.install_apk(tmp_path / "rntester.apk")

        mock_run.assert_called_once_with(["adb", "install", str(tmp_path / "rntester.apk")])

    @patch("rnbox.android.run_checked")
    def test_reverse_port(self, mock_run):
        android.reverse_port(8081)

        mock_run.assert_called_once_with(["adb", "reverse", "tcp:8081", "tcp:8081"])
