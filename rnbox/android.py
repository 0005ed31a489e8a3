"""Android device and emulator helpers built on the SDK command line tools."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from rnbox.core.errors import ProcessError
from rnbox.utils.stream_process import capture_output, run_checked, spawn_detached


logger = logging.getLogger(__name__)


@dataclass
class EmulatorLaunchResult:
    """Outcome of an attempt to start an emulator."""

    success: bool
    error: str | None = None


def get_emulator_command(android_home: Path | str | None = None) -> str:
    """Path of the emulator binary, falling back to the one on PATH."""
    android_home = android_home or os.environ.get("ANDROID_HOME")
    if android_home:
        return str(Path(android_home) / "emulator" / "emulator")
    return "emulator"


def get_emulators(android_home: Path | str | None = None) -> list[str]:
    """Names of the AVDs known to the emulator."""
    output = capture_output([get_emulator_command(android_home), "-list-avds"])
    return [name.strip() for name in output.stdout.splitlines() if name.strip()]


def launch_emulator(emulator_name: str, android_home: Path | str | None = None) -> None:
    """Start an AVD detached from this process."""
    spawn_detached([get_emulator_command(android_home), f"@{emulator_name}"])


def try_launch_emulator(android_home: Path | str | None = None) -> EmulatorLaunchResult:
    """Launch the first available AVD."""
    emulators = get_emulators(android_home)
    if not emulators:
        return EmulatorLaunchResult(
            success=False,
            error="No emulators found as an output of `emulator -list-avds`",
        )

    try:
        launch_emulator(emulators[0], android_home)
    except OSError as e:
        return EmulatorLaunchResult(success=False, error=str(e))
    return EmulatorLaunchResult(success=True)


def has_connected_device() -> bool:
    """Whether a physical device is attached (emulators are ignored)."""
    output = capture_output(["adb", "devices"])
    # First line is the "List of devices attached" header
    lines = output.stdout.strip().splitlines()[1:]
    devices = [line for line in lines if line.strip() and "emulator" not in line]
    return len(devices) > 0


def maybe_launch_android_emulator(android_home: Path | str | None = None) -> None:
    """Launch an emulator unless a device is already connected."""
    if has_connected_device():
        logger.info("Already have a device connected. Skip launching emulator.")
        return

    result = try_launch_emulator(android_home)
    if result.success:
        logger.info("Successfully launched emulator.")
    else:
        logger.error("Failed to launch emulator. Reason: %s.", result.error or "")
        logger.warning(
            "Please launch an emulator manually or connect a device. "
            "Otherwise app may fail to launch."
        )


def get_device_cpu_abi() -> str:
    """CPU architecture of the connected device, e.g. ``arm64-v8a``."""
    cmd = ["adb", "shell", "getprop", "ro.product.cpu.abi"]
    output = capture_output(cmd)
    abi = output.stdout.strip()
    if output.return_code != 0 or not abi:
        raise ProcessError(
            f"Could not read the device CPU architecture: {output.stderr.strip() or 'no output'}",
            command=cmd,
            return_code=output.return_code,
        )
    return abi


def install_apk(apk_path: Path) -> None:
    """Install an APK on the connected device."""
    run_checked(["adb", "install", str(apk_path)])


def reverse_port(port: int) -> None:
    """Forward a device port to the same port on this machine."""
    run_checked(["adb", "reverse", f"tcp:{port}", f"tcp:{port}"])
