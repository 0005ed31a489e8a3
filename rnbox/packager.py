"""Metro bundler helpers: status check, shutdown and launch."""

import logging
import os
import signal
from enum import Enum
from pathlib import Path

import requests

from rnbox.utils.stream_process import capture_output, run_checked


logger = logging.getLogger(__name__)

DEFAULT_METRO_PORT = 8081
RUNNING_STATUS = "packager-status:running"


class PackagerStatus(str, Enum):
    RUNNING = "running"
    UNRECOGNIZED = "unrecognized"
    NOT_RUNNING = "not_running"


def default_metro_port() -> int:
    return int(os.environ.get("RCT_METRO_PORT", DEFAULT_METRO_PORT))


def is_packager_running(port: int | None = None, timeout: float = 2.0) -> PackagerStatus:
    """Ask the process listening on ``port`` whether it is Metro."""
    port = port or default_metro_port()
    try:
        response = requests.get(f"http://localhost:{port}/status", timeout=timeout)
    except requests.exceptions.RequestException:
        return PackagerStatus.NOT_RUNNING

    if response.text == RUNNING_STATUS:
        return PackagerStatus.RUNNING
    return PackagerStatus.UNRECOGNIZED


def find_listening_pids(port: int) -> list[int]:
    """PIDs of processes listening on a TCP port, from ``lsof``."""
    output = capture_output(["lsof", "-i", f":{port}"])
    pids: list[int] = []
    for line in output.stdout.splitlines():
        if "LISTEN" not in line:
            continue
        columns = line.split()
        if len(columns) > 1 and columns[1].isdigit():
            pid = int(columns[1])
            if pid not in pids:
                pids.append(pid)
    return pids


def kill_packager(port: int | None = None) -> list[int]:
    """Terminate whatever listens on the Metro port.

    Returns:
        The PIDs that were signalled
    """
    port = port or default_metro_port()
    pids = find_listening_pids(port)
    for pid in pids:
        logger.info("Killing process %d listening on port %d", pid, port)
        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            logger.debug("Process %d already exited", pid)
    return pids


def check_packager_running(port: int | None = None) -> None:
    """Kill Metro if it is running so the next run starts fresh."""
    if is_packager_running(port) is PackagerStatus.RUNNING:
        kill_packager(port)


def launch_packager_in_separate_window(folder_path: Path | str) -> None:
    """Start ``yarn start`` in a new Terminal window (macOS only)."""
    command = f'tell application "Terminal" to do script "cd {folder_path} && yarn start"'
    run_checked(["osascript", "-e", command])
