"""Process execution and streaming output handling.

This module provides tools for running the external tools the harness drives
(adb, emulator, yarn, pod, gradle...) and handling their output streams.
Long-running build commands stream their output through middleware, short
queries capture it.

Example:
    ```python
    from rnbox.utils.stream_process import run_command, capture_output

    # Stream a build, printing each line as it arrives
    return_code, stdout, stderr = run_command("yarn install", cwd=project_dir)

    # Query a device property
    abi = capture_output(["adb", "shell", "getprop", "ro.product.cpu.abi"]).stdout
    ```
"""

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path
from threading import Thread
from typing import Any, Generic, NamedTuple, TypeAlias, TypeVar, cast

from rnbox.core.errors import ProcessError


logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type of processed output

# Type alias for the result of run_command
ProcessResult: TypeAlias = tuple[int, list[T], list[T]]  # (return_code, stdout, stderr)

Command: TypeAlias = str | list[str]


class CapturedOutput(NamedTuple):
    """Result of a short command whose output is captured, not streamed."""

    return_code: int
    stdout: str
    stderr: str


class OutputMiddleware(Generic[T]):
    """Base class for processing command output streams.

    Type parameter T represents the return type of the process method,
    allowing middleware to transform strings into other types if needed.
    """

    def process(self, line: str, stream_type: str) -> T:
        """Process a line of output from a subprocess stream.

        Args:
            line: A line of text from the process output
            stream_type: Either "stdout" or "stderr"
        """
        raise NotImplementedError()


class DefaultOutputMiddleware(OutputMiddleware[str]):
    """Simple middleware that prints output with optional prefixes."""

    def __init__(self, stdout_prefix: str = "", stderr_prefix: str = "") -> None:
        self.stdout_prefix = stdout_prefix
        self.stderr_prefix = stderr_prefix

    def process(self, line: str, stream_type: str) -> str:
        prefix = self.stdout_prefix if stream_type == "stdout" else self.stderr_prefix
        print(f"{prefix}{line}")
        return line


class LoggerOutputMiddleware(OutputMiddleware[str]):
    """Middleware that forwards output lines to a logger."""

    def __init__(self, logger: logging.Logger, prefix: str = "") -> None:
        self.logger = logger
        self.prefix = prefix

    def process(self, line: str, stream_type: str) -> str:
        if stream_type == "stdout":
            self.logger.debug("%s%s", self.prefix, line)
        else:
            self.logger.warning("%s%s", self.prefix, line)
        return line


def _split(cmd: Command) -> list[str]:
    return shlex.split(cmd) if isinstance(cmd, str) else list(cmd)


def _merge_env(env: Mapping[str, str] | None) -> dict[str, str] | None:
    if env is None:
        return None
    merged = dict(os.environ)
    merged.update(env)
    return merged


def _describe(cmd: Command) -> str:
    return cmd if isinstance(cmd, str) else shlex.join(cmd)


def run_command(
    cmd: Command,
    middleware: OutputMiddleware[T] | None = None,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> ProcessResult[T]:
    """Run a command and process its output through middleware.

    Args:
        cmd: Command to run, either as a string or list of arguments
        middleware: Optional middleware for processing output (uses DefaultOutputMiddleware if None)
        cwd: Working directory for the command
        env: Extra environment variables, merged over the current environment

    Returns:
        Tuple containing:
            - Return code from the process (0 for success)
            - List of processed stdout lines
            - List of processed stderr lines
    """
    if middleware is None:
        # Cast is needed because T is unbound at this point
        middleware = cast(OutputMiddleware[T], DefaultOutputMiddleware())

    args = _split(cmd)
    logger.debug("Running: %s (cwd=%s)", _describe(cmd), cwd or os.getcwd())

    process = subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        bufsize=1,
        cwd=cwd,
        env=_merge_env(env),
    )

    def stream_output(stream: Any, stream_type: str) -> list[T]:
        captured: list[T] = []
        for line in iter(stream.readline, ""):
            if line:
                processed = middleware.process(line.rstrip(), stream_type)
                if processed is not None:
                    captured.append(processed)
        stream.close()
        return captured

    stdout_lines: list[T] = []
    stderr_lines: list[T] = []

    stdout_thread = Thread(
        target=lambda: stdout_lines.extend(stream_output(process.stdout, "stdout")),
        daemon=True,
    )
    stderr_thread = Thread(
        target=lambda: stderr_lines.extend(stream_output(process.stderr, "stderr")),
        daemon=True,
    )
    stdout_thread.start()
    stderr_thread.start()

    return_code = process.wait()

    stdout_thread.join()
    stderr_thread.join()

    return return_code, stdout_lines, stderr_lines


def run_checked(
    cmd: Command,
    middleware: OutputMiddleware[T] | None = None,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> ProcessResult[T]:
    """Like :func:`run_command` but raise ProcessError on a non-zero exit."""
    result = run_command(cmd, middleware=middleware, cwd=cwd, env=env)
    return_code = result[0]
    if return_code != 0:
        raise ProcessError(
            f"Command failed with exit code {return_code}: {_describe(cmd)}",
            command=cmd,
            return_code=return_code,
        )
    return result


def capture_output(
    cmd: Command,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> CapturedOutput:
    """Run a short command and capture its output.

    A missing executable is reported as exit code 127, the same as a shell.
    """
    args = _split(cmd)
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=False,
            cwd=cwd,
            env=_merge_env(env),
        )
    except FileNotFoundError as e:
        logger.debug("Executable not found for %s: %s", _describe(cmd), e)
        return CapturedOutput(127, "", str(e))

    return CapturedOutput(result.returncode, result.stdout, result.stderr)


def spawn_detached(cmd: Command) -> subprocess.Popen[bytes]:
    """Start a process that outlives the harness.

    Its stdio is not connected to ours and it runs in its own session, so it
    stays up after we exit. Nothing waits for it.
    """
    args = _split(cmd)
    logger.debug("Spawning detached: %s", _describe(cmd))
    return subprocess.Popen(
        args,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
