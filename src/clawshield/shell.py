"""Run external programs with a timeout and a bounded, merged output capture."""

from __future__ import annotations

import io
import logging
import os
import signal
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Upper bound on captured stdout+stderr, in bytes
OUTPUT_LIMIT = 1024 * 1024

_READ_CHUNK = 64 * 1024
# How long to wait for the pipe to close once the process group is gone
_DRAIN_TIMEOUT = 1.0


@dataclass(frozen=True)
class CommandResult:
    """Captured output and exit status of one external command.

    ``exit_code`` is -1 when the program could not be started or was
    killed after its timeout.
    """

    output: str
    exit_code: int
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_command(
    path: str | Path,
    args: Sequence[str] = (),
    timeout: float = 30.0,
    max_output: int = OUTPUT_LIMIT,
) -> CommandResult:
    """Execute ``path`` with ``args`` and wait for it to finish.

    Never raises: spawn failures and timeouts are reported through the
    returned ``CommandResult``.
    """
    argv = [str(path), *args]
    logger.debug("Running %s (timeout %.0fs)", " ".join(argv), timeout)

    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.warning("Failed to start %s: %s", path, e)
        return CommandResult(output=f"Error: {e.strerror or e}", exit_code=-1)

    chunks: list[bytes] = []
    reader = threading.Thread(
        target=_read_capped,
        args=(proc.stdout, chunks, max_output),
        name="clawshield-output",
        daemon=True,
    )
    reader.start()

    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(proc)
        proc.wait()
        reader.join(timeout=_DRAIN_TIMEOUT)
        logger.warning("%s timed out after %gs — process group killed", path, timeout)
        return CommandResult(
            output=f"Command timed out after {int(timeout)} seconds",
            exit_code=-1,
            timed_out=True,
        )

    reader.join(timeout=_DRAIN_TIMEOUT)
    if reader.is_alive():
        logger.debug("%s left its output pipe open; using partial output", path)
    output = b"".join(chunks)[:max_output].decode("utf-8", errors="replace")
    logger.debug("%s exited with code %d", path, proc.returncode)
    return CommandResult(output=output, exit_code=proc.returncode)


def sanitize_output(output: str, limit: int = 200) -> str:
    """Collapse command output to a single display line of at most ``limit`` chars."""
    return output.strip()[:limit].replace("\n", " ")


def _read_capped(stream: io.BufferedReader, chunks: list[bytes], limit: int) -> None:
    """Collect up to ``limit`` bytes from ``stream`` and discard the rest."""
    kept = 0
    with stream:
        while True:
            chunk = stream.read1(_READ_CHUNK)
            if not chunk:
                break
            if kept < limit:
                chunks.append(chunk[: limit - kept])
                kept += len(chunks[-1])


def _kill_group(proc: subprocess.Popen) -> None:
    """SIGKILL the process group so grandchildren release the output pipe."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        proc.kill()
