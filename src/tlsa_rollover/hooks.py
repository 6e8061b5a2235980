"""Activation hook execution."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from .errors import HookError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HookResult:
    """Outcome of an activation hook run.

    Attributes:
        command (str): Shell command that ran.
        returncode (int): Exit code.
        stdout (str): Captured standard output.
        stderr (str): Captured standard error.
    """

    command: str
    returncode: int
    stdout: str
    stderr: str


def run_activation_hook(command: str, timeout: Optional[float] = None) -> HookResult:
    """Run the activation hook through the shell and log its output.

    Args:
        command (str): Shell command line.
        timeout (Optional[float]): Timeout in seconds; None waits indefinitely.

    Returns:
        HookResult: Result of a successful run.

    Raises:
        HookError: If the hook cannot be started or exits non-zero.
    """
    LOGGER.info("Executing activation hook: %s", command)
    try:
        process = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as err:
        LOGGER.error("Activation hook could not run: %s", err)
        raise HookError(command, None, "", str(err)) from err
    if process.stdout:
        LOGGER.info("Activation hook stdout:\n%s", process.stdout.rstrip())
    if process.stderr:
        LOGGER.warning("Activation hook stderr:\n%s", process.stderr.rstrip())
    if process.returncode != 0:
        raise HookError(command, process.returncode, process.stdout, process.stderr)
    LOGGER.info("Activation hook finished")
    return HookResult(
        command=command,
        returncode=process.returncode,
        stdout=process.stdout,
        stderr=process.stderr,
    )


__all__ = ["HookResult", "run_activation_hook"]
