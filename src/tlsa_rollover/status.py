"""Rollover states and exit code mapping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RolloverState(Enum):
    """States a run can be in, derived from certificates and markers."""

    UNCHANGED = "UNCHANGED"
    NEEDS_STAGE = "NEEDS_STAGE"
    AWAITING_ROLLOVER = "AWAITING_ROLLOVER"
    READY_TO_PROMOTE = "READY_TO_PROMOTE"


@dataclass(frozen=True)
class ExitCodes:
    """Process exit codes.

    Attributes:
        OK (int): Run finished, whatever state it was in.
        ERROR (int): Run aborted by a read, digest, DNS, or state error.
        USAGE (int): Invalid arguments or configuration.
        HOOK_FAILED (int): Promotion committed but the activation hook failed.
    """

    OK: int = 0
    ERROR: int = 1
    USAGE: int = 2
    HOOK_FAILED: int = 3


__all__ = ["ExitCodes", "RolloverState"]
