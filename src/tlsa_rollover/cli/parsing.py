"""Parsing helpers for CLI inputs."""

from __future__ import annotations

import argparse


def _parse_positive_int(value: str, *, label: str) -> int:
    """Parse a positive integer from CLI input.

    Args:
        value (str): String value to parse.
        label (str): Option label for error messages.

    Returns:
        int: Parsed value.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{label} must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{label} must be a positive integer")
    return parsed


def _parse_positive_float(value: str, *, label: str) -> float:
    """Parse a positive number from CLI input.

    Args:
        value (str): String value to parse.
        label (str): Option label for error messages.

    Returns:
        float: Parsed value.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive number.
    """
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{label} must be a number") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{label} must be a positive number")
    return parsed


def _parse_port(value: str) -> int:
    """Parse a TCP/UDP port number from CLI input.

    Args:
        value (str): String value to parse.

    Returns:
        int: Port between 1 and 65535.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid port.
    """
    parsed = _parse_positive_int(value, label="Port")
    if parsed > 65535:
        raise argparse.ArgumentTypeError("Port must be between 1 and 65535")
    return parsed
