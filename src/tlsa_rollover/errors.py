"""Error types raised during a rollover run."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class RolloverError(RuntimeError):
    """Base class for failures that abort a rollover run."""


class ReadError(RolloverError):
    """Raised when a certificate, link, or marker file cannot be read."""

    def __init__(self, path: Path | str, error: Exception) -> None:
        """Initialize a read error.

        Args:
            path (Path | str): Path that could not be read.
            error (Exception): Underlying exception.
        """
        super().__init__(f"Unable to read {path}: {error}")
        self.path = Path(path)
        self.error = error


class StateWriteError(RolloverError):
    """Raised when a deployment marker or mirror symlink cannot be written."""

    def __init__(self, path: Path | str, error: Exception) -> None:
        """Initialize a state write error.

        Args:
            path (Path | str): Path that could not be written.
            error (Exception): Underlying exception.
        """
        super().__init__(f"Unable to write {path}: {error}")
        self.path = Path(path)
        self.error = error


class DigestError(RolloverError):
    """Raised when a certificate digest cannot be computed."""

    def __init__(self, path: Path | str, message: str) -> None:
        """Initialize a digest error.

        Args:
            path (Path | str): Certificate path being hashed.
            message (str): Failure description.
        """
        super().__init__(f"Digest computation failed for {path}: {message}")
        self.path = Path(path)
        self.message = message


class DnsProviderError(RolloverError):
    """Raised when the DNS provider cannot be used."""


class DnsFetchError(DnsProviderError):
    """Raised when the DNS provider cannot return a record set."""

    def __init__(self, name: str, record_type: str, error: Exception) -> None:
        """Initialize a DNS fetch error.

        Args:
            name (str): Record name being fetched.
            record_type (str): DNS record type being fetched.
            error (Exception): Underlying exception.
        """
        super().__init__(f"{record_type} fetch failed for {name}: {error}")
        self.name = name
        self.record_type = record_type
        self.error = error


class DnsChangeError(DnsProviderError):
    """Raised when the DNS provider rejects a change request."""

    def __init__(self, error: Exception) -> None:
        """Initialize a DNS change error.

        Args:
            error (Exception): Underlying exception.
        """
        super().__init__(f"DNS change request failed: {error}")
        self.error = error


class HookError(RolloverError):
    """Raised when the activation hook fails."""

    def __init__(
        self,
        command: str,
        returncode: Optional[int],
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Initialize a hook error.

        Args:
            command (str): Hook command line.
            returncode (Optional[int]): Exit code, or None if the hook never started.
            stdout (str): Captured standard output.
            stderr (str): Captured standard error.
        """
        if returncode is None:
            message = f"Activation hook could not be started: {command}"
        else:
            message = f"Activation hook exited with code {returncode}: {command}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class ConfigError(ValueError):
    """Raised when configuration values are missing or invalid."""


__all__ = [
    "ConfigError",
    "DigestError",
    "DnsChangeError",
    "DnsFetchError",
    "DnsProviderError",
    "HookError",
    "ReadError",
    "RolloverError",
    "StateWriteError",
]
