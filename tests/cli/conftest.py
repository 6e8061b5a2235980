"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tests.factories import make_certificate_pem, make_live_dir
from tests.support import DIGEST_A, FakeDigestProvider, FakeDnsProvider


@pytest.fixture
def cli_module():
    """Load the CLI module under test.

    Returns:
        module: Imported ``tlsa_rollover.cli`` module.
    """
    import tlsa_rollover.cli as cli

    return cli


@pytest.fixture
def umask_calls(monkeypatch: pytest.MonkeyPatch, cli_module: Any) -> list[int]:
    """Record umask changes instead of applying them to the test process.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture.
        cli_module (Any): Imported CLI module.

    Returns:
        list[int]: Masks passed to ``os.umask``.
    """
    calls: list[int] = []

    def _umask(mask: int) -> int:
        calls.append(mask)
        return 0o022

    monkeypatch.setattr(cli_module.os, "umask", _umask)
    return calls


@pytest.fixture
def fake_backends(
    monkeypatch: pytest.MonkeyPatch,
    cli_module: Any,
    umask_calls: list[int],
) -> dict[str, Any]:
    """Replace the DNS and digest backends the CLI builds.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture.
        cli_module (Any): Imported CLI module.
        umask_calls (list[int]): Umask recorder.

    Returns:
        dict[str, Any]: The fake provider, digest provider, and captured configs.
    """
    backends: dict[str, Any] = {
        "provider": FakeDnsProvider(),
        "digests": FakeDigestProvider(default=DIGEST_A),
        "dns_configs": [],
    }

    def _build_provider(dns_config):
        backends["dns_configs"].append(dns_config)
        return backends["provider"]

    monkeypatch.setattr(cli_module, "build_provider", _build_provider)
    monkeypatch.setattr(cli_module, "build_digest_provider", lambda _backend: backends["digests"])
    return backends


@pytest.fixture
def live_dir(tmp_path: Path) -> Path:
    """Create a live certificate directory.

    Args:
        tmp_path (Path): Pytest temporary directory.

    Returns:
        Path: Live directory for ``example.com``.
    """
    return make_live_dir(tmp_path / "le", "example.com", make_certificate_pem())


@pytest.fixture
def base_args(tmp_path: Path, live_dir: Path) -> Callable[..., list[str]]:
    """Build the minimal CLI arguments for a Google Cloud DNS run.

    Args:
        tmp_path (Path): Pytest temporary directory.
        live_dir (Path): Live certificate directory.

    Returns:
        Callable[..., list[str]]: Factory appending extra arguments.
    """

    def _make(*extra: str) -> list[str]:
        return [
            "-l",
            str(live_dir),
            "-t",
            str(tmp_path / "tlsa"),
            "-i",
            "project",
            "-z",
            "zone",
            *extra,
        ]

    return _make
