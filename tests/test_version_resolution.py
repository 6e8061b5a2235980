"""Version resolution regression tests."""

from __future__ import annotations

from pathlib import Path

import tlsa_rollover


def test_source_checkout_prefers_source_version() -> None:
    assert tlsa_rollover._is_source_checkout(Path(tlsa_rollover.__file__))
    assert tlsa_rollover.__version__ == "0.4.0"


def test_resolve_version_uses_metadata_outside_source_checkout(monkeypatch) -> None:
    monkeypatch.setattr(tlsa_rollover, "_is_source_checkout", lambda _path: False)
    monkeypatch.setattr(tlsa_rollover, "version", lambda _name: "9.9.9")

    assert tlsa_rollover._resolve_version() == "9.9.9"


def test_resolve_version_falls_back_when_metadata_missing(monkeypatch) -> None:
    monkeypatch.setattr(tlsa_rollover, "_is_source_checkout", lambda _path: False)

    def _raise(_name: str) -> str:
        raise tlsa_rollover.PackageNotFoundError

    monkeypatch.setattr(tlsa_rollover, "version", _raise)

    assert tlsa_rollover._resolve_version() == "0.4.0"
