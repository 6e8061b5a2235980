"""Packaging layout regression tests."""

from __future__ import annotations

import tomllib
from pathlib import Path


def _pyproject() -> dict:
    pyproject_path = Path(__file__).resolve().parent.parent / "pyproject.toml"
    with pyproject_path.open("rb") as handle:
        return tomllib.load(handle)


def test_setuptools_package_dir_uses_src_layout() -> None:
    """Ensure setuptools is configured to install packages from src/ only."""
    setuptools = _pyproject().get("tool", {}).get("setuptools", {})
    assert setuptools.get("package-dir") == {"": "src"}


def test_setuptools_find_packages_scans_src_only() -> None:
    """Ensure package discovery is scoped to src/ to avoid build dir leakage."""
    packages_find = (
        _pyproject().get("tool", {}).get("setuptools", {}).get("packages", {}).get("find", {})
    )
    assert packages_find.get("where") == ["src"]


def test_package_data_ships_schema_and_templates() -> None:
    """Ensure the config schema and output templates are installed."""
    package_data = _pyproject()["tool"]["setuptools"]["package-data"]
    assert package_data["tlsa_rollover.resources"] == ["*.json"]
    assert package_data["tlsa_rollover.resources.templates"] == ["*.j2"]


def test_console_script_points_at_cli_main() -> None:
    assert _pyproject()["project"]["scripts"] == {"tlsa-rollover": "tlsa_rollover.cli:main"}
