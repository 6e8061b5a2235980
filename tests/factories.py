"""Shared test factories."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from tlsa_rollover.config import DnsConfig, RolloverConfig
from tlsa_rollover.records import ProtoPort

LIVE_FILES = ("cert.pem", "chain.pem", "fullchain.pem", "privkey.pem")


def make_certificate_pem(
    common_name: str | None = "example.com",
    alt_names: tuple[str, ...] = ("example.com", "www.example.com"),
    serial: int = 1000,
) -> bytes:
    """Build a self-signed PEM certificate.

    Args:
        common_name (str | None): Subject common name, omitted when None.
        alt_names (tuple[str, ...]): DNS subject alternative names.
        serial (int): Serial number; different serials give different bytes.

    Returns:
        bytes: PEM-encoded certificate.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    attributes = []
    if common_name:
        attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    else:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example"))
    subject = x509.Name(attributes)
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(serial)
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=90))
    )
    if alt_names:
        builder = builder.add_extension(
            x509.SubjectAlternativeName([x509.DNSName(name) for name in alt_names]),
            critical=False,
        )
    certificate = builder.sign(key, hashes.SHA256())
    return certificate.public_bytes(serialization.Encoding.PEM)


def make_live_dir(base: Path, name: str, cert_pem: bytes, version: int = 1) -> Path:
    """Create a letsencrypt-style archive and live directory.

    Live entries are relative symlinks into ``archive/<name>/`` as certbot
    creates them.

    Args:
        base (Path): Root directory for ``archive/`` and ``live/``.
        name (str): Certificate lineage name.
        cert_pem (bytes): Certificate to install as ``cert<version>.pem``.
        version (int): Archive file version suffix.

    Returns:
        Path: ``<base>/live/<name>``.
    """
    archive = base / "archive" / name
    live = base / "live" / name
    archive.mkdir(parents=True, exist_ok=True)
    live.mkdir(parents=True, exist_ok=True)
    for filename in LIVE_FILES:
        stem = filename[: -len(".pem")]
        target = archive / f"{stem}{version}.pem"
        if filename == "cert.pem":
            target.write_bytes(cert_pem)
        else:
            target.write_text(f"{stem} {version}\n", encoding="utf-8")
        link = live / filename
        if link.is_symlink() or link.exists():
            link.unlink()
        os.symlink(os.path.join("..", "..", "archive", name, target.name), link)
    return live


def make_config(
    live_dir: Path,
    tlsa_dir: Path,
    *,
    proto_ports: tuple[ProtoPort, ...] = (ProtoPort("tcp", "443"),),
    rollover_period: int = 86400,
    force: bool = False,
    force_deploy: bool = False,
    activation_hook: str | None = None,
) -> RolloverConfig:
    """Build a run configuration for tests.

    Args:
        live_dir (Path): Live certificate directory.
        tlsa_dir (Path): State directory.
        proto_ports (tuple[ProtoPort, ...]): Protocol/port pairs.
        rollover_period (int): Rollover period in seconds.
        force (bool): Force flag.
        force_deploy (bool): Force-deploy flag.
        activation_hook (str | None): Hook command.

    Returns:
        RolloverConfig: Configuration object.
    """
    return RolloverConfig(
        live_dir=live_dir,
        tlsa_dir=tlsa_dir,
        proto_ports=proto_ports,
        rollover_period=rollover_period,
        force=force,
        force_deploy=force_deploy,
        activation_hook=activation_hook,
        dns=DnsConfig(provider="google", project_id="project", zone_id="zone"),
    )
