"""DNS provider clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import ChangeSet, DnsProvider, ResourceRecordSet

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config import DnsConfig


def build_provider(config: "DnsConfig") -> DnsProvider:
    """Create the DNS provider selected by configuration.

    Backends are imported on demand so that an unused client library is never
    initialized.

    Args:
        config (DnsConfig): DNS provider settings.

    Returns:
        DnsProvider: Configured provider.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if config.provider == "google":
        from .google import GoogleCloudDnsProvider

        return GoogleCloudDnsProvider(config.project_id, config.zone_id)
    if config.provider == "rfc2136":
        from .rfc2136 import Rfc2136DnsProvider

        return Rfc2136DnsProvider(
            config.server,
            config.zone,
            port=config.port,
            key_name=config.key_name,
            key_secret=config.key_secret,
            key_algorithm=config.key_algorithm,
            timeout=config.timeout,
        )
    raise ValueError(f"Unsupported DNS provider '{config.provider}'")


__all__ = ["ChangeSet", "DnsProvider", "ResourceRecordSet", "build_provider"]
