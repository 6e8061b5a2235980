"""TLSA record generation for certificate alternative names."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

LOGGER = logging.getLogger(__name__)

TLSA_TYPE = "TLSA"
TLSA_TTL = 300
# usage=1 (PKIX-EE), selector=0 (full certificate), matching type=1 (SHA-256)
TLSA_PARAMETERS = "1 0 1"
DEFAULT_PROTO_PORTS = "tcp:443"


@dataclass(frozen=True)
class ProtoPort:
    """Protocol and port pair a TLSA record is published for.

    Attributes:
        protocol (str): Transport protocol label (e.g. ``tcp``).
        port (str): Port number as text.
    """

    protocol: str
    port: str

    def __str__(self) -> str:
        """Render the pair in ``protocol:port`` form.

        Returns:
            str: Formatted pair.
        """
        return f"{self.protocol}:{self.port}"


@dataclass(frozen=True)
class TlsaRecord:
    """Desired TLSA record for one domain and protocol/port pair.

    Attributes:
        name (str): Owner name in ``_port._protocol.domain`` form.
        domain (str): Host name from the certificate.
        protocol (str): Transport protocol label.
        port (str): Port number as text.
        digest (str): Lowercase hex SHA-256 of the certificate DER.
    """

    name: str
    domain: str
    protocol: str
    port: str
    digest: str

    @property
    def fqdn(self) -> str:
        """Return the owner name with a trailing dot.

        Returns:
            str: Fully-qualified owner name.
        """
        return f"{self.name}."

    @property
    def data(self) -> str:
        """Return the TLSA rdata string for this record.

        Returns:
            str: Rdata in ``1 0 1 <digest>`` form.
        """
        return tlsa_data(self.digest)


def tlsa_data(digest: str) -> str:
    """Render TLSA rdata for a certificate digest.

    Args:
        digest (str): Lowercase hex SHA-256 digest.

    Returns:
        str: Rdata string.
    """
    return f"{TLSA_PARAMETERS} {digest}"


def parse_proto_ports(value: str) -> List[ProtoPort]:
    """Parse a comma-separated ``protocol:port`` list.

    Args:
        value (str): Input such as ``tcp:443,tcp:25``.

    Returns:
        List[ProtoPort]: Parsed pairs in input order without duplicates.

    Raises:
        ValueError: If an entry is malformed or the port is out of range.
    """
    pairs: List[ProtoPort] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if ":" not in item:
            raise ValueError(f"Protocol/port '{item}' must be in protocol:port form")
        protocol, port = (part.strip() for part in item.split(":", 1))
        if not protocol:
            raise ValueError(f"Protocol/port '{item}' is missing a protocol")
        if not port.isdigit() or not 0 < int(port) <= 65535:
            raise ValueError(f"Protocol/port '{item}' must use a port between 1 and 65535")
        pair = ProtoPort(protocol=protocol.lower(), port=str(int(port)))
        if pair not in pairs:
            pairs.append(pair)
    if not pairs:
        raise ValueError("At least one protocol:port pair is required")
    return pairs


def generate_tlsa_records(
    alt_names: Iterable[str],
    proto_ports: Iterable[ProtoPort],
    digest: str,
) -> List[TlsaRecord]:
    """Build one TLSA record per alternative name and protocol/port pair.

    Records are ordered domain-major, then by protocol/port.

    Args:
        alt_names (Iterable[str]): Certificate DNS alternative names.
        proto_ports (Iterable[ProtoPort]): Configured protocol/port pairs.
        digest (str): Certificate digest shared by every record.

    Returns:
        List[TlsaRecord]: Generated records, empty when either input is empty.
    """
    pairs = list(proto_ports)
    records: List[TlsaRecord] = []
    for domain in alt_names:
        for pair in pairs:
            records.append(
                TlsaRecord(
                    name=f"_{pair.port}._{pair.protocol}.{domain}",
                    domain=domain,
                    protocol=pair.protocol,
                    port=pair.port,
                    digest=digest,
                )
            )
    LOGGER.debug("Generated %d TLSA records", len(records))
    return records


__all__ = [
    "DEFAULT_PROTO_PORTS",
    "ProtoPort",
    "TLSA_PARAMETERS",
    "TLSA_TTL",
    "TLSA_TYPE",
    "TlsaRecord",
    "generate_tlsa_records",
    "parse_proto_ports",
    "tlsa_data",
]
