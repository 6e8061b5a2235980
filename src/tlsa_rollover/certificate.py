"""Certificate loading helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from cryptography import x509
from cryptography.x509.oid import NameOID

from .errors import ReadError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Certificate:
    """Certificate read from disk.

    Attributes:
        path (Path): File the certificate was read from.
        data (bytes): Raw file contents; certificates compare by these bytes.
        common_name (Optional[str]): Subject common name, if present.
        alt_names (Tuple[str, ...]): DNS subject alternative names.
    """

    path: Path
    data: bytes
    common_name: Optional[str]
    alt_names: Tuple[str, ...]

    @property
    def name(self) -> str:
        """Return the name used for the certificate's active directory.

        Returns:
            str: Common name, or the first alternative name without one.
        """
        if self.common_name:
            return self.common_name
        return self.alt_names[0]

    def same_bytes(self, other: Optional[bytes]) -> bool:
        """Return whether another encoded certificate is byte-identical.

        Args:
            other (Optional[bytes]): Encoded certificate to compare, or None.

        Returns:
            bool: True when ``other`` equals this certificate's data.
        """
        return other is not None and other == self.data


def _common_name(certificate: x509.Certificate) -> Optional[str]:
    """Extract the subject common name.

    Args:
        certificate (x509.Certificate): Parsed certificate.

    Returns:
        Optional[str]: Common name, or None when absent.
    """
    attributes = certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        return None
    value = attributes[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return str(value)


def _alt_names(certificate: x509.Certificate) -> Tuple[str, ...]:
    """Extract DNS subject alternative names in certificate order.

    Args:
        certificate (x509.Certificate): Parsed certificate.

    Returns:
        Tuple[str, ...]: Unique DNS names.
    """
    try:
        extension = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return ()
    names: List[str] = []
    for name in extension.value.get_values_for_type(x509.DNSName):
        if name not in names:
            names.append(name)
    return tuple(names)


def parse_certificate(path: Path | str, data: bytes) -> Certificate:
    """Parse PEM certificate bytes.

    Args:
        path (Path | str): Source path, used for errors and the result.
        data (bytes): PEM-encoded certificate.

    Returns:
        Certificate: Parsed certificate.

    Raises:
        ReadError: If the data is not a PEM certificate or has no usable name.
    """
    try:
        parsed = x509.load_pem_x509_certificate(data)
    except ValueError as err:
        raise ReadError(path, err) from err
    common_name = _common_name(parsed)
    alt_names = _alt_names(parsed)
    if not common_name and not alt_names:
        raise ReadError(path, ValueError("certificate has no common name or DNS names"))
    return Certificate(
        path=Path(path),
        data=data,
        common_name=common_name,
        alt_names=alt_names,
    )


def load_certificate(path: Path | str) -> Certificate:
    """Read and parse a PEM certificate file.

    Args:
        path (Path | str): Certificate path.

    Returns:
        Certificate: Parsed certificate.

    Raises:
        ReadError: If the file cannot be read or parsed.
    """
    cert_path = Path(path)
    try:
        data = cert_path.read_bytes()
    except OSError as err:
        raise ReadError(cert_path, err) from err
    certificate = parse_certificate(cert_path, data)
    LOGGER.debug(
        "Loaded certificate %s (CN=%s, names=%s)",
        cert_path,
        certificate.common_name,
        ", ".join(certificate.alt_names),
    )
    return certificate


__all__ = ["Certificate", "load_certificate", "parse_certificate"]
