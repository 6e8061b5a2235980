"""Certificate digest providers.

A digest is the lowercase hex SHA-256 of a certificate's DER encoding, which
is what a ``1 0 1`` TLSA record publishes.
"""

from __future__ import annotations

import hashlib
import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding

from .errors import DigestError

LOGGER = logging.getLogger(__name__)

DIGEST_BACKENDS = ("openssl", "cryptography")

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")


class DigestProvider(Protocol):
    """Compute TLSA digests for certificate files."""

    def compute(self, path: Path | str) -> str:
        """Return the SHA-256 digest of a PEM certificate's DER form.

        Args:
            path (Path | str): PEM certificate path.

        Returns:
            str: Lowercase hex digest.
        """
        ...


def _normalize_digest(path: Path | str, value: str) -> str:
    """Validate and normalize a hex digest.

    Args:
        path (Path | str): Certificate path for error messages.
        value (str): Digest text.

    Returns:
        str: Lowercase digest.

    Raises:
        DigestError: If the value is not a 64-character hex string.
    """
    digest = value.strip().lower()
    if not _DIGEST_RE.match(digest):
        raise DigestError(path, f"unexpected digest output {value!r}")
    return digest


class OpenSSLDigestProvider:
    """Hash certificates by piping ``openssl x509`` into ``openssl sha256``."""

    def __init__(self, openssl_binary: Optional[str] = None, timeout: Optional[float] = None) -> None:
        """Initialize the provider.

        Args:
            openssl_binary (Optional[str]): OpenSSL executable; looked up in PATH when omitted.
            timeout (Optional[float]): Per-process timeout in seconds; None waits indefinitely.
        """
        self.openssl_binary = openssl_binary
        self.timeout = timeout

    def _run_openssl(self, path: Path | str, args: List[str], input_data: Optional[bytes] = None) -> bytes:
        """Run an OpenSSL command and return its standard output.

        Args:
            path (Path | str): Certificate path for error messages.
            args (List[str]): OpenSSL arguments.
            input_data (Optional[bytes]): Bytes to send to stdin.

        Returns:
            bytes: Captured standard output.

        Raises:
            DigestError: If OpenSSL is unavailable, cannot start, or exits non-zero.
        """
        binary = self.openssl_binary or shutil.which("openssl")
        if not binary:
            raise DigestError(path, "OpenSSL binary not found in PATH")
        try:
            process = subprocess.run(
                [binary, *args],
                input=input_data,
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as err:
            raise DigestError(path, f"openssl {args[0]} could not run: {err}") from err
        if process.returncode != 0:
            stderr = process.stderr.decode("utf-8", errors="replace").strip()
            raise DigestError(
                path, f"openssl {args[0]} exited with code {process.returncode}: {stderr}"
            )
        return process.stdout

    def compute(self, path: Path | str) -> str:
        """Return the SHA-256 digest of a PEM certificate's DER form.

        Args:
            path (Path | str): PEM certificate path.

        Returns:
            str: Lowercase hex digest.

        Raises:
            DigestError: If either OpenSSL step fails or prints unexpected output.
        """
        der = self._run_openssl(path, ["x509", "-in", str(path), "-outform", "DER"])
        output = self._run_openssl(path, ["sha256"], input_data=der)
        text = output.decode("utf-8", errors="replace").strip()
        # "SHA2-256(stdin)= <hex>" on OpenSSL 3, "(stdin)= <hex>" before
        _, separator, value = text.rpartition("= ")
        if not separator:
            raise DigestError(path, f"unexpected digest output {text!r}")
        digest = _normalize_digest(path, value)
        LOGGER.debug("Computed digest %s for %s", digest, path)
        return digest


class CryptographyDigestProvider:
    """Hash certificates in-process with ``cryptography``."""

    def compute(self, path: Path | str) -> str:
        """Return the SHA-256 digest of a PEM certificate's DER form.

        Args:
            path (Path | str): PEM certificate path.

        Returns:
            str: Lowercase hex digest.

        Raises:
            DigestError: If the file cannot be read or is not a PEM certificate.
        """
        try:
            certificate = x509.load_pem_x509_certificate(Path(path).read_bytes())
        except (OSError, ValueError) as err:
            raise DigestError(path, str(err)) from err
        digest = hashlib.sha256(certificate.public_bytes(Encoding.DER)).hexdigest()
        LOGGER.debug("Computed digest %s for %s", digest, path)
        return digest


def build_digest_provider(backend: str = "openssl", timeout: Optional[float] = None) -> DigestProvider:
    """Create a digest provider by backend name.

    Args:
        backend (str): ``openssl`` or ``cryptography``.
        timeout (Optional[float]): Process timeout for the OpenSSL backend.

    Returns:
        DigestProvider: Provider instance.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "openssl":
        return OpenSSLDigestProvider(timeout=timeout)
    if backend == "cryptography":
        return CryptographyDigestProvider()
    raise ValueError(f"Unsupported digest backend '{backend}'. Choose from {DIGEST_BACKENDS}.")


__all__ = [
    "CryptographyDigestProvider",
    "DIGEST_BACKENDS",
    "DigestProvider",
    "OpenSSLDigestProvider",
    "build_digest_provider",
]
