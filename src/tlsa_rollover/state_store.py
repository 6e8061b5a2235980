"""On-disk state for the active certificate and deployment markers."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .errors import ReadError, StateWriteError

LOGGER = logging.getLogger(__name__)

ACTIVE_DIR_NAME = "active"
MIRROR_FILES = ("cert.pem", "chain.pem", "fullchain.pem", "privkey.pem")


def active_cert_root(tlsa_dir: Path | str, certificate_name: str) -> Path:
    """Return the active-cert directory for a certificate name.

    Args:
        tlsa_dir (Path | str): Base state directory.
        certificate_name (str): Certificate common name.

    Returns:
        Path: ``<tlsa_dir>/active/<certificate_name>``.
    """
    return Path(os.path.abspath(tlsa_dir)) / ACTIVE_DIR_NAME / certificate_name


def _link_target(live_dir: Path, filename: str) -> Path:
    """Resolve the file a live-directory entry points at.

    Args:
        live_dir (Path): Live certificate directory.
        filename (str): Entry name.

    Returns:
        Path: Absolute target; relative link targets resolve against ``live_dir``.

    Raises:
        ReadError: If the entry is missing or its link cannot be read.
    """
    source = live_dir / filename
    try:
        if source.is_symlink():
            return Path(os.path.normpath(live_dir / os.readlink(source)))
        if not source.exists():
            raise FileNotFoundError(f"No such file: {source}")
    except OSError as err:
        raise ReadError(source, err) from err
    return source


class ActiveCertStore:
    """Deployment markers and the active certificate mirror for one certificate."""

    def __init__(self, root: Path | str) -> None:
        """Initialize the store.

        Args:
            root (Path | str): Active-cert directory for the certificate.
        """
        self.root = Path(root)

    @property
    def active_cert_path(self) -> Path:
        """Return the mirror's certificate path.

        Returns:
            Path: ``<root>/cert.pem``.
        """
        return self.root / "cert.pem"

    def read_active_cert(self) -> Optional[bytes]:
        """Read the active certificate bytes.

        Returns:
            Optional[bytes]: Certificate bytes, or None when unreadable.
        """
        try:
            return self.active_cert_path.read_bytes()
        except OSError as err:
            LOGGER.info("No readable active certificate at %s: %s", self.active_cert_path, err)
            return None

    def marker_path(self, digest: str) -> Path:
        """Return the deployment marker path for a digest.

        Args:
            digest (str): Certificate digest.

        Returns:
            Path: Hidden JSON file named after the digest.
        """
        return self.root / f".{digest}.json"

    def marker_age(self, digest: str, now: datetime) -> Optional[float]:
        """Return how long ago the digest's records were first published.

        Args:
            digest (str): Certificate digest.
            now (datetime): Current time.

        Returns:
            Optional[float]: Age in seconds, or None when there is no marker.

        Raises:
            ReadError: If the marker exists but cannot be inspected.
        """
        path = self.marker_path(digest)
        try:
            stat = path.stat()
        except FileNotFoundError:
            return None
        except OSError as err:
            raise ReadError(path, err) from err
        return now.timestamp() - stat.st_mtime

    def write_marker(self, digest: str, now: datetime) -> Path:
        """Record that the digest's records were published at ``now``.

        Args:
            digest (str): Certificate digest.
            now (datetime): Publication time; also used as the file mtime.

        Returns:
            Path: Written marker path.

        Raises:
            StateWriteError: If the directory or file cannot be written.
        """
        path = self.marker_path(digest)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps({"date": now.isoformat()}), encoding="utf-8")
            timestamp = now.timestamp()
            os.utime(path, (timestamp, timestamp))
        except OSError as err:
            raise StateWriteError(path, err) from err
        LOGGER.info("Wrote deployment marker %s", path)
        return path

    def swap_mirror(self, live_dir: Path | str) -> Dict[str, Path]:
        """Point the mirror symlinks at the live directory's targets.

        Each target is read before its mirror entry is unlinked, and entries
        are replaced one at a time.

        Args:
            live_dir (Path | str): Live certificate directory.

        Returns:
            Dict[str, Path]: New link target per mirror file.

        Raises:
            ReadError: If a live entry is missing or unreadable.
            StateWriteError: If a symlink cannot be created.
        """
        live_path = Path(os.path.abspath(live_dir))
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StateWriteError(self.root, err) from err
        targets: Dict[str, Path] = {}
        for filename in MIRROR_FILES:
            target = _link_target(live_path, filename)
            link = self.root / filename
            try:
                link.unlink()
            except FileNotFoundError:
                LOGGER.debug("No existing %s to replace", link)
            except OSError as err:
                LOGGER.warning("Could not remove %s: %s", link, err)
            try:
                link.symlink_to(target)
            except OSError as err:
                raise StateWriteError(link, err) from err
            LOGGER.debug("Linked %s -> %s", link, target)
            targets[filename] = target
        LOGGER.info("Active certificate mirror %s now points at %s", self.root, live_path)
        return targets


__all__ = ["ACTIVE_DIR_NAME", "ActiveCertStore", "MIRROR_FILES", "active_cert_root"]
