"""Argument parser helpers for the CLI."""

from __future__ import annotations

import argparse
import functools
import logging
import time

from .. import __version__
from ..config import DNS_PROVIDERS
from ..digest import DIGEST_BACKENDS
from .parsing import _parse_port, _parse_positive_float, _parse_positive_int


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity (int): Verbosity count from CLI flags.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.Formatter.converter = time.gmtime  # UTC timestamps
    logging.basicConfig(
        level=level,
        format="%(asctime)sZ [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Options left unset default to None so that config file values can fill them.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    parser = argparse.ArgumentParser(
        description="Publish TLSA records for a certificate and roll them over safely",
    )
    paths_group = parser.add_argument_group("Certificates")
    rollover_group = parser.add_argument_group("Rollover")
    dns_group = parser.add_argument_group("DNS provider")
    rfc2136_group = parser.add_argument_group("RFC 2136")
    output_group = parser.add_argument_group("Output")
    logging_group = parser.add_argument_group("Logging")
    misc_group = parser.add_argument_group("Misc")

    misc_group.add_argument(
        "-c",
        "--config",
        dest="config",
        help="YAML configuration file; command-line options take precedence",
    )
    paths_group.add_argument(
        "-l",
        "--le-live-dir",
        dest="live_dir",
        help="Live certificate directory containing cert.pem, chain.pem, fullchain.pem, privkey.pem",
    )
    paths_group.add_argument(
        "-t",
        "--tlsa-dir",
        dest="tlsa_dir",
        help="Directory holding active certificate mirrors and deployment markers",
    )
    paths_group.add_argument(
        "--digest-backend",
        dest="digest_backend",
        choices=DIGEST_BACKENDS,
        default=None,
        help="How certificate digests are computed (default: openssl)",
    )
    rollover_group.add_argument(
        "-p",
        "--proto-port",
        dest="proto_ports",
        help="Comma-separated protocol:port pairs (default: tcp:443)",
    )
    rollover_group.add_argument(
        "-r",
        "--rollover-period",
        dest="rollover_period",
        type=functools.partial(_parse_positive_int, label="Rollover period"),
        default=None,
        help="Seconds to publish old and new digests together (default: 86400)",
    )
    rollover_group.add_argument(
        "-f",
        "--force",
        dest="force",
        action="store_true",
        default=None,
        help="Continue even when the live and active certificates are identical",
    )
    rollover_group.add_argument(
        "-d",
        "--force-deploy",
        dest="force_deploy",
        action="store_true",
        default=None,
        help="Stage records even when they were already deployed",
    )
    rollover_group.add_argument(
        "-a",
        "--activation-hook",
        dest="activation_hook",
        help="Shell command to run after the new certificate is activated",
    )
    dns_group.add_argument(
        "--dns-provider",
        dest="dns_provider",
        choices=DNS_PROVIDERS,
        default=None,
        help="DNS provider backend (default: google)",
    )
    dns_group.add_argument(
        "-i",
        "--project-id",
        dest="project_id",
        help="Google Cloud project ID",
    )
    dns_group.add_argument(
        "-z",
        "--zone-id",
        dest="zone_id",
        help="Google Cloud DNS managed zone name",
    )
    rfc2136_group.add_argument(
        "--rfc2136-server",
        dest="rfc2136_server",
        help="Primary name server address for dynamic updates",
    )
    rfc2136_group.add_argument(
        "--rfc2136-port",
        dest="rfc2136_port",
        type=_parse_port,
        default=None,
        help="Primary name server port (default: 53)",
    )
    rfc2136_group.add_argument(
        "--rfc2136-zone",
        dest="rfc2136_zone",
        help="Zone to update",
    )
    rfc2136_group.add_argument(
        "--rfc2136-key-name",
        dest="rfc2136_key_name",
        help="TSIG key name",
    )
    rfc2136_group.add_argument(
        "--rfc2136-key-secret",
        dest="rfc2136_key_secret",
        help="TSIG key secret (base64)",
    )
    rfc2136_group.add_argument(
        "--rfc2136-key-algorithm",
        dest="rfc2136_key_algorithm",
        help="TSIG algorithm (default: hmac-sha256)",
    )
    rfc2136_group.add_argument(
        "--dns-timeout",
        dest="dns_timeout",
        type=functools.partial(_parse_positive_float, label="DNS timeout"),
        default=None,
        help="Dynamic update query timeout in seconds",
    )
    output_group.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Run report format",
    )
    logging_group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (use -vv for debug)",
    )
    misc_group.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version and exit",
    )
    return parser
