"""Stable public API for programmatic usage."""

from __future__ import annotations

from .certificate import Certificate, load_certificate
from .config import DnsConfig, RolloverConfig, build_config, load_config_file
from .digest import (
    CryptographyDigestProvider,
    DigestProvider,
    OpenSSLDigestProvider,
    build_digest_provider,
)
from .errors import (
    ConfigError,
    DigestError,
    DnsChangeError,
    DnsFetchError,
    DnsProviderError,
    HookError,
    ReadError,
    RolloverError,
    StateWriteError,
)
from .hooks import HookResult, run_activation_hook
from .providers import ChangeSet, DnsProvider, ResourceRecordSet, build_provider
from .reconcile import DnsReconciler
from .records import ProtoPort, TlsaRecord, generate_tlsa_records, parse_proto_ports
from .rollover import RolloverController, RolloverResult, classify
from .state_store import ActiveCertStore, active_cert_root
from .status import ExitCodes, RolloverState

__all__ = [
    "ActiveCertStore",
    "Certificate",
    "ChangeSet",
    "ConfigError",
    "CryptographyDigestProvider",
    "DigestError",
    "DigestProvider",
    "DnsChangeError",
    "DnsConfig",
    "DnsFetchError",
    "DnsProvider",
    "DnsProviderError",
    "DnsReconciler",
    "ExitCodes",
    "HookError",
    "HookResult",
    "OpenSSLDigestProvider",
    "ProtoPort",
    "ReadError",
    "ResourceRecordSet",
    "RolloverConfig",
    "RolloverController",
    "RolloverError",
    "RolloverResult",
    "RolloverState",
    "StateWriteError",
    "TlsaRecord",
    "active_cert_root",
    "build_config",
    "build_digest_provider",
    "build_provider",
    "classify",
    "generate_tlsa_records",
    "load_certificate",
    "load_config_file",
    "parse_proto_ports",
    "run_activation_hook",
]
