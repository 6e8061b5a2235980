"""Run configuration from command-line values and an optional YAML file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .digest import DIGEST_BACKENDS
from .errors import ConfigError
from .records import DEFAULT_PROTO_PORTS, ProtoPort, parse_proto_ports

LOGGER = logging.getLogger(__name__)

DNS_PROVIDERS = ("google", "rfc2136")
DEFAULT_ROLLOVER_PERIOD = 3600 * 24
DEFAULT_KEY_ALGORITHM = "hmac-sha256"

_SCHEMA_PACKAGE = "tlsa_rollover.resources"
_SCHEMA_FILENAME = "config.schema.json"

# flat option name -> key inside the ``dns`` section of the config file
_DNS_OPTION_KEYS = {
    "dns_provider": "provider",
    "project_id": "project_id",
    "zone_id": "zone_id",
    "rfc2136_server": "server",
    "rfc2136_port": "port",
    "rfc2136_zone": "zone",
    "rfc2136_key_name": "key_name",
    "rfc2136_key_secret": "key_secret",
    "rfc2136_key_algorithm": "key_algorithm",
    "dns_timeout": "timeout",
}


@dataclass(frozen=True)
class DnsConfig:
    """DNS provider settings.

    Attributes:
        provider (str): Backend name (``google`` or ``rfc2136``).
        project_id (Optional[str]): Google Cloud project ID.
        zone_id (Optional[str]): Google Cloud managed zone name.
        server (Optional[str]): RFC 2136 primary server address.
        port (int): RFC 2136 server port.
        zone (Optional[str]): RFC 2136 zone name.
        key_name (Optional[str]): TSIG key name.
        key_secret (Optional[str]): TSIG secret.
        key_algorithm (str): TSIG algorithm.
        timeout (Optional[float]): RFC 2136 query timeout in seconds.
    """

    provider: str = "google"
    project_id: Optional[str] = None
    zone_id: Optional[str] = None
    server: Optional[str] = None
    port: int = 53
    zone: Optional[str] = None
    key_name: Optional[str] = None
    key_secret: Optional[str] = field(default=None, repr=False)
    key_algorithm: str = DEFAULT_KEY_ALGORITHM
    timeout: Optional[float] = None


@dataclass(frozen=True)
class RolloverConfig:
    """Settings for one rollover run.

    Attributes:
        live_dir (Path): Live certificate directory (cert/chain/fullchain/privkey).
        tlsa_dir (Path): Base directory for active mirrors and markers.
        proto_ports (Tuple[ProtoPort, ...]): Protocol/port pairs to publish.
        rollover_period (int): Seconds both digests stay published before promotion.
        force (bool): Continue even when the live and active certificates match.
        force_deploy (bool): Stage records even when a marker already exists.
        activation_hook (Optional[str]): Shell command run after promotion.
        digest_backend (str): Digest backend name.
        dns (DnsConfig): DNS provider settings.
    """

    live_dir: Path
    tlsa_dir: Path
    proto_ports: Tuple[ProtoPort, ...] = (ProtoPort("tcp", "443"),)
    rollover_period: int = DEFAULT_ROLLOVER_PERIOD
    force: bool = False
    force_deploy: bool = False
    activation_hook: Optional[str] = None
    digest_backend: str = "openssl"
    dns: DnsConfig = field(default_factory=DnsConfig)


@lru_cache(maxsize=1)
def _load_schema_validator() -> Draft202012Validator:
    """Load and cache the configuration JSON Schema validator.

    Returns:
        Draft202012Validator: Validator for configuration files.
    """
    schema_text = (
        resources.files(_SCHEMA_PACKAGE).joinpath(_SCHEMA_FILENAME).read_text(encoding="utf-8")
    )
    return Draft202012Validator(json.loads(schema_text))


def _schema_error_data(err: ValidationError) -> dict[str, str]:
    """Render one schema validation error as a structured mapping.

    Args:
        err (ValidationError): JSON Schema validation error.

    Returns:
        dict[str, str]: Error location and message fields.
    """
    location = ".".join(str(part) for part in err.absolute_path) or "<root>"
    return {"location": location, "message": str(err.message)}


def collect_config_schema_errors(payload: object) -> list[dict[str, str]]:
    """Collect deterministic configuration schema errors.

    Args:
        payload (object): Parsed configuration payload.

    Returns:
        list[dict[str, str]]: Sorted schema validation errors.
    """
    validator = _load_schema_validator()
    errors = [_schema_error_data(err) for err in validator.iter_errors(payload)]
    return sorted(errors, key=lambda item: (item["location"], item["message"]))


def load_config_file(path: Path | str) -> dict:
    """Load and validate a YAML configuration file.

    Args:
        path (Path | str): Configuration file path.

    Returns:
        dict: Validated configuration mapping (empty for an empty file).

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated.
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigError(f"Unable to read config file {config_path}: {err}") from err
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as err:
        raise ConfigError(f"Config file {config_path} is not valid YAML: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} is not a mapping")
    errors = collect_config_schema_errors(data)
    if errors:
        details = "; ".join(f"{error['location']}: {error['message']}" for error in errors)
        raise ConfigError(f"Config file {config_path} is invalid: {details}")
    LOGGER.debug("Loaded config file %s", config_path)
    return data


def _pick(overrides: Mapping[str, object], data: Mapping[str, object], key: str) -> object:
    """Return an override value, falling back to file data.

    Args:
        overrides (Mapping[str, object]): Command-line values; None means unset.
        data (Mapping[str, object]): Config file values.
        key (str): Option name.

    Returns:
        object: Selected value or None.
    """
    value = overrides.get(key)
    if value is not None:
        return value
    return data.get(key)


def _build_dns_config(overrides: Mapping[str, object], data: Mapping[str, object]) -> DnsConfig:
    """Build and validate DNS provider settings.

    Args:
        overrides (Mapping[str, object]): Command-line values.
        data (Mapping[str, object]): The config file's ``dns`` section.

    Returns:
        DnsConfig: DNS settings.

    Raises:
        ConfigError: If required settings for the selected backend are missing.
    """
    values: Dict[str, object] = {}
    for option, key in _DNS_OPTION_KEYS.items():
        value = overrides.get(option)
        if value is None:
            value = data.get(key)
        if value is not None:
            values[key] = value
    dns_config = DnsConfig(**values)
    if dns_config.provider not in DNS_PROVIDERS:
        raise ConfigError(
            f"Unsupported DNS provider '{dns_config.provider}'. Choose from {DNS_PROVIDERS}."
        )
    if dns_config.provider == "google":
        missing = [name for name in ("project_id", "zone_id") if not getattr(dns_config, name)]
        if missing:
            raise ConfigError(f"Google Cloud DNS requires {', '.join(missing)}")
    if dns_config.provider == "rfc2136":
        missing = [name for name in ("server", "zone") if not getattr(dns_config, name)]
        if missing:
            raise ConfigError(f"RFC 2136 requires {', '.join(missing)}")
        if bool(dns_config.key_name) != bool(dns_config.key_secret):
            raise ConfigError("RFC 2136 key name and secret must be provided together")
    return dns_config


def _proto_ports(value: object) -> Tuple[ProtoPort, ...]:
    """Parse protocol/port settings from a string or list.

    Args:
        value (object): ``proto:port`` list as text or a list of entries.

    Returns:
        Tuple[ProtoPort, ...]: Parsed pairs.

    Raises:
        ConfigError: If an entry is invalid.
    """
    text = ",".join(str(item) for item in value) if isinstance(value, list) else str(value)
    try:
        return tuple(parse_proto_ports(text))
    except ValueError as err:
        raise ConfigError(str(err)) from err


def build_config(
    overrides: Mapping[str, object],
    file_data: Optional[Mapping[str, object]] = None,
) -> RolloverConfig:
    """Merge command-line values over config file values and defaults.

    Args:
        overrides (Mapping[str, object]): Flat option values; None means unset.
        file_data (Optional[Mapping[str, object]]): Validated config file mapping.

    Returns:
        RolloverConfig: Complete run configuration.

    Raises:
        ConfigError: If required values are missing or invalid.
    """
    data = dict(file_data or {})
    live_dir = _pick(overrides, data, "live_dir")
    tlsa_dir = _pick(overrides, data, "tlsa_dir")
    if not live_dir:
        raise ConfigError("The live certificate directory (--le-live-dir) is required")
    if not tlsa_dir:
        raise ConfigError("The TLSA state directory (--tlsa-dir) is required")

    rollover_period = _pick(overrides, data, "rollover_period")
    if rollover_period is None:
        rollover_period = DEFAULT_ROLLOVER_PERIOD
    if isinstance(rollover_period, bool) or not isinstance(rollover_period, int):
        raise ConfigError("Rollover period must be an integer number of seconds")
    if rollover_period <= 0:
        raise ConfigError("Rollover period must be a positive number of seconds")

    digest_backend = _pick(overrides, data, "digest_backend") or "openssl"
    if digest_backend not in DIGEST_BACKENDS:
        raise ConfigError(
            f"Unsupported digest backend '{digest_backend}'. Choose from {DIGEST_BACKENDS}."
        )

    dns_data = data.get("dns") or {}
    config = RolloverConfig(
        live_dir=Path(str(live_dir)),
        tlsa_dir=Path(str(tlsa_dir)),
        proto_ports=_proto_ports(_pick(overrides, data, "proto_ports") or DEFAULT_PROTO_PORTS),
        rollover_period=rollover_period,
        force=bool(_pick(overrides, data, "force")),
        force_deploy=bool(_pick(overrides, data, "force_deploy")),
        activation_hook=_pick(overrides, data, "activation_hook") or None,
        digest_backend=str(digest_backend),
        dns=_build_dns_config(overrides, dns_data),
    )
    LOGGER.debug("Resolved configuration: %s", config)
    return config


__all__ = [
    "DEFAULT_ROLLOVER_PERIOD",
    "DNS_PROVIDERS",
    "DnsConfig",
    "RolloverConfig",
    "build_config",
    "collect_config_schema_errors",
    "load_config_file",
]
