"""Keep packaged resources in step with the code that reads them."""

from __future__ import annotations

import json
from importlib import resources

from tlsa_rollover.config import DNS_PROVIDERS, RolloverConfig
from tlsa_rollover.digest import DIGEST_BACKENDS
from tlsa_rollover.records import DEFAULT_PROTO_PORTS, ProtoPort, parse_proto_ports


def _schema() -> dict:
    text = resources.files("tlsa_rollover.resources").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    return json.loads(text)


def test_schema_enums_match_supported_backends() -> None:
    properties = _schema()["properties"]
    assert tuple(properties["dns"]["properties"]["provider"]["enum"]) == DNS_PROVIDERS
    assert tuple(properties["digest_backend"]["enum"]) == DIGEST_BACKENDS


def test_schema_covers_every_config_field() -> None:
    properties = set(_schema()["properties"])
    fields = set(RolloverConfig.__dataclass_fields__)
    assert fields - {"dns"} <= properties
    assert "dns" in properties


def test_default_proto_ports_match_config_default() -> None:
    default = RolloverConfig.__dataclass_fields__["proto_ports"].default
    assert tuple(parse_proto_ports(DEFAULT_PROTO_PORTS)) == default == (ProtoPort("tcp", "443"),)


def test_text_template_is_packaged() -> None:
    template = resources.files("tlsa_rollover.resources.templates").joinpath("text.j2")
    assert template.is_file()
