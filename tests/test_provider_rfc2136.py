import dns.exception
import dns.message
import dns.query
import dns.rcode
import dns.rrset
import dns.update
import pytest

from tlsa_rollover.errors import DnsChangeError, DnsFetchError
from tlsa_rollover.providers import ChangeSet
from tlsa_rollover.providers.rfc2136 import Rfc2136DnsProvider
from tests.support import DIGEST_A, DIGEST_B, tlsa_set

NAME = "_443._tcp.example.com."


def _patch_tcp(monkeypatch, respond):
    sent = []

    def _tcp(message, where, timeout=None, port=53, **_kwargs):
        sent.append({"message": message, "where": where, "timeout": timeout, "port": port})
        return respond(message)

    monkeypatch.setattr(dns.query, "tcp", _tcp)
    return sent


def _answer(*digests, rcode=dns.rcode.NOERROR):
    def _respond(query):
        response = dns.message.make_response(query)
        response.set_rcode(rcode)
        if digests:
            response.answer.append(
                dns.rrset.from_text(NAME, 300, "IN", "TLSA", *[f"1 0 1 {d}" for d in digests])
            )
        return response

    return _respond


def test_get_records_reads_answer(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _patch_tcp(monkeypatch, _answer(DIGEST_A, DIGEST_B))
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com", port=5353, timeout=3)

    records = provider.get_records(NAME, "TLSA")

    assert records == [tlsa_set(NAME, DIGEST_A, DIGEST_B)]
    assert sent[0]["where"] == "192.0.2.53"
    assert sent[0]["port"] == 5353
    assert sent[0]["timeout"] == 3


def test_get_records_nxdomain_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_tcp(monkeypatch, _answer(rcode=dns.rcode.NXDOMAIN))
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    assert provider.get_records(NAME, "TLSA") == []


def test_get_records_no_answer_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_tcp(monkeypatch, _answer())
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    assert provider.get_records(NAME, "TLSA") == []


def test_get_records_servfail(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_tcp(monkeypatch, _answer(rcode=dns.rcode.SERVFAIL))
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    with pytest.raises(DnsFetchError) as exc:
        provider.get_records(NAME, "TLSA")

    assert "SERVFAIL" in str(exc.value)


def test_get_records_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def _respond(_query):
        raise dns.exception.Timeout()

    _patch_tcp(monkeypatch, _respond)
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    with pytest.raises(DnsFetchError):
        provider.get_records(NAME, "TLSA")


def test_create_change_sends_one_update(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _patch_tcp(monkeypatch, lambda _update: dns.message.Message())
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    provider.create_change(
        ChangeSet(
            additions=[tlsa_set(NAME, DIGEST_A, DIGEST_B)],
            deletions=[tlsa_set(NAME, DIGEST_A)],
        )
    )

    assert len(sent) == 1
    update = sent[0]["message"]
    assert isinstance(update, dns.update.UpdateMessage)
    text = update.to_text()
    assert f"{NAME} ANY TLSA" in text
    assert f"{NAME} 300 IN TLSA 1 0 1 {DIGEST_A}" in text
    assert f"{NAME} 300 IN TLSA 1 0 1 {DIGEST_B}" in text


def test_create_change_refused(monkeypatch: pytest.MonkeyPatch) -> None:
    def _respond(_update):
        response = dns.message.Message()
        response.set_rcode(dns.rcode.REFUSED)
        return response

    _patch_tcp(monkeypatch, _respond)
    provider = Rfc2136DnsProvider("192.0.2.53", "example.com")

    with pytest.raises(DnsChangeError) as exc:
        provider.create_change(ChangeSet(additions=[tlsa_set(NAME, DIGEST_A)]))

    assert "REFUSED" in str(exc.value)


def test_signed_updates_use_keyring(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _patch_tcp(monkeypatch, lambda _update: dns.message.Message())
    provider = Rfc2136DnsProvider(
        "192.0.2.53", "example.com", key_name="tlsa-key.", key_secret="c2VjcmV0"
    )

    provider.create_change(ChangeSet(additions=[tlsa_set(NAME, DIGEST_A)]))

    assert sent[0]["message"].keyring is not None


def test_key_name_without_secret_is_rejected() -> None:
    with pytest.raises(ValueError):
        Rfc2136DnsProvider("192.0.2.53", "example.com", key_name="tlsa-key.")


def test_build_provider_selects_backend() -> None:
    from tlsa_rollover.config import DnsConfig
    from tlsa_rollover.providers import build_provider

    provider = build_provider(
        DnsConfig(provider="rfc2136", server="192.0.2.53", zone="example.com", port=5353)
    )

    assert isinstance(provider, Rfc2136DnsProvider)
    assert provider.port == 5353
    with pytest.raises(ValueError):
        build_provider(DnsConfig(provider="route53"))
