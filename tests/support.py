from __future__ import annotations

from tlsa_rollover.errors import DigestError, DnsChangeError, DnsFetchError
from tlsa_rollover.providers import ChangeSet, DnsProvider, ResourceRecordSet

DIGEST_A = "a" * 64
DIGEST_B = "b" * 64
DIGEST_C = "c" * 64


class FakeDnsProvider(DnsProvider):
    """In-memory zone that records every provider call."""

    def __init__(self, records=None, fail_fetch=None, fail_change=False):
        self.records = {}
        for record_set in records or []:
            self.records[(record_set.name, record_set.record_type)] = record_set
        self.fail_fetch = set(fail_fetch or [])
        self.fail_change = fail_change
        self.fetches = []
        self.changes = []

    def get_records(self, name: str, record_type: str):
        self.fetches.append((name, record_type))
        if name in self.fail_fetch:
            raise DnsFetchError(name, record_type, RuntimeError("boom"))
        record_set = self.records.get((name, record_type))
        return [record_set] if record_set else []

    def create_change(self, change: ChangeSet):
        self.changes.append(change)
        if self.fail_change:
            raise DnsChangeError(RuntimeError("rejected"))
        for record_set in change.deletions:
            self.records.pop((record_set.name, record_set.record_type), None)
        for record_set in change.additions:
            self.records[(record_set.name, record_set.record_type)] = record_set
        return {"status": "done"}

    def values(self, name: str, record_type: str = "TLSA"):
        record_set = self.records.get((name, record_type))
        return list(record_set.data) if record_set else []


def tlsa_set(name: str, *digests: str, ttl: int = 300) -> ResourceRecordSet:
    return ResourceRecordSet(
        name=name,
        record_type="TLSA",
        ttl=ttl,
        data=tuple(f"1 0 1 {digest}" for digest in digests),
    )


class FakeDigestProvider:
    """Digest provider that maps file contents to fixed digests."""

    def __init__(self, digests=None, default=DIGEST_A, fail=False):
        self.digests = dict(digests or {})
        self.default = default
        self.fail = fail
        self.calls = []

    def compute(self, path):
        self.calls.append(str(path))
        if self.fail:
            raise DigestError(path, "openssl exited with code 1")
        with open(path, "rb") as handle:
            data = handle.read()
        return self.digests.get(data, self.default)
