"""Reconcile desired TLSA records with the record sets a provider holds.

Stage mode adds a new digest next to whatever is already published. Promote
mode retires the previous digest while keeping the new one. Both modes fetch
every record set before computing anything and submit a single change.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .providers import ChangeSet, DnsProvider, ResourceRecordSet
from .records import TLSA_TTL, TLSA_TYPE, TlsaRecord, tlsa_data

LOGGER = logging.getLogger(__name__)


class ReconcileMode(Enum):
    """Reconciliation modes."""

    STAGE = "stage"
    PROMOTE = "promote"


def stage_values(existing: Sequence[str], new_value: str) -> List[str]:
    """Return record values with the new value appended.

    Args:
        existing (Sequence[str]): Currently published values.
        new_value (str): Value to publish.

    Returns:
        List[str]: Existing values followed by ``new_value`` when it was missing.
    """
    values = list(existing)
    if new_value not in values:
        values.append(new_value)
    return values


def promote_values(
    existing: Sequence[str],
    previous_value: Optional[str],
    new_value: str,
) -> List[str]:
    """Return record values with the previous value swapped for the new one.

    Args:
        existing (Sequence[str]): Currently published values.
        previous_value (Optional[str]): Value of the previously active digest.
        new_value (str): Value of the digest being promoted.

    Returns:
        List[str]: Values without ``previous_value`` and with ``new_value``.
    """
    values = list(existing)
    if previous_value is not None and previous_value != new_value and previous_value in values:
        values.remove(previous_value)
    if new_value not in values:
        values.append(new_value)
    return values


class DnsReconciler:
    """Compute and submit TLSA changes against a DNS provider."""

    def __init__(self, provider: DnsProvider, ttl: int = TLSA_TTL) -> None:
        """Initialize the reconciler.

        Args:
            provider (DnsProvider): Provider holding the zone.
            ttl (int): TTL for record sets this reconciler creates.
        """
        self.provider = provider
        self.ttl = ttl

    def fetch(
        self, records: Iterable[TlsaRecord]
    ) -> List[Tuple[TlsaRecord, Optional[ResourceRecordSet]]]:
        """Fetch the current record set for every desired record.

        Args:
            records (Iterable[TlsaRecord]): Desired records.

        Returns:
            List[Tuple[TlsaRecord, Optional[ResourceRecordSet]]]: Records paired with
                their current record set, or None when none exists.

        Raises:
            DnsFetchError: If any fetch fails; nothing is written in that case.
        """
        fetched: List[Tuple[TlsaRecord, Optional[ResourceRecordSet]]] = []
        for record in records:
            existing = self.provider.get_records(record.fqdn, TLSA_TYPE)
            fetched.append((record, existing[0] if existing else None))
        return fetched

    def _record_set(self, record: TlsaRecord, values: Sequence[str]) -> ResourceRecordSet:
        """Build the record set to publish for a record.

        Args:
            record (TlsaRecord): Desired record.
            values (Sequence[str]): Rdata values.

        Returns:
            ResourceRecordSet: Record set with this reconciler's TTL.
        """
        return ResourceRecordSet(
            name=record.fqdn,
            record_type=TLSA_TYPE,
            ttl=self.ttl,
            data=tuple(values),
        )

    def _plan(
        self,
        records: Iterable[TlsaRecord],
        mode: ReconcileMode,
        previous_digest: Optional[str] = None,
    ) -> ChangeSet:
        """Build the change set for a reconciliation mode.

        Args:
            records (Iterable[TlsaRecord]): Desired records.
            mode (ReconcileMode): Stage or promote.
            previous_digest (Optional[str]): Digest being retired in promote mode.

        Returns:
            ChangeSet: Additions and deletions; empty when DNS already matches.
        """
        previous_value = tlsa_data(previous_digest) if previous_digest else None
        change = ChangeSet()
        for record, existing in self.fetch(records):
            new_value = record.data
            if existing is None:
                LOGGER.debug("%s: no record set, creating", record.name)
                change.additions.append(self._record_set(record, [new_value]))
                continue
            if mode is ReconcileMode.STAGE:
                values = stage_values(existing.data, new_value)
            else:
                values = promote_values(existing.data, previous_value, new_value)
            if tuple(values) == tuple(existing.data):
                LOGGER.debug("%s: already up to date", record.name)
                continue
            LOGGER.debug("%s: replacing %s with %s", record.name, list(existing.data), values)
            change.deletions.append(existing)
            change.additions.append(self._record_set(record, values))
        return change

    def plan_stage(self, records: Iterable[TlsaRecord]) -> ChangeSet:
        """Plan publication of new records alongside existing values.

        Args:
            records (Iterable[TlsaRecord]): Desired records.

        Returns:
            ChangeSet: Planned change.
        """
        return self._plan(records, ReconcileMode.STAGE)

    def plan_promote(
        self, records: Iterable[TlsaRecord], previous_digest: Optional[str]
    ) -> ChangeSet:
        """Plan retirement of the previous digest in favour of the new one.

        Args:
            records (Iterable[TlsaRecord]): Desired records.
            previous_digest (Optional[str]): Digest of the previously active certificate.

        Returns:
            ChangeSet: Planned change.
        """
        return self._plan(records, ReconcileMode.PROMOTE, previous_digest)

    def apply(self, change: ChangeSet) -> Optional[object]:
        """Submit a change set as one provider call.

        Args:
            change (ChangeSet): Change to submit.

        Returns:
            Optional[object]: Provider response, or None when nothing was submitted.

        Raises:
            DnsChangeError: If the provider rejects the change.
        """
        if change.is_empty:
            LOGGER.info("No DNS changes")
            return None
        LOGGER.info(
            "Submitting DNS change: %d additions, %d deletions",
            len(change.additions),
            len(change.deletions),
        )
        response = self.provider.create_change(change)
        LOGGER.debug("Provider response: %s", response)
        return response

    def stage(self, records: Iterable[TlsaRecord]) -> ChangeSet:
        """Publish records alongside existing values.

        Args:
            records (Iterable[TlsaRecord]): Desired records.

        Returns:
            ChangeSet: The change that was submitted (possibly empty).

        Raises:
            DnsFetchError: If a record set cannot be fetched.
            DnsChangeError: If the provider rejects the change.
        """
        change = self.plan_stage(records)
        self.apply(change)
        return change

    def promote(self, records: Iterable[TlsaRecord], previous_digest: Optional[str]) -> ChangeSet:
        """Swap the previous digest for the new one in every record set.

        Args:
            records (Iterable[TlsaRecord]): Desired records.
            previous_digest (Optional[str]): Digest of the previously active certificate.

        Returns:
            ChangeSet: The change that was submitted (possibly empty).

        Raises:
            DnsFetchError: If a record set cannot be fetched.
            DnsChangeError: If the provider rejects the change.
        """
        change = self.plan_promote(records, previous_digest)
        self.apply(change)
        return change


__all__ = [
    "DnsReconciler",
    "ReconcileMode",
    "promote_values",
    "stage_values",
]
