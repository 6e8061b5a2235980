"""DNS provider interface and record set models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class ResourceRecordSet:
    """Resource record set as stored by a DNS provider.

    Attributes:
        name (str): Fully-qualified owner name with trailing dot.
        record_type (str): DNS record type.
        ttl (int): Time to live in seconds.
        data (Tuple[str, ...]): Rdata strings in provider order.
    """

    name: str
    record_type: str
    ttl: int
    data: Tuple[str, ...]


@dataclass
class ChangeSet:
    """Batched record set additions and deletions.

    Attributes:
        additions (List[ResourceRecordSet]): Record sets to create.
        deletions (List[ResourceRecordSet]): Record sets to remove.
    """

    additions: List[ResourceRecordSet] = field(default_factory=list)
    deletions: List[ResourceRecordSet] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return whether the change set has nothing to submit.

        Returns:
            bool: True when there are no additions or deletions.
        """
        return not self.additions and not self.deletions


class DnsProvider:
    """Read and change record sets in one DNS zone.

    Implementations raise ``DnsFetchError`` from ``get_records`` and
    ``DnsChangeError`` from ``create_change``.
    """

    def get_records(self, name: str, record_type: str) -> List[ResourceRecordSet]:
        """Fetch record sets matching a name and type.

        Args:
            name (str): Fully-qualified owner name with trailing dot.
            record_type (str): DNS record type.

        Returns:
            List[ResourceRecordSet]: Matching record sets, empty when none exist.
        """
        raise NotImplementedError

    def create_change(self, change: ChangeSet) -> object:
        """Submit additions and deletions as one atomic change.

        Args:
            change (ChangeSet): Change to submit.

        Returns:
            object: Provider response.
        """
        raise NotImplementedError


__all__ = ["ChangeSet", "DnsProvider", "ResourceRecordSet"]
