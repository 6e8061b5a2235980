"""Google Cloud DNS provider."""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions
from google.cloud import dns as google_dns

from ..errors import DnsChangeError, DnsFetchError, DnsProviderError
from .base import ChangeSet, DnsProvider, ResourceRecordSet

LOGGER = logging.getLogger(__name__)

# API rejections, credential refresh failures, and transport failures
_CALL_ERRORS = (
    google_exceptions.GoogleAPIError,
    google_auth_exceptions.GoogleAuthError,
    requests.exceptions.RequestException,
)


class GoogleCloudDnsProvider(DnsProvider):
    """Manage record sets in a Google Cloud DNS managed zone.

    The API client is created on first use, so runs that never touch DNS do
    not need credentials.
    """

    def __init__(self, project_id: str, zone_id: str, client: Optional[object] = None) -> None:
        """Initialize the provider.

        Args:
            project_id (str): Google Cloud project ID.
            zone_id (str): Managed zone name.
            client (Optional[object]): Preconfigured ``google.cloud.dns.Client``.
        """
        self.project_id = project_id
        self.zone_id = zone_id
        self._client = client
        self._zone = None

    @property
    def zone(self) -> object:
        """Return the managed zone, creating the API client if needed.

        Returns:
            object: ``google.cloud.dns.ManagedZone`` for ``zone_id``.

        Raises:
            DnsProviderError: If no client can be created from default credentials.
        """
        if self._zone is None:
            if self._client is None:
                try:
                    self._client = google_dns.Client(project=self.project_id)
                except google_auth_exceptions.GoogleAuthError as err:
                    raise DnsProviderError(
                        f"Unable to create Google Cloud DNS client: {err}"
                    ) from err
            self._zone = self._client.zone(self.zone_id)
        return self._zone

    def get_records(self, name: str, record_type: str) -> List[ResourceRecordSet]:
        """Fetch record sets matching a name and type.

        Args:
            name (str): Fully-qualified owner name with trailing dot.
            record_type (str): DNS record type.

        Returns:
            List[ResourceRecordSet]: Matching record sets.

        Raises:
            DnsProviderError: If no API client can be created.
            DnsFetchError: If the API call fails.
        """
        zone = self.zone
        try:
            records = [
                ResourceRecordSet(
                    name=record_set.name,
                    record_type=record_set.record_type,
                    ttl=int(record_set.ttl),
                    data=tuple(record_set.rrdatas),
                )
                for record_set in zone.list_resource_record_sets()
                if record_set.name == name and record_set.record_type == record_type
            ]
        except _CALL_ERRORS as err:
            LOGGER.warning("%s fetch failed for %s: %s", record_type, name, err)
            raise DnsFetchError(name, record_type, err) from err
        LOGGER.debug("Fetched %s %s: %s", record_type, name, records)
        return records

    def _record_set(self, record: ResourceRecordSet) -> object:
        """Build a client-side record set object.

        Args:
            record (ResourceRecordSet): Record set to convert.

        Returns:
            object: ``google.cloud.dns.ResourceRecordSet`` bound to the zone.
        """
        return self.zone.resource_record_set(
            record.name, record.record_type, record.ttl, list(record.data)
        )

    def create_change(self, change: ChangeSet) -> object:
        """Submit additions and deletions as one change.

        Args:
            change (ChangeSet): Change to submit.

        Returns:
            object: Created ``google.cloud.dns.Changes`` object.

        Raises:
            DnsProviderError: If no API client can be created.
            DnsChangeError: If the API rejects the change or cannot be reached.
        """
        changes = self.zone.changes()
        for record in change.deletions:
            changes.delete_record_set(self._record_set(record))
        for record in change.additions:
            changes.add_record_set(self._record_set(record))
        try:
            changes.create()
        except _CALL_ERRORS as err:
            LOGGER.warning("Change request for zone %s failed: %s", self.zone_id, err)
            raise DnsChangeError(err) from err
        LOGGER.info(
            "Submitted change %s to zone %s (status %s)",
            getattr(changes, "name", None),
            self.zone_id,
            getattr(changes, "status", None),
        )
        return changes


__all__ = ["GoogleCloudDnsProvider"]
