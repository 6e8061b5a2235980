"""RFC 2136 dynamic update provider built on dnspython."""

from __future__ import annotations

import logging
from typing import List, Optional

import dns.exception
import dns.message
import dns.name
import dns.query
import dns.rcode
import dns.rdatatype
import dns.tsigkeyring
import dns.update

from ..errors import DnsChangeError, DnsFetchError
from .base import ChangeSet, DnsProvider, ResourceRecordSet

LOGGER = logging.getLogger(__name__)

DEFAULT_KEY_ALGORITHM = "hmac-sha256"


class _RcodeError(dns.exception.DNSException):
    """Raised when a server answers with an unexpected rcode."""


class Rfc2136DnsProvider(DnsProvider):
    """Read record sets from and send dynamic updates to a primary server."""

    def __init__(
        self,
        server: str,
        zone: str,
        *,
        port: int = 53,
        key_name: Optional[str] = None,
        key_secret: Optional[str] = None,
        key_algorithm: str = DEFAULT_KEY_ALGORITHM,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            server (str): Primary server IP address.
            zone (str): Zone to update.
            port (int): Server port.
            key_name (Optional[str]): TSIG key name; updates are unsigned without one.
            key_secret (Optional[str]): Base64 TSIG secret.
            key_algorithm (str): TSIG algorithm name.
            timeout (Optional[float]): Query timeout in seconds.

        Raises:
            ValueError: If only one of key name and secret is given.
        """
        if bool(key_name) != bool(key_secret):
            raise ValueError("RFC 2136 key name and secret must be provided together")
        self.server = server
        self.port = port
        self.zone = dns.name.from_text(zone)
        self.timeout = timeout
        self._keyring = None
        if key_name and key_secret:
            self._keyring = dns.tsigkeyring.from_text({key_name: (key_algorithm, key_secret)})

    def _query(self, message: dns.message.Message) -> dns.message.Message:
        """Send a message to the primary server over TCP.

        Args:
            message (dns.message.Message): Query or update message.

        Returns:
            dns.message.Message: Server response.
        """
        return dns.query.tcp(message, self.server, timeout=self.timeout, port=self.port)

    def get_records(self, name: str, record_type: str) -> List[ResourceRecordSet]:
        """Fetch the record set for a name and type from the primary.

        Args:
            name (str): Fully-qualified owner name with trailing dot.
            record_type (str): DNS record type.

        Returns:
            List[ResourceRecordSet]: The record set, or empty on NXDOMAIN/no answer.

        Raises:
            DnsFetchError: If the query fails or returns an error rcode.
        """
        rdtype = dns.rdatatype.from_text(record_type)
        query = dns.message.make_query(name, rdtype)
        try:
            response = self._query(query)
            rcode = response.rcode()
            if rcode == dns.rcode.NXDOMAIN:
                return []
            if rcode != dns.rcode.NOERROR:
                raise _RcodeError(f"server answered {dns.rcode.to_text(rcode)}")
        except (dns.exception.DNSException, OSError) as err:
            LOGGER.warning("%s fetch failed for %s: %s", record_type, name, err)
            raise DnsFetchError(name, record_type, err) from err

        owner = dns.name.from_text(name)
        records: List[ResourceRecordSet] = []
        for rrset in response.answer:
            if rrset.name != owner or rrset.rdtype != rdtype:
                continue
            records.append(
                ResourceRecordSet(
                    name=owner.to_text(),
                    record_type=record_type,
                    ttl=int(rrset.ttl),
                    data=tuple(rdata.to_text() for rdata in rrset),
                )
            )
        LOGGER.debug("Fetched %s %s: %s", record_type, name, records)
        return records

    def create_change(self, change: ChangeSet) -> object:
        """Send deletions then additions as one dynamic update.

        Args:
            change (ChangeSet): Change to submit.

        Returns:
            object: Server response message.

        Raises:
            DnsChangeError: If the update fails or is refused.
        """
        update = dns.update.Update(self.zone, keyring=self._keyring)
        for record in change.deletions:
            update.delete(dns.name.from_text(record.name), record.record_type)
        for record in change.additions:
            for value in record.data:
                update.add(dns.name.from_text(record.name), record.ttl, record.record_type, value)
        try:
            response = self._query(update)
            rcode = response.rcode()
            if rcode != dns.rcode.NOERROR:
                raise _RcodeError(f"server answered {dns.rcode.to_text(rcode)}")
        except (dns.exception.DNSException, OSError) as err:
            LOGGER.warning("Dynamic update for zone %s failed: %s", self.zone, err)
            raise DnsChangeError(err) from err
        LOGGER.info("Dynamic update for zone %s accepted", self.zone)
        return response


__all__ = ["DEFAULT_KEY_ALGORITHM", "Rfc2136DnsProvider"]
