"""Certificate rollover state machine.

A run never stores its state. It derives it from two observations: whether
the live certificate is byte-identical to the active mirror, and how old the
deployment marker for the live certificate's digest is.

- UNCHANGED: nothing to do.
- NEEDS_STAGE: publish the new digest next to the old one, write the marker.
- AWAITING_ROLLOVER: the marker is younger than the rollover period.
- READY_TO_PROMOTE: retire the old digest, swap the mirror, run the hook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .certificate import Certificate, load_certificate
from .config import RolloverConfig
from .digest import DigestProvider
from .errors import DigestError, HookError
from .hooks import HookResult, run_activation_hook
from .providers import ChangeSet, DnsProvider
from .reconcile import DnsReconciler
from .records import TlsaRecord, generate_tlsa_records
from .state_store import ActiveCertStore, active_cert_root
from .status import RolloverState

LOGGER = logging.getLogger(__name__)


def classify(
    certs_equal: bool,
    marker_age: Optional[float],
    rollover_period: float,
    *,
    force: bool = False,
    force_deploy: bool = False,
) -> RolloverState:
    """Derive the rollover state from observable facts.

    Args:
        certs_equal (bool): Live certificate bytes equal the active mirror's.
        marker_age (Optional[float]): Seconds since the live digest was staged, None if never.
        rollover_period (float): Seconds both digests must stay published.
        force (bool): Proceed even when the certificates are equal.
        force_deploy (bool): Stage even when a marker exists.

    Returns:
        RolloverState: State the run is in.
    """
    if certs_equal and not force:
        return RolloverState.UNCHANGED
    if marker_age is None or force_deploy:
        return RolloverState.NEEDS_STAGE
    if marker_age < rollover_period:
        return RolloverState.AWAITING_ROLLOVER
    return RolloverState.READY_TO_PROMOTE


@dataclass
class RolloverResult:
    """Report of a rollover run.

    Attributes:
        state (RolloverState): State the run acted on.
        certificate (Certificate): Live certificate.
        digest (Optional[str]): Live certificate digest, unset when unchanged.
        previous_digest (Optional[str]): Digest retired during promotion.
        records (List[TlsaRecord]): Records derived from the live certificate.
        change (Optional[ChangeSet]): DNS change computed for this run.
        marker_path (Optional[Path]): Deployment marker for the live digest.
        marker_age (Optional[float]): Marker age in seconds when the run started.
        mirror (Dict[str, Path]): New mirror link targets after promotion.
        hook (Optional[HookResult]): Activation hook result.
        hook_error (Optional[HookError]): Activation hook failure.
    """

    state: RolloverState
    certificate: Certificate
    digest: Optional[str] = None
    previous_digest: Optional[str] = None
    records: List[TlsaRecord] = field(default_factory=list)
    change: Optional[ChangeSet] = None
    marker_path: Optional[Path] = None
    marker_age: Optional[float] = None
    mirror: Dict[str, Path] = field(default_factory=dict)
    hook: Optional[HookResult] = None
    hook_error: Optional[HookError] = None


def _utc_now() -> datetime:
    """Return the current UTC time.

    Returns:
        datetime: Timezone-aware current time.
    """
    return datetime.now(timezone.utc)


class RolloverController:
    """Run one pass of the rollover state machine."""

    def __init__(
        self,
        config: RolloverConfig,
        provider: DnsProvider,
        digest_provider: DigestProvider,
        *,
        clock: Callable[[], datetime] = _utc_now,
        hook_runner: Callable[[str], HookResult] = run_activation_hook,
    ) -> None:
        """Initialize the controller.

        Args:
            config (RolloverConfig): Run configuration.
            provider (DnsProvider): DNS provider for the zone.
            digest_provider (DigestProvider): Certificate digest provider.
            clock (Callable[[], datetime]): Current-time source.
            hook_runner (Callable[[str], HookResult]): Activation hook runner.
        """
        self.config = config
        self.reconciler = DnsReconciler(provider)
        self.digest_provider = digest_provider
        self.clock = clock
        self.hook_runner = hook_runner

    @property
    def live_cert_path(self) -> Path:
        """Return the live certificate path.

        Returns:
            Path: ``<live_dir>/cert.pem``.
        """
        return self.config.live_dir / "cert.pem"

    def run(self) -> RolloverResult:
        """Inspect certificates and markers and act on the derived state.

        Returns:
            RolloverResult: What the run observed and did.

        Raises:
            ReadError: If the live certificate or a live link cannot be read.
            DigestError: If the live digest cannot be computed.
            DnsFetchError: If a record set cannot be fetched.
            DnsChangeError: If the DNS change is rejected.
            StateWriteError: If the marker or mirror cannot be written.
        """
        LOGGER.info("Live certificate path %s", self.live_cert_path)
        certificate = load_certificate(self.live_cert_path)
        store = ActiveCertStore(active_cert_root(self.config.tlsa_dir, certificate.name))
        certs_equal = certificate.same_bytes(store.read_active_cert())

        # the marker is irrelevant for an unchanged certificate
        initial_state = classify(
            certs_equal, None, self.config.rollover_period, force=self.config.force
        )
        if initial_state is RolloverState.UNCHANGED:
            LOGGER.info("Certificates are the same, nothing to do")
            return RolloverResult(state=RolloverState.UNCHANGED, certificate=certificate)
        if certs_equal:
            LOGGER.info("Certificates are the same, continuing because of --force")
        else:
            LOGGER.info("Certificates differ, continuing")

        now = self.clock()
        digest = self.digest_provider.compute(self.live_cert_path)
        records = generate_tlsa_records(certificate.alt_names, self.config.proto_ports, digest)
        marker_age = store.marker_age(digest, now)
        state = classify(
            certs_equal,
            marker_age,
            self.config.rollover_period,
            force=self.config.force,
            force_deploy=self.config.force_deploy,
        )
        result = RolloverResult(
            state=state,
            certificate=certificate,
            digest=digest,
            records=records,
            marker_path=store.marker_path(digest),
            marker_age=marker_age,
        )
        LOGGER.info("Digest %s is in state %s", digest, state.value)

        if state is RolloverState.NEEDS_STAGE:
            self._stage(store, result, now)
        elif state is RolloverState.AWAITING_ROLLOVER:
            LOGGER.info(
                "Waiting for rollover period: %.0f of %d seconds elapsed",
                marker_age,
                self.config.rollover_period,
            )
        else:
            self._promote(store, result)
        return result

    def _stage(self, store: ActiveCertStore, result: RolloverResult, now: datetime) -> None:
        """Publish the new digest alongside existing values and write the marker.

        Args:
            store (ActiveCertStore): Active-cert state for the certificate.
            result (RolloverResult): Result to update.
            now (datetime): Time recorded in the marker.
        """
        result.change = self.reconciler.stage(result.records)
        store.write_marker(result.digest, now)

    def _previous_digest(self, store: ActiveCertStore) -> Optional[str]:
        """Hash the currently active certificate, if there is one.

        Args:
            store (ActiveCertStore): Active-cert state for the certificate.

        Returns:
            Optional[str]: Digest of the mirror's certificate, or None if unavailable.
        """
        if not store.active_cert_path.exists():
            LOGGER.info("No active certificate to retire")
            return None
        try:
            return self.digest_provider.compute(store.active_cert_path)
        except DigestError as err:
            LOGGER.warning("Could not hash active certificate, nothing retired: %s", err)
            return None

    def _promote(self, store: ActiveCertStore, result: RolloverResult) -> None:
        """Retire the previous digest, swap the mirror, and run the hook.

        Args:
            store (ActiveCertStore): Active-cert state for the certificate.
            result (RolloverResult): Result to update.
        """
        result.previous_digest = self._previous_digest(store)
        result.change = self.reconciler.promote(result.records, result.previous_digest)
        result.mirror = store.swap_mirror(self.config.live_dir)
        if not self.config.activation_hook:
            return
        try:
            result.hook = self.hook_runner(self.config.activation_hook)
        except HookError as err:
            LOGGER.error("%s. Stopping.", err)
            result.hook_error = err


__all__ = ["RolloverController", "RolloverResult", "classify"]
