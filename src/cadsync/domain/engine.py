"""Entry point tying the data sources to the domain services."""

from typing import Optional

from cadsync.config import SyncSettings
from cadsync.database.base import CadastralSource, LedgerSource, PointOfSaleSource
from cadsync.domain.entities import (
    PaymentRequestRecord,
    PeriodFilter,
    ReconciliationReport,
    UpdateSummary,
)
from cadsync.domain.payment_request import PaymentRequestService
from cadsync.domain.reconciliation import ReconciliationService
from cadsync.domain.registry import CadastralRegistryService


class SyncEngine:
    """Payment reconciliation and cadastral synchronization engine.

    Every operation runs to completion on the calling thread and either
    returns its full result or raises. The engine holds no state between
    calls; callers that need exclusive commits must serialize them.
    """

    def __init__(
        self,
        pos: PointOfSaleSource,
        cadastral: CadastralSource,
        ledger: LedgerSource,
        settings: Optional[SyncSettings] = None,
    ):
        self.pos = pos
        self.cadastral = cadastral
        self.ledger = ledger
        self.settings = settings or SyncSettings()
        self.request_service = PaymentRequestService(pos)
        self.reconciliation_service = ReconciliationService(pos, cadastral, ledger, self.settings)
        self.registry_service = CadastralRegistryService(pos, cadastral, self.settings)

    def list_payment_requests(
        self, period_filter: Optional[PeriodFilter] = None
    ) -> list[PaymentRequestRecord]:
        return self.request_service.list_payment_requests(period_filter)

    def preview_sync(self) -> ReconciliationReport:
        return self.reconciliation_service.preview()

    def commit_sync(self) -> ReconciliationReport:
        return self.reconciliation_service.commit()

    def update_cadastral_registry(self) -> UpdateSummary:
        return self.registry_service.update_registry()

    def check_sources(self) -> dict[str, bool]:
        """Report which of the three sources answer."""
        return {source.name: source.ping() for source in (self.pos, self.cadastral, self.ledger)}

    def list_source_schemas(self) -> dict[str, list[str]]:
        """List the schemas each source can see.

        Raises:
            SourceUnavailableError: If a source cannot be inspected
        """
        return {
            source.name: source.list_schemas() for source in (self.pos, self.cadastral, self.ledger)
        }

    def close(self) -> None:
        for source in (self.pos, self.cadastral, self.ledger):
            source.disconnect()
