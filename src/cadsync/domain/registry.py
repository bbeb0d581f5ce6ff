"""Cadastral registry update domain service."""

from typing import Optional

from cadsync.config import SyncSettings
from cadsync.database.base import CadastralSource, PointOfSaleSource
from cadsync.domain.entities import (
    DEBT_STATUS_SETTLED,
    FISCAL_ACCOUNT_KEY_TYPE,
    PaymentRequestRecord,
    UpdateSummary,
)
from cadsync.domain.payment_request import PaymentRequestService
from cadsync.logging_config import get_logger
from cadsync.utils.account_normalizer import normalize_account
from cadsync.utils.period_parser import Period, parse_year

logger = get_logger(__name__)


def registry_period(record: PaymentRequestRecord) -> Optional[Period]:
    """Period a property tax payment covers, or None when it cannot be used.

    The end year is mandatory; the start year defaults to it.
    """
    end_year = parse_year(record.period_end)
    if end_year is None:
        return None
    if record.period_start and record.period_start.strip():
        start_year = parse_year(record.period_start)
        if start_year is None:
            return None
    else:
        start_year = end_year
    return Period(start_year=start_year, end_year=end_year)


class CadastralRegistryService:
    """Propagates paid property tax periods into the cadastral registry."""

    def __init__(
        self,
        pos: PointOfSaleSource,
        cadastral: CadastralSource,
        settings: Optional[SyncSettings] = None,
    ):
        """Initialize cadastral registry service.

        Args:
            pos: Point-of-sale source records are assembled from
            cadastral: Cadastral registry to update
            settings: Engine settings, defaults when None
        """
        self.cadastral = cadastral
        self.settings = settings or SyncSettings()
        self.request_service = PaymentRequestService(pos)

    def update_registry(self) -> UpdateSummary:
        """Advance last-year-paid watermarks and settle covered debts.

        Every change is collected in memory first and written with one batch
        at the end, so a failed write leaves the registry untouched.

        Returns:
            UpdateSummary with counts of the run

        Raises:
            SourceUnavailableError: If a source read fails
            PersistenceError: If the batch write fails
        """
        category = self.settings.fee_category.lower()
        records = [
            r for r in self.request_service.list_payment_requests() if category in r.fee_name.lower()
        ]
        logger.info("Updating cadastral registry from %d '%s' records", len(records), category)

        omitted = 0
        usable: list[tuple[str, Period]] = []
        for record in records:
            period = registry_period(record)
            if not record.raw_account.strip() or period is None:
                omitted += 1
                continue
            usable.append((normalize_account(record.raw_account), period))

        cadastral_records = self.cadastral.get_records_by_account(
            {account_id for account_id, _ in usable}, FISCAL_ACCOUNT_KEY_TYPE
        )
        debts_by_record: dict[int, list] = {}
        for debt in self.cadastral.list_debts({r.id for r in cadastral_records.values()}):
            debts_by_record.setdefault(debt.cadastral_record_id, []).append(debt)

        not_found = 0
        records_updated = 0
        watermarks = {r.id: r.last_year_paid for r in cadastral_records.values()}
        new_watermarks: dict[int, int] = {}
        settled: set[int] = set()

        for account_id, period in usable:
            cadastral_record = cadastral_records.get(account_id)
            if cadastral_record is None:
                not_found += 1
                continue

            current = watermarks[cadastral_record.id]
            if current is None or current < period.end_year:
                watermarks[cadastral_record.id] = period.end_year
                new_watermarks[cadastral_record.id] = period.end_year
                records_updated += 1

            for debt in debts_by_record.get(cadastral_record.id, []):
                if debt.status == DEBT_STATUS_SETTLED or debt.year is None:
                    continue
                if period.covers(debt.year):
                    settled.add(debt.id)

        self.cadastral.apply_registry_changes(new_watermarks, settled, DEBT_STATUS_SETTLED)

        summary = UpdateSummary(
            records_updated=records_updated,
            debts_settled=len(settled),
            omitted=omitted,
            not_found=not_found,
            total_processed=len(records),
        )
        logger.info(
            "Cadastral registry updated: %d watermarks, %d debts settled, %d omitted, %d not found",
            summary.records_updated,
            summary.debts_settled,
            summary.omitted,
            summary.not_found,
        )
        return summary
