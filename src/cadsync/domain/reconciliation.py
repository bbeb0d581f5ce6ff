"""Payment reconciliation domain service.

Compares the assembled payment requests with the cadastral registry and the
revenue ledger, and stages one ledger payment per receipt folio and account
that is not recorded yet.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from cadsync.config import ExistenceCheckPolicy, SyncSettings
from cadsync.database.base import CadastralSource, LedgerSource, PointOfSaleSource
from cadsync.domain.entities import (
    FISCAL_ACCOUNT_KEY_TYPE,
    LEDGER_REFERENCE_KEY,
    Classification,
    ClassifiedRecord,
    LedgerPayment,
    PaymentRequestRecord,
    ReconciliationReport,
)
from cadsync.domain.errors import SourceUnavailableError
from cadsync.domain.payment_request import PaymentRequestService
from cadsync.domain.report import render_reconciliation_report
from cadsync.logging_config import get_logger
from cadsync.utils.account_normalizer import normalize_account
from cadsync.utils.period_parser import Period, parse_period

logger = get_logger(__name__)

NO_PERIOD_REASON = "No valid period (start or end year missing or invalid)"


def ledger_reference(account_id: str) -> str:
    """Return the ledger reference string for a canonical account."""
    return f"{{{LEDGER_REFERENCE_KEY}}}{{{account_id}}}"


def build_ledger_payment(record: PaymentRequestRecord, account_id: str, period: Period) -> LedgerPayment:
    """Build the ledger payment recognizing one payment request record."""
    return LedgerPayment(
        description=record.fee_name,
        fiscal_year=period.end_year,
        created_on=period.created_on,
        due_on=period.due_on,
        amount=record.net_amount,
        payment_folio=record.folio,
        paid_at=record.paid_at,
        counterpart=account_id,
        reference=ledger_reference(account_id),
    )


class ReconciliationService:
    """Service for previewing and committing ledger synchronization."""

    def __init__(
        self,
        pos: PointOfSaleSource,
        cadastral: CadastralSource,
        ledger: LedgerSource,
        settings: Optional[SyncSettings] = None,
    ):
        """Initialize reconciliation service.

        Args:
            pos: Point-of-sale source records are assembled from
            cadastral: Cadastral registry accounts are checked against
            ledger: Revenue ledger payments are written to
            settings: Engine settings, defaults when None
        """
        self.cadastral = cadastral
        self.ledger = ledger
        self.settings = settings or SyncSettings()
        self.request_service = PaymentRequestService(pos)

    def preview(self) -> ReconciliationReport:
        """Classify every record without writing anything.

        Returns:
            Report with exact counts and at most ``preview_limit`` sample
            payments that a commit would insert
        """
        logger.info("Starting synchronization preview")
        entries = self.classify(self.request_service.list_payment_requests())
        staged = [e.payment for e in entries if e.payment is not None]
        return self._report(entries, staged[: self.settings.preview_limit], committed=False)

    def commit(self) -> ReconciliationReport:
        """Classify every record and insert the staged payments in one batch.

        Returns:
            Report of the committed run; samples hold every inserted payment

        Raises:
            SourceUnavailableError: If a source read fails
            PersistenceError: If the batch write fails; nothing is inserted
        """
        logger.info("Starting synchronization commit")
        entries = self.classify(self.request_service.list_payment_requests())
        staged = [e.payment for e in entries if e.payment is not None]
        inserted = self.ledger.add_payments(staged)
        logger.info("Inserted %d ledger payments", inserted)
        return self._report(entries, staged, committed=True)

    def classify(self, records: Sequence[PaymentRequestRecord]) -> list[ClassifiedRecord]:
        """Classify records in order: period, account, duplicate, insert.

        Cadastral membership and existing ledger keys are loaded once for the
        whole batch. A (folio, account) pair staged earlier in the batch counts
        as already synced, so a run never stages the same pair twice.
        """
        account_ids = {normalize_account(r.raw_account) for r in records}
        registered = self._load_registered_accounts(account_ids)
        existing = self.ledger.list_existing_keys({r.folio for r in records})

        entries = []
        for record in records:
            account_id = normalize_account(record.raw_account)

            period = parse_period(record.period_start, record.period_end)
            if period is None:
                entries.append(
                    ClassifiedRecord(
                        record, Classification.SKIPPED_NO_PERIOD, account_id, reason=NO_PERIOD_REASON
                    )
                )
                continue

            if account_id not in registered:
                entries.append(
                    ClassifiedRecord(
                        record,
                        Classification.SKIPPED_UNMATCHED_ACCOUNT,
                        account_id,
                        reason=f"Account {account_id} is not a fiscal account in the cadastral registry",
                    )
                )
                continue

            key = (record.folio, account_id)
            if key in existing:
                entries.append(
                    ClassifiedRecord(
                        record,
                        Classification.SKIPPED_ALREADY_SYNCED,
                        account_id,
                        reason=f"Folio {record.folio} is already recorded for {account_id}",
                    )
                )
                continue

            existing.add(key)
            payment = build_ledger_payment(record, account_id, period)
            entries.append(ClassifiedRecord(record, Classification.TO_INSERT, account_id, payment=payment))

        return entries

    def _load_registered_accounts(self, account_ids: set[str]) -> set[str]:
        """Return the accounts registered as fiscal cadastral accounts.

        Under the permissive policy an unreachable registry registers every
        account.
        """
        try:
            return self.cadastral.list_existing_accounts(account_ids, FISCAL_ACCOUNT_KEY_TYPE)
        except SourceUnavailableError:
            if self.settings.existence_policy == ExistenceCheckPolicy.STRICT:
                raise
            logger.warning(
                "Cadastral registry unavailable; treating %d accounts as registered",
                len(account_ids),
                exc_info=True,
            )
            return set(account_ids)

    def _report(
        self, entries: list[ClassifiedRecord], samples: list[LedgerPayment], committed: bool
    ) -> ReconciliationReport:
        generated_at = datetime.now()
        report = ReconciliationReport(
            committed=committed,
            entries=tuple(entries),
            samples=tuple(samples),
            narrative=render_reconciliation_report(entries, committed, generated_at),
            generated_at=generated_at,
        )
        logger.info(
            "Synchronization %s: %d to insert, %d already synced, %d unmatched, %d without period",
            "committed" if committed else "previewed",
            report.inserted,
            report.already_synced,
            report.unmatched_account,
            report.no_period,
        )
        return report
