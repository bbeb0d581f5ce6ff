"""Domain model entities for cadsync.

These are pure data classes representing business concepts, independent of
the schemas of the three source databases. The SQLAlchemy layer converts its
rows into these entities so the reconciliation logic never touches ORM
objects.
"""

from dataclasses import dataclass
from enum import Enum
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Optional

# Point-of-sale constants
REQUEST_STATUS_FINALIZED = 2
CADASTRAL_ACCOUNT_FORM_ID = 1
CADASTRAL_ACCOUNT_FIELD = "Clave Catastral"
PERIOD_START_FIELD = "Año Inicial"
PERIOD_END_FIELD = "Año Final"
PERSON_TYPE_INDIVIDUAL = 1
PERSON_TYPE_ORGANIZATION = 2

# Cadastral registry constants
FISCAL_ACCOUNT_KEY_TYPE = 3
DEBT_STATUS_OUTSTANDING = 1
DEBT_STATUS_SETTLED = 2

# Revenue ledger constants
LEDGER_STATUS_PENDING_EXTERNAL = "x"
LEDGER_ORIGIN_MIGRATED = "M"
LEDGER_CATEGORY_CODE = 0
LEDGER_DIVISION = 0
LEDGER_REFERENCE_KEY = "03"


@dataclass(frozen=True)
class RequestHeader:
    """Payment request header from the point-of-sale ledger."""

    id: int
    folio: Optional[str]
    paid_at: Optional[datetime]
    client_id: Optional[int]
    paying_client_id: Optional[int]
    status: int


@dataclass(frozen=True)
class FeeLineItem:
    """One charge attached to a payment request."""

    id: int
    request_id: int
    fee_id: int
    amount: Decimal
    discount: Decimal


@dataclass(frozen=True)
class FeeDefinition:
    """Fee (concept) catalog entry."""

    id: int
    name: str


@dataclass(frozen=True)
class FormField:
    """Field declared by a dynamic form."""

    id: int
    form_id: int
    name: str
    description: Optional[str]


@dataclass(frozen=True)
class FormAnswer:
    """Answer given to a dynamic form field for a request."""

    id: int
    request_id: Optional[int]
    form_id: int
    field_id: int
    value: Optional[str]


@dataclass(frozen=True)
class Payer:
    """Client that requested or paid for a payment request."""

    id: int
    person_type: int
    surname: Optional[str] = None
    second_surname: Optional[str] = None
    given_name: Optional[str] = None
    legal_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.person_type == PERSON_TYPE_ORGANIZATION:
            return self.legal_name or ""
        parts = [self.surname, self.second_surname, self.given_name]
        return " ".join(p.strip() for p in parts if p and p.strip())


@dataclass(frozen=True)
class PaymentRequestRecord:
    """One (request, fee line item) pair, assembled on demand.

    Never persisted. The net amount is derived from gross and discount every
    time it is read.
    """

    fee_id: int
    fee_name: str
    folio: str
    paid_at: Optional[datetime]
    raw_account: str
    period_start: str
    period_end: str
    payer_name: str
    gross_amount: Decimal
    discount_amount: Decimal

    @property
    def net_amount(self) -> Decimal:
        return self.gross_amount - self.discount_amount


@dataclass(frozen=True)
class PeriodFilter:
    """Inclusive payment timestamp window. Either bound may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, paid_at: Optional[datetime]) -> bool:
        if paid_at is None:
            return False
        if self.start is not None and paid_at < self.start:
            return False
        if self.end is not None and paid_at > self.end:
            return False
        return True


@dataclass(frozen=True)
class CadastralAccountKey:
    """Cadastral key pointing at a property record."""

    id: int
    account_id: str
    key_type: int
    cadastral_record_id: int


@dataclass(frozen=True)
class CadastralRecord:
    """Property entry of the cadastral registry."""

    id: int
    last_year_paid: Optional[int]


@dataclass(frozen=True)
class DebtRecord:
    """Debt owed by a cadastral record for one year."""

    id: int
    cadastral_record_id: int
    start_date: Optional[date]
    status: int

    @property
    def year(self) -> Optional[int]:
        return self.start_date.year if self.start_date is not None else None


@dataclass(frozen=True)
class LedgerPayment:
    """Payment row of the municipal revenue ledger.

    ``id`` is None until the payment has been persisted.
    """

    description: str
    fiscal_year: int
    created_on: date
    due_on: date
    amount: Decimal
    payment_folio: str
    paid_at: Optional[datetime]
    counterpart: str
    reference: str
    status: str = LEDGER_STATUS_PENDING_EXTERNAL
    origin: str = LEDGER_ORIGIN_MIGRATED
    category_code: int = LEDGER_CATEGORY_CODE
    division: int = LEDGER_DIVISION
    id: Optional[int] = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.payment_folio, self.counterpart)


class Classification(str, Enum):
    """Outcome of reconciling one payment request record."""

    TO_INSERT = "to_insert"
    SKIPPED_ALREADY_SYNCED = "skipped_already_synced"
    SKIPPED_UNMATCHED_ACCOUNT = "skipped_unmatched_account"
    SKIPPED_NO_PERIOD = "skipped_no_period"


class Outcome(str, Enum):
    """Overall result of a run that did not fail."""

    NO_WORK = "no_work"
    COMPLETED = "completed"
    COMPLETED_WITH_SKIPS = "completed_with_skips"


@dataclass(frozen=True)
class ClassifiedRecord:
    """A payment request record with its reconciliation verdict."""

    record: PaymentRequestRecord
    classification: Classification
    account_id: str
    payment: Optional[LedgerPayment] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class ReconciliationReport:
    """Result of a preview or commit run.

    Counts are always computed over every entry; ``samples`` may be capped
    for previews.
    """

    committed: bool
    entries: tuple[ClassifiedRecord, ...]
    samples: tuple[LedgerPayment, ...]
    narrative: str
    generated_at: datetime

    def count(self, classification: Classification) -> int:
        return sum(1 for e in self.entries if e.classification == classification)

    @property
    def inserted(self) -> int:
        return self.count(Classification.TO_INSERT)

    @property
    def already_synced(self) -> int:
        return self.count(Classification.SKIPPED_ALREADY_SYNCED)

    @property
    def unmatched_account(self) -> int:
        return self.count(Classification.SKIPPED_UNMATCHED_ACCOUNT)

    @property
    def no_period(self) -> int:
        return self.count(Classification.SKIPPED_NO_PERIOD)

    @property
    def total_processed(self) -> int:
        return len(self.entries)

    @property
    def outcome(self) -> Outcome:
        if not self.entries:
            return Outcome.NO_WORK
        if self.inserted == self.total_processed:
            return Outcome.COMPLETED
        return Outcome.COMPLETED_WITH_SKIPS

    def to_dict(self) -> dict[str, Any]:
        """Summary using the keys of the legacy synchronization API."""
        return {
            "committed": self.committed,
            "outcome": self.outcome.value,
            "registrosInsertados": self.inserted,
            "registrosYaExistentes": self.already_synced,
            "registrosSinCuentaPredial": self.unmatched_account,
            "registrosSinFechas": self.no_period,
            "totalProcesados": self.total_processed,
            "datos": [
                {
                    "referencia": p.reference,
                    "interlocutor": p.counterpart,
                    "descripcion": p.description,
                    "año": p.fiscal_year,
                    "fechaCreacion": p.created_on.isoformat(),
                    "fechaVencimiento": p.due_on.isoformat(),
                    "cantidad": str(p.amount),
                    "folioPago": p.payment_folio,
                    "fechaPago": p.paid_at.isoformat() if p.paid_at else None,
                }
                for p in self.samples
            ],
        }


@dataclass(frozen=True)
class UpdateSummary:
    """Result of a cadastral registry update run.

    ``debts_settled`` counts debts moved from outstanding to settled, once
    each; debts that were already settled are not counted, so repeating a
    run reports 0.
    """

    records_updated: int = 0
    debts_settled: int = 0
    omitted: int = 0
    not_found: int = 0
    total_processed: int = 0

    @property
    def outcome(self) -> Outcome:
        if self.total_processed == 0:
            return Outcome.NO_WORK
        if self.omitted or self.not_found:
            return Outcome.COMPLETED_WITH_SKIPS
        return Outcome.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        """Summary using the keys of the legacy registry update API."""
        return {
            "outcome": self.outcome.value,
            "padronesActualizados": self.records_updated,
            "adeudosActualizados": self.debts_settled,
            "solicitudesOmitidas": self.omitted,
            "padronesNoEncontrados": self.not_found,
            "totalConceptosProcesados": self.total_processed,
        }
