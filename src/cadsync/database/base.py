"""Abstract data source interfaces.

The engine talks to three databases: the point-of-sale ledger it reads
payment requests from, the cadastral registry it checks accounts against and
updates, and the revenue ledger it writes payments to. Every read is a bulk
read keyed by a collection of ids, so one engine run issues a bounded number
of queries regardless of batch size.

Implementations raise SourceUnavailableError when a source cannot be read
and PersistenceError when a batch write fails; a failed batch write leaves
nothing committed.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from datetime import datetime
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from cadsync.domain.entities import (
    RequestHeader,
    FeeLineItem,
    FeeDefinition,
    FormField,
    FormAnswer,
    Payer,
    CadastralRecord,
    DebtRecord,
    LedgerPayment,
)


class DataSource(ABC):
    """Lifecycle shared by all sources."""

    name: str = "source"

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        pass

    @abstractmethod
    def list_schemas(self) -> list[str]:
        """List the schemas visible through the connection.

        Raises:
            SourceUnavailableError: If the database cannot be inspected
        """
        pass


class PointOfSaleSource(DataSource):
    """Read access to the point-of-sale ledger."""

    name = "point_of_sale"

    @abstractmethod
    def list_request_ids_with_form(self, form_id: int) -> set[int]:
        """Return ids of requests with at least one answer on the given form."""
        pass

    @abstractmethod
    def list_requests(
        self,
        request_ids: Collection[int],
        status: int,
        paid_from: Optional[datetime] = None,
        paid_to: Optional[datetime] = None,
    ) -> list[RequestHeader]:
        """List request headers among request_ids, ordered by id.

        Args:
            request_ids: Candidate request ids
            status: Only requests in this status are returned
            paid_from: Optional inclusive lower bound on the payment timestamp
            paid_to: Optional inclusive upper bound on the payment timestamp
        """
        pass

    @abstractmethod
    def list_line_items(self, request_ids: Collection[int]) -> list[FeeLineItem]:
        """List fee line items of the given requests, ordered by id."""
        pass

    @abstractmethod
    def list_fees(self, fee_ids: Collection[int]) -> list[FeeDefinition]:
        """List fee definitions by id."""
        pass

    @abstractmethod
    def list_form_fields(self, form_id: Optional[int] = None) -> list[FormField]:
        """List declared form fields, optionally for one form, ordered by id."""
        pass

    @abstractmethod
    def list_form_answers(self, request_ids: Collection[int]) -> list[FormAnswer]:
        """List answers of all forms for the given requests, ordered by id."""
        pass

    @abstractmethod
    def list_form_answers_for_form(
        self, form_id: int, limit: Optional[int] = None, non_empty: bool = False
    ) -> list[FormAnswer]:
        """List answers given on one form, ordered by id."""
        pass

    @abstractmethod
    def list_payers(self, payer_ids: Collection[int]) -> list[Payer]:
        """List clients by id."""
        pass


class CadastralSource(DataSource):
    """Read/write access to the cadastral registry."""

    name = "cadastral"

    @abstractmethod
    def list_existing_accounts(self, account_ids: Collection[str], key_type: int) -> set[str]:
        """Return which of account_ids exist as keys of the given type."""
        pass

    @abstractmethod
    def get_records_by_account(
        self, account_ids: Collection[str], key_type: int
    ) -> dict[str, CadastralRecord]:
        """Map account ids to the records their keys of the given type point at.

        Accounts without such a key are absent from the result.
        """
        pass

    @abstractmethod
    def list_debts(self, record_ids: Collection[int]) -> list[DebtRecord]:
        """List debts of the given cadastral records, ordered by id."""
        pass

    @abstractmethod
    def apply_registry_changes(
        self, last_year_paid: Mapping[int, int], settled_debt_ids: Collection[int], settled_status: int
    ) -> None:
        """Persist watermark updates and debt settlements in one transaction.

        Args:
            last_year_paid: New last-year-paid value per cadastral record id
            settled_debt_ids: Debts to move to settled_status
            settled_status: Status value meaning settled
        """
        pass


class LedgerSource(DataSource):
    """Read/write access to the revenue ledger."""

    name = "ledger"

    @abstractmethod
    def list_existing_keys(self, folios: Collection[str]) -> set[tuple[str, str]]:
        """Return the (payment folio, counterpart) pairs recorded for the folios."""
        pass

    @abstractmethod
    def add_payments(self, payments: list[LedgerPayment]) -> int:
        """Insert all payments in one transaction. Returns the number inserted."""
        pass

    @abstractmethod
    def list_payments(self, folio: Optional[str] = None) -> list[LedgerPayment]:
        """List ledger payments, optionally for one folio, ordered by id."""
        pass
