"""Payment request assembly domain service."""

from collections import defaultdict
from typing import Optional

from cadsync.database.base import PointOfSaleSource
from cadsync.domain.entities import (
    CADASTRAL_ACCOUNT_FIELD,
    CADASTRAL_ACCOUNT_FORM_ID,
    PERIOD_END_FIELD,
    PERIOD_START_FIELD,
    REQUEST_STATUS_FINALIZED,
    FormField,
    PaymentRequestRecord,
    PeriodFilter,
    RequestHeader,
)
from cadsync.logging_config import get_logger

logger = get_logger(__name__)


class PaymentRequestService:
    """Builds PaymentRequestRecords from the point-of-sale ledger."""

    def __init__(self, pos: PointOfSaleSource):
        """Initialize payment request service.

        Args:
            pos: Point-of-sale source
        """
        self.pos = pos

    def list_payment_requests(
        self, period_filter: Optional[PeriodFilter] = None
    ) -> list[PaymentRequestRecord]:
        """Assemble one record per (finalized request, fee line item).

        Only requests that answered the cadastral account form take part.
        Every table is read once in bulk and joined in memory through dicts
        keyed by foreign id.

        Args:
            period_filter: Optional inclusive window on the payment timestamp

        Returns:
            Records with a non-empty raw account, sorted by raw account

        Raises:
            SourceUnavailableError: If any read fails; no partial result
        """
        request_ids = self.pos.list_request_ids_with_form(CADASTRAL_ACCOUNT_FORM_ID)
        if not request_ids:
            return []

        paid_from = period_filter.start if period_filter is not None else None
        paid_to = period_filter.end if period_filter is not None else None
        requests = self.pos.list_requests(
            request_ids, status=REQUEST_STATUS_FINALIZED, paid_from=paid_from, paid_to=paid_to
        )
        if period_filter is not None:
            # A request without payment timestamp never falls inside a window
            requests = [r for r in requests if period_filter.contains(r.paid_at)]
        if not requests:
            return []

        selected_ids = [r.id for r in requests]
        line_items = self.pos.list_line_items(selected_ids)
        fees = {fee.id: fee for fee in self.pos.list_fees({item.fee_id for item in line_items})}

        answers_by_request: dict[int, dict[int, str]] = defaultdict(dict)
        for answer in self.pos.list_form_answers(selected_ids):
            # First answer to a field wins
            answers_by_request[answer.request_id].setdefault(answer.field_id, answer.value or "")

        field_ids = _field_ids_by_name(self.pos.list_form_fields())

        payer_ids = {pid for pid in (_payer_id(r) for r in requests) if pid is not None}
        payer_names = {payer.id: payer.display_name for payer in self.pos.list_payers(payer_ids)}

        items_by_request = defaultdict(list)
        for item in line_items:
            items_by_request[item.request_id].append(item)

        records = []
        for request in requests:
            answers = answers_by_request.get(request.id, {})
            account = _answer(answers, field_ids, CADASTRAL_ACCOUNT_FIELD)
            period_start = _answer(answers, field_ids, PERIOD_START_FIELD)
            period_end = _answer(answers, field_ids, PERIOD_END_FIELD)
            payer_id = _payer_id(request)
            payer_name = payer_names.get(payer_id, "") if payer_id is not None else ""

            for item in items_by_request.get(request.id, []):
                fee = fees.get(item.fee_id)
                records.append(
                    PaymentRequestRecord(
                        fee_id=item.fee_id,
                        fee_name=fee.name if fee is not None else "",
                        folio=request.folio or "",
                        paid_at=request.paid_at,
                        raw_account=account,
                        period_start=period_start,
                        period_end=period_end,
                        payer_name=payer_name,
                        gross_amount=item.amount,
                        discount_amount=item.discount,
                    )
                )

        # sorted() is stable, so ties keep request/line item order
        result = sorted((r for r in records if r.raw_account), key=lambda r: r.raw_account)
        logger.info(
            "Assembled %d payment request records from %d requests", len(result), len(requests)
        )
        return result


def _field_ids_by_name(fields: list[FormField]) -> dict[str, int]:
    """Map field names to the first declared field id carrying that name."""
    ids: dict[str, int] = {}
    for field in fields:
        ids.setdefault(field.name, field.id)
    return ids


def _answer(answers: dict[int, str], field_ids: dict[str, int], field_name: str) -> str:
    field_id = field_ids.get(field_name)
    if field_id is None:
        return ""
    return answers.get(field_id, "")


def _payer_id(request: RequestHeader) -> Optional[int]:
    if request.paying_client_id is not None:
        return request.paying_client_id
    return request.client_id
