"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the source schemas can change
without touching the reconciliation code.
"""

from decimal import Decimal

from cadsync.domain import entities as domain
from cadsync.database.models import (
    Client as ORMClient,
    Request as ORMRequest,
    Fee as ORMFee,
    RequestFee as ORMRequestFee,
    FormField as ORMFormField,
    FormAnswer as ORMFormAnswer,
    CadastralKey as ORMCadastralKey,
    CadastralRecord as ORMCadastralRecord,
    Debt as ORMDebt,
    Payment as ORMPayment,
)


def request_to_domain(orm_request: ORMRequest) -> domain.RequestHeader:
    """Convert SQLAlchemy Request model to domain RequestHeader entity."""
    return domain.RequestHeader(
        id=orm_request.id,
        folio=orm_request.folio,
        paid_at=orm_request.paid_at,
        client_id=orm_request.client_id,
        paying_client_id=orm_request.paying_client_id,
        status=orm_request.status,
    )


def line_item_to_domain(orm_item: ORMRequestFee) -> domain.FeeLineItem:
    """Convert SQLAlchemy RequestFee model to domain FeeLineItem entity."""
    return domain.FeeLineItem(
        id=orm_item.id,
        request_id=orm_item.request_id,
        fee_id=orm_item.fee_id,
        amount=Decimal(orm_item.amount or 0),
        discount=Decimal(orm_item.discount or 0),
    )


def fee_to_domain(orm_fee: ORMFee) -> domain.FeeDefinition:
    """Convert SQLAlchemy Fee model to domain FeeDefinition entity."""
    return domain.FeeDefinition(id=orm_fee.id, name=orm_fee.name)


def form_field_to_domain(orm_field: ORMFormField) -> domain.FormField:
    """Convert SQLAlchemy FormField model to domain FormField entity."""
    return domain.FormField(
        id=orm_field.id,
        form_id=orm_field.form_id,
        name=orm_field.name,
        description=orm_field.description,
    )


def form_answer_to_domain(orm_answer: ORMFormAnswer) -> domain.FormAnswer:
    """Convert SQLAlchemy FormAnswer model to domain FormAnswer entity."""
    return domain.FormAnswer(
        id=orm_answer.id,
        request_id=orm_answer.request_id,
        form_id=orm_answer.form_id,
        field_id=orm_answer.field_id,
        value=orm_answer.value,
    )


def client_to_domain(orm_client: ORMClient) -> domain.Payer:
    """Convert SQLAlchemy Client model to domain Payer entity."""
    return domain.Payer(
        id=orm_client.id,
        person_type=orm_client.person_type,
        surname=orm_client.surname,
        second_surname=orm_client.second_surname,
        given_name=orm_client.given_name,
        legal_name=orm_client.legal_name,
    )


def cadastral_key_to_domain(orm_key: ORMCadastralKey) -> domain.CadastralAccountKey:
    """Convert SQLAlchemy CadastralKey model to domain CadastralAccountKey entity."""
    return domain.CadastralAccountKey(
        id=orm_key.id,
        account_id=orm_key.account_id,
        key_type=orm_key.key_type,
        cadastral_record_id=orm_key.cadastral_record_id,
    )


def cadastral_record_to_domain(orm_record: ORMCadastralRecord) -> domain.CadastralRecord:
    """Convert SQLAlchemy CadastralRecord model to domain CadastralRecord entity."""
    return domain.CadastralRecord(id=orm_record.id, last_year_paid=orm_record.last_year_paid)


def debt_to_domain(orm_debt: ORMDebt) -> domain.DebtRecord:
    """Convert SQLAlchemy Debt model to domain DebtRecord entity."""
    return domain.DebtRecord(
        id=orm_debt.id,
        cadastral_record_id=orm_debt.cadastral_record_id,
        start_date=orm_debt.start_date,
        status=orm_debt.status,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.LedgerPayment:
    """Convert SQLAlchemy Payment model to domain LedgerPayment entity."""
    return domain.LedgerPayment(
        id=orm_payment.id,
        description=orm_payment.description,
        fiscal_year=orm_payment.fiscal_year,
        created_on=orm_payment.created_on,
        due_on=orm_payment.due_on,
        amount=Decimal(orm_payment.amount),
        status=orm_payment.status,
        payment_folio=orm_payment.payment_folio,
        paid_at=orm_payment.paid_at,
        origin=orm_payment.origin,
        counterpart=orm_payment.counterpart,
        reference=orm_payment.reference,
        category_code=orm_payment.category_code,
        division=orm_payment.division,
    )


def payment_to_orm(payment: domain.LedgerPayment) -> ORMPayment:
    """Convert domain LedgerPayment entity to a new SQLAlchemy Payment row."""
    return ORMPayment(
        description=payment.description,
        fiscal_year=payment.fiscal_year,
        division=payment.division,
        created_on=payment.created_on,
        due_on=payment.due_on,
        amount=payment.amount,
        status=payment.status,
        payment_folio=payment.payment_folio,
        paid_at=payment.paid_at,
        origin=payment.origin,
        counterpart=payment.counterpart,
        reference=payment.reference,
        category_code=payment.category_code,
    )
