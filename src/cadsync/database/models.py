"""SQLAlchemy models for the three cadsync data sources.

Each source lives in its own database, so each gets its own declarative base
and its own metadata.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

PointOfSaleBase = declarative_base()
CadastralBase = declarative_base()
LedgerBase = declarative_base()


# Point-of-sale ledger


class Client(PointOfSaleBase):
    """Client (payer) model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    person_type = Column(Integer, nullable=False, default=1)
    surname = Column(String, nullable=True)
    second_surname = Column(String, nullable=True)
    given_name = Column(String, nullable=True)
    legal_name = Column(String, nullable=True)


class Request(PointOfSaleBase):
    """Payment request header model."""

    __tablename__ = "requests"

    id = Column(Integer, primary_key=True)
    folio = Column(String, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    paying_client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    status = Column(Integer, nullable=False, default=1)

    # Relationships
    line_items = relationship("RequestFee", back_populates="request")
    answers = relationship("FormAnswer", back_populates="request")


class Fee(PointOfSaleBase):
    """Fee (concept) catalog model."""

    __tablename__ = "fees"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)


class RequestFee(PointOfSaleBase):
    """Fee line item attached to a request."""

    __tablename__ = "request_fees"

    id = Column(Integer, primary_key=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=False)
    fee_id = Column(Integer, ForeignKey("fees.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    request = relationship("Request", back_populates="line_items")


class FormField(PointOfSaleBase):
    """Field declared by a dynamic form."""

    __tablename__ = "form_fields"

    id = Column(Integer, primary_key=True)
    form_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)


class FormAnswer(PointOfSaleBase):
    """Answer to a form field for one request."""

    __tablename__ = "form_answers"

    id = Column(Integer, primary_key=True)
    request_id = Column(Integer, ForeignKey("requests.id"), nullable=True)
    form_id = Column(Integer, nullable=False)
    field_id = Column(Integer, ForeignKey("form_fields.id"), nullable=False)
    value = Column(String, nullable=True)

    # Relationships
    request = relationship("Request", back_populates="answers")


# Cadastral registry


class CadastralRecord(CadastralBase):
    """Property entry (padron) model."""

    __tablename__ = "cadastral_records"

    id = Column(Integer, primary_key=True)
    last_year_paid = Column(Integer, nullable=True)

    # Relationships
    keys = relationship("CadastralKey", back_populates="record")
    debts = relationship("Debt", back_populates="record")


class CadastralKey(CadastralBase):
    """Cadastral key model; key_type discriminates its category."""

    __tablename__ = "cadastral_keys"

    id = Column(Integer, primary_key=True)
    account_id = Column(String, nullable=False, index=True)
    key_type = Column(Integer, nullable=False)
    cadastral_record_id = Column(Integer, ForeignKey("cadastral_records.id"), nullable=False)

    # Relationships
    record = relationship("CadastralRecord", back_populates="keys")


class Debt(CadastralBase):
    """Yearly debt owed by a cadastral record."""

    __tablename__ = "debts"

    id = Column(Integer, primary_key=True)
    cadastral_record_id = Column(Integer, ForeignKey("cadastral_records.id"), nullable=False)
    start_date = Column(Date, nullable=True)
    status = Column(Integer, nullable=False, default=1)

    # Relationships
    record = relationship("CadastralRecord", back_populates="debts")


# Revenue ledger


class Payment(LedgerBase):
    """Revenue ledger payment model."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    fiscal_year = Column(Integer, nullable=False)
    division = Column(Integer, nullable=False, default=0)
    created_on = Column(Date, nullable=True)
    due_on = Column(Date, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, nullable=False)
    payment_folio = Column(String, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    origin = Column(String, nullable=False)
    counterpart = Column(String, nullable=False)
    reference = Column(String, nullable=False)
    category_code = Column(Integer, nullable=False, default=0)
    cancellation_folio = Column(String, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    recorded_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One ledger row per receipt folio and cadastral account
    __table_args__ = (
        UniqueConstraint("payment_folio", "counterpart", name="uq_payment_folio_counterpart"),
    )


def create_session_factory(database_url: str, base) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory for the tables of one base."""
    engine = create_engine(database_url, echo=False)
    base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
