"""Shared pytest fixtures for cadsync tests."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from cadsync.config import SyncSettings
from cadsync.database.factories import create_sqlite_sources
from cadsync.database.models import (
    CadastralKey,
    CadastralRecord,
    Client,
    Debt,
    Fee,
    FormAnswer,
    FormField,
    Request,
    RequestFee,
)
from cadsync.domain.engine import SyncEngine
from cadsync.logging_config import reset_logging
from cadsync.domain.entities import (
    CADASTRAL_ACCOUNT_FIELD,
    CADASTRAL_ACCOUNT_FORM_ID,
    DEBT_STATUS_OUTSTANDING,
    FISCAL_ACCOUNT_KEY_TYPE,
    PERIOD_END_FIELD,
    PERIOD_START_FIELD,
    REQUEST_STATUS_FINALIZED,
)

PERIOD_FORM_ID = 2
PREDIAL_FEE = "Impuesto Predial 2020-2022"
DEFAULT_PAID_AT = datetime(2024, 3, 15, 10, 30)


class PointOfSaleSeeder:
    """Writes point-of-sale rows directly through the ORM."""

    def __init__(self, source):
        self.session = source.session_factory()
        self.account_field = self._add(
            FormField(form_id=CADASTRAL_ACCOUNT_FORM_ID, name=CADASTRAL_ACCOUNT_FIELD)
        )
        self.start_field = self._add(FormField(form_id=PERIOD_FORM_ID, name=PERIOD_START_FIELD))
        self.end_field = self._add(FormField(form_id=PERIOD_FORM_ID, name=PERIOD_END_FIELD))
        self._fees = {}

    def _add(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def fee(self, name):
        if name not in self._fees:
            self._fees[name] = self._add(Fee(name=name))
        return self._fees[name]

    def client(self, person_type=1, **names):
        return self._add(Client(person_type=person_type, **names)).id

    def field(self, form_id, name, description=None):
        return self._add(FormField(form_id=form_id, name=name, description=description)).id

    def answer(self, request_id, form_id, field_id, value):
        return self._add(
            FormAnswer(request_id=request_id, form_id=form_id, field_id=field_id, value=value)
        ).id

    def request(
        self,
        folio,
        account="U-3452",
        start="2020",
        end="2022",
        fees=((PREDIAL_FEE, "500.00", "50.00"),),
        status=REQUEST_STATUS_FINALIZED,
        paid_at=DEFAULT_PAID_AT,
        client_id=None,
        paying_client_id=None,
    ):
        """Create a request with its form answers and fee line items.

        ``None`` for account/start/end leaves that answer out entirely.
        """
        request = self._add(
            Request(
                folio=folio,
                paid_at=paid_at,
                status=status,
                client_id=client_id,
                paying_client_id=paying_client_id,
            )
        )
        if account is not None:
            self.session.add(
                FormAnswer(
                    request_id=request.id,
                    form_id=CADASTRAL_ACCOUNT_FORM_ID,
                    field_id=self.account_field.id,
                    value=account,
                )
            )
        if start is not None:
            self.session.add(
                FormAnswer(
                    request_id=request.id,
                    form_id=PERIOD_FORM_ID,
                    field_id=self.start_field.id,
                    value=start,
                )
            )
        if end is not None:
            self.session.add(
                FormAnswer(
                    request_id=request.id,
                    form_id=PERIOD_FORM_ID,
                    field_id=self.end_field.id,
                    value=end,
                )
            )
        for name, amount, discount in fees:
            self.session.add(
                RequestFee(
                    request_id=request.id,
                    fee_id=self.fee(name).id,
                    amount=Decimal(amount),
                    discount=Decimal(discount),
                )
            )
        self.session.commit()
        return request.id

    def close(self):
        self.session.close()


class CadastralSeeder:
    """Writes cadastral registry rows directly through the ORM."""

    def __init__(self, source):
        self.session = source.session_factory()

    def record(self, account_id, last_year_paid=None, key_type=FISCAL_ACCOUNT_KEY_TYPE, debt_years=()):
        """Create a cadastral record reachable through account_id.

        Returns:
            Tuple of (record id, {debt year: debt id})
        """
        record = CadastralRecord(last_year_paid=last_year_paid)
        self.session.add(record)
        self.session.flush()
        self.session.add(
            CadastralKey(account_id=account_id, key_type=key_type, cadastral_record_id=record.id)
        )
        debts = {}
        for year in debt_years:
            debt = Debt(
                cadastral_record_id=record.id,
                start_date=date(year, 1, 1) if year is not None else None,
                status=DEBT_STATUS_OUTSTANDING,
            )
            self.session.add(debt)
            self.session.flush()
            debts[year] = debt.id
        self.session.commit()
        return record.id, debts

    def last_year_paid(self, record_id):
        self.session.expire_all()
        return self.session.get(CadastralRecord, record_id).last_year_paid

    def debt_status(self, debt_id):
        self.session.expire_all()
        return self.session.get(Debt, debt_id).status

    def close(self):
        self.session.close()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers the CLI attaches to captured streams."""
    yield
    reset_logging()


@pytest.fixture
def sources(tmp_path):
    """Create the three data sources as temporary SQLite databases."""
    pos, cadastral, ledger = create_sqlite_sources(str(tmp_path))
    for source in (pos, cadastral, ledger):
        source.connect()

    yield pos, cadastral, ledger

    # Cleanup
    for source in (pos, cadastral, ledger):
        source.disconnect()


@pytest.fixture
def pos_source(sources):
    return sources[0]


@pytest.fixture
def cadastral_source(sources):
    return sources[1]


@pytest.fixture
def ledger_source(sources):
    return sources[2]


@pytest.fixture
def pos_seed(pos_source):
    """Seeder for point-of-sale rows, with the standard form fields declared."""
    seeder = PointOfSaleSeeder(pos_source)
    yield seeder
    seeder.close()


@pytest.fixture
def cadastral_seed(cadastral_source):
    """Seeder for cadastral registry rows."""
    seeder = CadastralSeeder(cadastral_source)
    yield seeder
    seeder.close()


@pytest.fixture
def settings():
    return SyncSettings()


@pytest.fixture
def engine(pos_source, cadastral_source, ledger_source, settings):
    """Create a SyncEngine over the temporary sources."""
    return SyncEngine(pos_source, cadastral_source, ledger_source, settings)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(pos_source, cadastral_source, ledger_source):
    """Global CLI options pointing at the temporary databases."""
    return [
        "--pos-url",
        pos_source.database_url,
        "--cadastral-url",
        cadastral_source.database_url,
        "--ledger-url",
        ledger_source.database_url,
    ]
