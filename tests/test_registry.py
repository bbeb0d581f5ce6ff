"""Tests for CadastralRegistryService."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from cadsync.config import SyncSettings
from cadsync.domain.entities import (
    DEBT_STATUS_OUTSTANDING,
    DEBT_STATUS_SETTLED,
    Outcome,
    PaymentRequestRecord,
)
from cadsync.domain.errors import PersistenceError
from cadsync.domain.registry import CadastralRegistryService, registry_period
from cadsync.utils.period_parser import Period


@pytest.fixture
def service(pos_source, cadastral_source, settings):
    return CadastralRegistryService(pos_source, cadastral_source, settings)


def _record(start, end):
    return PaymentRequestRecord(
        fee_id=1,
        fee_name="Impuesto Predial",
        folio="F1",
        paid_at=datetime(2024, 1, 1),
        raw_account="U-1",
        period_start=start,
        period_end=end,
        payer_name="",
        gross_amount=Decimal("1"),
        discount_amount=Decimal("0"),
    )


def test_registry_period_requires_end_year():
    assert registry_period(_record("2020", "")) is None
    assert registry_period(_record("2020", "abc")) is None


def test_registry_period_start_defaults_to_end():
    assert registry_period(_record("", "2022")) == Period(2022, 2022)
    assert registry_period(_record("2020", "2022")) == Period(2020, 2022)


def test_registry_period_invalid_start_is_unusable():
    assert registry_period(_record("20x0", "2022")) is None


def test_watermark_advances(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", end="2022")
    record_id, _ = cadastral_seed.record("U3452", last_year_paid=2019)

    summary = service.update_registry()

    assert summary.records_updated == 1
    assert summary.total_processed == 1
    assert summary.outcome == Outcome.COMPLETED
    assert cadastral_seed.last_year_paid(record_id) == 2022


def test_watermark_set_when_missing(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", end="2021")
    record_id, _ = cadastral_seed.record("U3452", last_year_paid=None)

    service.update_registry()

    assert cadastral_seed.last_year_paid(record_id) == 2021


def test_watermark_never_decreases(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2015", end="2016")
    record_id, _ = cadastral_seed.record("U3452", last_year_paid=2020)

    summary = service.update_registry()

    assert summary.records_updated == 0
    assert cadastral_seed.last_year_paid(record_id) == 2020


def test_highest_end_year_wins_within_run(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2021", end="2023")
    pos_seed.request("F101", start="2020", end="2021")
    record_id, _ = cadastral_seed.record("U3452", last_year_paid=2019)

    service.update_registry()

    assert cadastral_seed.last_year_paid(record_id) == 2023


def test_debts_within_period_settled(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="2022")
    _, debts = cadastral_seed.record("U3452", debt_years=[2019, 2020, 2021, 2022, 2023])

    summary = service.update_registry()

    assert summary.debts_settled == 3
    for year in (2020, 2021, 2022):
        assert cadastral_seed.debt_status(debts[year]) == DEBT_STATUS_SETTLED
    for year in (2019, 2023):
        assert cadastral_seed.debt_status(debts[year]) == DEBT_STATUS_OUTSTANDING


def test_debt_without_start_date_untouched(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="2022")
    _, debts = cadastral_seed.record("U3452", debt_years=[None])

    summary = service.update_registry()

    assert summary.debts_settled == 0
    assert cadastral_seed.debt_status(debts[None]) == DEBT_STATUS_OUTSTANDING


def test_second_run_settles_nothing_new(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="2021")
    cadastral_seed.record("U3452", last_year_paid=2018, debt_years=[2020, 2021])

    first = service.update_registry()
    second = service.update_registry()

    assert first.debts_settled == 2
    assert first.records_updated == 1
    assert second.debts_settled == 0
    assert second.records_updated == 0


def test_overlapping_periods_count_debt_once(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="2021")
    pos_seed.request("F101", start="2021", end="2022")
    _, debts = cadastral_seed.record("U3452", debt_years=[2020, 2021, 2022])

    summary = service.update_registry()

    assert summary.debts_settled == 3


def test_records_without_period_or_account_omitted(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="")
    pos_seed.request("F101", account="   ")
    pos_seed.request("F102", start="x", end="2022")
    cadastral_seed.record("U3452")

    summary = service.update_registry()

    assert summary.omitted == 3
    assert summary.total_processed == 3
    assert summary.outcome == Outcome.COMPLETED_WITH_SKIPS


def test_unknown_account_not_found(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", account="U-999")
    cadastral_seed.record("U3452")

    summary = service.update_registry()

    assert summary.not_found == 1
    assert summary.records_updated == 0


def test_only_property_tax_fees_considered(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", fees=(("Licencia de funcionamiento", "300.00", "0"),))
    record_id, _ = cadastral_seed.record("U3452", last_year_paid=2010)

    summary = service.update_registry()

    assert summary.outcome == Outcome.NO_WORK
    assert summary.total_processed == 0
    assert cadastral_seed.last_year_paid(record_id) == 2010


def test_fee_category_match_is_case_insensitive(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", fees=(("IMPUESTO PREDIAL URBANO", "300.00", "0"),))
    cadastral_seed.record("U3452")

    summary = service.update_registry()

    assert summary.total_processed == 1


def test_fee_category_setting(pos_source, cadastral_source, pos_seed, cadastral_seed):
    pos_seed.request("F100", fees=(("Derecho de agua", "300.00", "0"),))
    cadastral_seed.record("U3452")
    service = CadastralRegistryService(
        pos_source, cadastral_source, SyncSettings(fee_category="agua")
    )

    summary = service.update_registry()

    assert summary.records_updated == 1


def test_failed_write_changes_nothing(service, pos_seed, cadastral_seed, cadastral_source, monkeypatch):
    pos_seed.request("F100", start="2020", end="2022")
    record_id, debts = cadastral_seed.record("U3452", last_year_paid=2019, debt_years=[2020, 2021])

    session = cadastral_source._get_session()

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(PersistenceError) as excinfo:
        service.update_registry()

    assert excinfo.value.source == "cadastral"
    assert cadastral_seed.last_year_paid(record_id) == 2019
    assert cadastral_seed.debt_status(debts[2020]) == DEBT_STATUS_OUTSTANDING
    assert cadastral_seed.debt_status(debts[2021]) == DEBT_STATUS_OUTSTANDING


def test_already_settled_debts_not_counted(service, pos_seed, cadastral_seed):
    pos_seed.request("F100", start="2020", end="2021")
    _, debts = cadastral_seed.record("U3452", debt_years=[2020, 2021])
    service.update_registry()

    summary = service.update_registry()

    assert summary.debts_settled == 0
    assert cadastral_seed.debt_status(debts[2020]) == DEBT_STATUS_SETTLED
