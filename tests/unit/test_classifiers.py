"""Unit tests for deadline and warranty classification"""

import pytest
from datetime import date, datetime, timedelta, timezone
from sincro_dashboard.domain.classifiers import (
    days_until,
    is_urgent,
    is_warranty_active,
    warranty_expiry,
    warranty_remaining_days,
)
from sincro_dashboard.domain.models import ContractStatus, Warranty


def test_days_until_same_day_is_zero(now):
    """Deadline today counts as 0 days even later in the day"""
    assert days_until(now.date(), now) == 0
    assert days_until(now.date().isoformat(), now) == 0


def test_days_until_rounds_up_partial_days(now):
    # Noon to midnight 3 days ahead = 2.5 days -> 3
    assert days_until(now.date() + timedelta(days=3), now) == 3
    # Noon back to midnight 2 days earlier = -2.5 days -> -2
    assert days_until(now.date() - timedelta(days=2), now) == -2


def test_days_until_missing_or_malformed_date(now):
    assert days_until(None, now) is None
    assert days_until("", now) is None
    assert days_until("31/12/2024", now) is None
    assert days_until("2024-02-30", now) is None


def test_days_until_accepts_naive_now():
    naive_now = datetime(2024, 6, 1, 0, 0)
    assert days_until("2024-06-11", naive_now) == 10


@pytest.mark.parametrize("status", [ContractStatus.COMPLETED, ContractStatus.CLOSED])
def test_finished_contracts_never_urgent(make_contract, now, status):
    """Completed and closed contracts are excluded regardless of deadline"""
    contract = make_contract(status=status, estimated_installation_date=now.date())
    assert is_urgent(contract, now) is False


def test_urgency_window_boundaries(make_contract, now):
    today = now.date()
    assert is_urgent(make_contract(estimated_installation_date=today), now) is True
    assert is_urgent(make_contract(estimated_installation_date=today + timedelta(days=15)), now) is True
    assert is_urgent(make_contract(estimated_installation_date=today + timedelta(days=16)), now) is False
    assert is_urgent(make_contract(estimated_installation_date=today - timedelta(days=2)), now) is False


def test_urgency_without_deadline(make_contract, now):
    assert is_urgent(make_contract(estimated_installation_date=None), now) is False
    assert is_urgent(make_contract(estimated_installation_date="amanhã"), now) is False


def test_pending_contract_can_be_urgent(make_contract, now):
    contract = make_contract(status=ContractStatus.PENDING, estimated_installation_date=now.date() + timedelta(days=5))
    assert is_urgent(contract, now) is True


def test_warranty_expiry_and_remaining_days(make_contract):
    """Completion 2024-01-01 + 30 days, checked on 2024-01-20"""
    contract = make_contract(warranty=Warranty(completion_date="2024-01-01", warranty_days=30))
    reference = datetime(2024, 1, 20, tzinfo=timezone.utc)

    assert warranty_expiry(contract) == datetime(2024, 1, 31, tzinfo=timezone.utc)
    assert is_warranty_active(contract, reference) is True
    assert warranty_remaining_days(contract, reference) == 11


def test_expired_warranty_is_inactive(make_contract, now):
    contract = make_contract(warranty=Warranty(completion_date=date(2023, 1, 1), warranty_days=365))
    assert is_warranty_active(contract, now) is False
    assert warranty_remaining_days(contract, now) < 0


def test_contract_without_warranty(make_contract, now):
    contract = make_contract(warranty=None)
    assert warranty_expiry(contract) is None
    assert is_warranty_active(contract, now) is False
    assert warranty_remaining_days(contract, now) is None


def test_unparseable_completion_date_is_excluded(make_contract, now):
    """Invalid completion dates never produce an active warranty"""
    contract = make_contract(warranty=Warranty(completion_date="data inválida", warranty_days=365))
    assert warranty_expiry(contract) is None
    assert is_warranty_active(contract, now) is False
    assert warranty_remaining_days(contract, now) is None


@pytest.mark.parametrize("warranty_days", [3_000_000, 10**10, float("inf"), float("nan")])
def test_out_of_range_warranty_days_are_excluded(make_contract, now, warranty_days):
    """Coverage beyond the representable calendar never raises"""
    contract = make_contract(warranty=Warranty(completion_date="2024-01-01", warranty_days=warranty_days))
    assert warranty_expiry(contract) is None
    assert is_warranty_active(contract, now) is False
    assert warranty_remaining_days(contract, now) is None
