"""Deadline and warranty classification shared by metrics, listings and reports"""

from datetime import datetime, timedelta
from typing import Optional

from sincro_dashboard.domain.models import Contract, ContractStatus, DateLike
from sincro_dashboard.utils.date_utils import as_utc, ceil_days, parse_date

DEADLINE_WINDOW_DAYS = 15

# Contracts in these states can no longer miss an installation deadline
FINISHED_STATUSES = frozenset({ContractStatus.COMPLETED, ContractStatus.CLOSED})


def days_until(value: Optional[DateLike], now: datetime) -> Optional[int]:
    """
    Whole days from ``now`` until ``value``, rounded up.

    Negative for past dates. Returns None when the date is missing or malformed.
    """
    target = parse_date(value)
    if target is None:
        return None
    return ceil_days(target - as_utc(now))


def is_urgent(contract: Contract, now: datetime, window_days: int = DEADLINE_WINDOW_DAYS) -> bool:
    """Deadline within the next ``window_days`` days (inclusive) and work not finished"""
    if contract.status in FINISHED_STATUSES:
        return False
    remaining = days_until(contract.estimated_installation_date, now)
    if remaining is None:
        return False
    return 0 <= remaining <= window_days


def warranty_expiry(contract: Contract) -> Optional[datetime]:
    """Completion date plus warranty days; None without a usable warranty record"""
    warranty = contract.warranty
    if warranty is None:
        return None
    completion = parse_date(warranty.completion_date)
    if completion is None:
        return None
    try:
        days = int(warranty.warranty_days or 0)
        return completion + timedelta(days=days)
    except (TypeError, ValueError, OverflowError):
        return None


def is_warranty_active(contract: Contract, now: datetime) -> bool:
    expiry = warranty_expiry(contract)
    return expiry is not None and expiry > as_utc(now)


def warranty_remaining_days(contract: Contract, now: datetime) -> Optional[int]:
    """Days until the warranty expires, rounded up; None without a warranty"""
    expiry = warranty_expiry(contract)
    if expiry is None:
        return None
    return ceil_days(expiry - as_utc(now))
