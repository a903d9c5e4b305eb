"""Accounts receivable derivation for completed contracts"""

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from sincro_dashboard.domain.exceptions import ContractNotEligibleError, ReceivableAlreadyExistsError
from sincro_dashboard.domain.models import AccountsReceivable, Contract, ContractStatus, ReceivableStatus
from sincro_dashboard.utils.date_utils import add_days, as_utc, parse_date

DEFAULT_DUE_DAYS = 30


def _billed_contract_ids(receivables: Iterable[AccountsReceivable]) -> set:
    return {r.contract_id for r in receivables}


def _awaiting_billing(contract: Contract, billed: set) -> bool:
    return contract.status == ContractStatus.COMPLETED and contract.id not in billed


def is_eligible_for_billing(contract: Contract, receivables: Iterable[AccountsReceivable]) -> bool:
    """Completed installation with no receivable referencing the contract yet"""
    return _awaiting_billing(contract, _billed_contract_ids(receivables))


def eligible_contracts(
    contracts: Sequence[Contract],
    receivables: Iterable[AccountsReceivable],
) -> List[Contract]:
    """Contracts awaiting a billing record, in input order"""
    billed = _billed_contract_ids(receivables)
    return [c for c in contracts if _awaiting_billing(c, billed)]


def build_receivable(
    contract: Contract,
    receivables: Iterable[AccountsReceivable],
    today: date,
    due_days: int = DEFAULT_DUE_DAYS,
) -> AccountsReceivable:
    """
    Materialize the pending receivable for a completed contract.

    Issue date is today and payment is due ``due_days`` days later.

    Raises:
        ContractNotEligibleError: Installation not completed yet
        ReceivableAlreadyExistsError: Contract already billed
    """
    if contract.status != ContractStatus.COMPLETED:
        raise ContractNotEligibleError(
            f"Contract {contract.id} is '{contract.status.value}', billing requires '{ContractStatus.COMPLETED.value}'"
        )
    if contract.id in _billed_contract_ids(receivables):
        raise ReceivableAlreadyExistsError(f"Contract {contract.id} already has an accounts receivable record")

    return AccountsReceivable(
        id=None,
        contract_id=contract.id,
        issue_date=today,
        due_date=add_days(today, due_days),
        status=ReceivableStatus.PENDING,
    )


def advance_status(receivable: AccountsReceivable, new_status: ReceivableStatus) -> AccountsReceivable:
    """Move a receivable to a new billing state (Received/Cancelled are terminal by convention only)"""
    return replace(receivable, status=ReceivableStatus(new_status))


def is_overdue(receivable: AccountsReceivable, now: datetime) -> bool:
    """Still pending after its due date"""
    if receivable.status != ReceivableStatus.PENDING:
        return False
    due = parse_date(receivable.due_date)
    return due is not None and due < as_utc(now)


def filter_receivables(
    receivables: Sequence[AccountsReceivable],
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[AccountsReceivable]:
    """Case-insensitive search over client name, contract title and invoice number"""
    term = (search or "").strip().lower()
    results = []
    for r in receivables:
        if status and status != "all" and r.status != status:
            continue
        if term:
            haystack = (r.client_name, r.contract_title, r.invoice_number)
            if not any(term in (text or "").lower() for text in haystack):
                continue
        results.append(r)
    return results
