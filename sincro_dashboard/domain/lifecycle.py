"""Contract lifecycle rule applied before a contract is created or updated"""

import math
from dataclasses import replace
from datetime import date

from sincro_dashboard.domain.exceptions import MissingClientError
from sincro_dashboard.domain.models import Contract, ContractStatus, Warranty

DEFAULT_WARRANTY_DAYS = 365

QUANTITY_FIELDS = (
    "platform_contracted",
    "platform_installed",
    "elevator_contracted",
    "elevator_installed",
)


def clamp_non_negative(value):
    """Missing, negative or non-finite numbers become 0"""
    if value is None or (isinstance(value, float) and not math.isfinite(value)) or value < 0:
        return 0
    return value


def validate_contract(contract: Contract) -> None:
    """
    Reject submissions that must never reach persistence.

    Raises:
        MissingClientError: No client selected
    """
    if not contract.client_id or not str(contract.client_id).strip():
        raise MissingClientError("Selecione um cliente para o contrato")


def sanitize_contract(contract: Contract) -> Contract:
    """Clamp quantities, value and warranty days to zero or greater"""
    quantities = {name: int(clamp_non_negative(getattr(contract, name))) for name in QUANTITY_FIELDS}
    warranty = contract.warranty
    if warranty is not None:
        warranty = Warranty(
            completion_date=warranty.completion_date,
            warranty_days=int(clamp_non_negative(warranty.warranty_days)),
        )
    return replace(
        contract,
        value=float(clamp_non_negative(contract.value)),
        warranty=warranty,
        **quantities,
    )


def apply_auto_warranty(
    contract: Contract,
    today: date,
    warranty_days: int = DEFAULT_WARRANTY_DAYS,
) -> Contract:
    """
    Start the warranty when a contract is saved as Installation Completed.

    An existing warranty record is always kept as submitted.
    """
    if contract.status != ContractStatus.COMPLETED or contract.warranty is not None:
        return contract
    return replace(
        contract,
        warranty=Warranty(completion_date=today.isoformat(), warranty_days=warranty_days),
    )


def prepare_contract_for_save(
    contract: Contract,
    today: date,
    warranty_days: int = DEFAULT_WARRANTY_DAYS,
) -> Contract:
    """
    Main entry point: validate, sanitize and derive fields of a submitted contract.

    Returns a new Contract; the submitted instance is left untouched.
    """
    validate_contract(contract)
    return apply_auto_warranty(sanitize_contract(contract), today, warranty_days)
