"""CRUD endpoints for contracts (/v1/contracts) with the save-time lifecycle rule"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.schemas import ContractRequest, ContractResponse, WarrantySchema
from sincro_dashboard.api.dependencies import get_current_user, get_now, get_request_id, require_admin
from sincro_dashboard.config import settings
from sincro_dashboard.domain.classifiers import (
    days_until,
    is_urgent,
    is_warranty_active,
    warranty_expiry,
    warranty_remaining_days,
)
from sincro_dashboard.domain.exceptions import ValidationError
from sincro_dashboard.domain.lifecycle import prepare_contract_for_save
from sincro_dashboard.domain.models import Contract, User, Warranty
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ClientRepository, ContractRepository
from sincro_dashboard.infrastructure.observability.metrics import record_contract_save
from sincro_dashboard.infrastructure.observability.logging import log_contract_saved

router = APIRouter()


def contract_response(contract: Contract, now: datetime) -> ContractResponse:
    """Serialize a contract together with its deadline/warranty classification"""
    expiry = warranty_expiry(contract)
    warranty = None
    # Records with an unreadable completion date are shown without a warranty
    if expiry is not None:
        warranty = WarrantySchema(
            completion_date=contract.warranty.completion_date,
            warranty_days=contract.warranty.warranty_days,
        )
    return ContractResponse(
        id=contract.id,
        client_id=contract.client_id,
        title=contract.title,
        platform_contracted=contract.platform_contracted or 0,
        platform_installed=contract.platform_installed or 0,
        elevator_contracted=contract.elevator_contracted or 0,
        elevator_installed=contract.elevator_installed or 0,
        value=contract.value or 0,
        start_date=contract.start_date,
        end_date=contract.end_date,
        installation_address=contract.installation_address,
        estimated_installation_date=contract.estimated_installation_date,
        status=contract.status,
        warranty=warranty,
        observations=contract.observations,
        updated_by=contract.updated_by,
        created_at=contract.created_at,
        urgent=is_urgent(contract, now, settings.deadline_window_days),
        days_until_deadline=days_until(contract.estimated_installation_date, now),
        warranty_expires_on=expiry.date() if expiry else None,
        warranty_active=is_warranty_active(contract, now),
        warranty_remaining_days=warranty_remaining_days(contract, now),
    )


def _to_domain(body: ContractRequest, user: User, contract_id: Optional[str] = None) -> Contract:
    warranty = None
    if body.warranty is not None:
        warranty = Warranty(
            completion_date=body.warranty.completion_date,
            warranty_days=body.warranty.warranty_days,
        )
    return Contract(
        id=contract_id,
        client_id=body.client_id,
        title=body.title,
        platform_contracted=body.platform_contracted,
        platform_installed=body.platform_installed,
        elevator_contracted=body.elevator_contracted,
        elevator_installed=body.elevator_installed,
        value=body.value,
        start_date=body.start_date,
        end_date=body.end_date,
        installation_address=body.installation_address,
        estimated_installation_date=body.estimated_installation_date,
        status=body.status,
        warranty=warranty,
        observations=body.observations,
        updated_by=user.id,
    )


def _prepare(
    body: ContractRequest,
    user: User,
    now: datetime,
    db: Session,
    request_id: str,
    existing: Optional[Contract] = None,
) -> Contract:
    """
    Apply the lifecycle rule and check the client reference before any write.

    An edit that omits the warranty keeps the stored one.
    """
    submitted = _to_domain(body, user, existing.id if existing else None)
    if submitted.warranty is None and existing is not None:
        submitted = replace(submitted, warranty=existing.warranty)

    try:
        contract = prepare_contract_for_save(
            submitted,
            today=now.date(),
            warranty_days=settings.default_warranty_days,
        )
    except ValidationError as e:
        logging.warning(f"Contract rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    if ClientRepository(db).get_client(contract.client_id) is None:
        raise HTTPException(status_code=422, detail="Selected client does not exist")
    return contract


@router.get("/contracts", response_model=List[ContractResponse])
def list_contracts(
    client_id: Optional[str] = Query(None, description="Only contracts of this client"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """List contracts, newest first, flagged as urgent when the deadline is near"""
    contracts = ContractRepository(db).list_contracts(client_id)
    return [contract_response(c, now) for c in contracts]


@router.post("/contracts", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
def create_contract(
    body: ContractRequest,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """
    Create a contract.

    Flow:
    1. Validate client selection, clamp negative numbers
    2. Start a 365-day warranty when created as Installation Completed
    3. Persist and commit
    """
    request_id = get_request_id(request)
    contract = _prepare(body, user, now, db, request_id)
    synthesized = body.warranty is None and contract.warranty is not None

    try:
        saved = ContractRepository(db).create_contract(contract)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to create contract: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_contract_save("create", saved.status.value, synthesized)
    log_contract_saved(request_id, saved.id, saved.status.value, synthesized, user.id)
    return contract_response(saved, now)


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    contract = ContractRepository(db).get_contract(contract_id)
    if contract is None:
        raise HTTPException(status_code=404, detail="Contract not found")
    return contract_response(contract, now)


@router.put("/contracts/{contract_id}", response_model=ContractResponse)
def update_contract(
    contract_id: str,
    body: ContractRequest,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """Edit a contract in any status; the lifecycle rule runs again on the new data"""
    request_id = get_request_id(request)
    repo = ContractRepository(db)
    existing = repo.get_contract(contract_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Contract not found")

    contract = _prepare(body, user, now, db, request_id, existing)
    synthesized = existing.warranty is None and body.warranty is None and contract.warranty is not None

    try:
        saved = repo.update_contract(contract_id, contract)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to update contract: {e}", extra={"request_id": request_id, "contract_id": contract_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_contract_save("update", saved.status.value, synthesized)
    log_contract_saved(request_id, saved.id, saved.status.value, synthesized, user.id)
    return contract_response(saved, now)


@router.delete("/contracts/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a contract and its receivable (administrators only)"""
    request_id = get_request_id(request)
    repo = ContractRepository(db)
    if repo.get_contract(contract_id) is None:
        raise HTTPException(status_code=404, detail="Contract not found")

    try:
        repo.delete_contract(contract_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to delete contract: {e}", extra={"request_id": request_id, "contract_id": contract_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Contract deleted", extra={"request_id": request_id, "contract_id": contract_id, "user_id": admin.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
