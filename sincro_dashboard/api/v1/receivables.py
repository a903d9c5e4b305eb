"""Accounts receivable endpoints (/v1/receivables)"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.contracts import contract_response
from sincro_dashboard.api.v1.schemas import (
    ContractResponse,
    ReceivableResponse,
    ReceivableStatusUpdate,
    ReceivableUpdate,
)
from sincro_dashboard.api.dependencies import get_current_user, get_now, get_request_id, require_admin
from sincro_dashboard.config import settings
from sincro_dashboard.domain.exceptions import ContractNotEligibleError, ReceivableAlreadyExistsError
from sincro_dashboard.domain.models import AccountsReceivable, User
from sincro_dashboard.domain.receivables import (
    advance_status,
    build_receivable,
    eligible_contracts,
    filter_receivables,
    is_overdue,
)
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ContractRepository, ReceivableRepository
from sincro_dashboard.infrastructure.observability.metrics import (
    receivable_status_counter,
    receivables_generated_counter,
)
from sincro_dashboard.infrastructure.observability.logging import log_receivable_generated

router = APIRouter()


def receivable_response(receivable: AccountsReceivable, now: datetime) -> ReceivableResponse:
    response = ReceivableResponse.model_validate(receivable)
    response.overdue = is_overdue(receivable, now)
    return response


def _save(db: Session, receivable_id: str, receivable: AccountsReceivable, request_id: str) -> AccountsReceivable:
    try:
        saved = ReceivableRepository(db).update_receivable(receivable_id, receivable)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(
            f"Failed to update receivable: {e}",
            extra={"request_id": request_id, "receivable_id": receivable_id},
        )
        raise HTTPException(status_code=500, detail="Internal server error")
    return saved


@router.get("/receivables", response_model=List[ReceivableResponse])
def list_receivables(
    search: Optional[str] = Query(None, description="Client name, contract title or invoice number"),
    status_filter: Optional[str] = Query("all", alias="status", description="'all' or a receivable status"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """List receivables with client/contract display fields and overdue flag"""
    receivables = filter_receivables(ReceivableRepository(db).list_receivables(), search, status_filter)
    return [receivable_response(r, now) for r in receivables]


@router.get("/receivables/eligible", response_model=List[ContractResponse])
def list_eligible_contracts(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """Completed contracts still waiting for a billing record"""
    contracts = ContractRepository(db).list_contracts()
    receivables = ReceivableRepository(db).list_receivables()
    return [contract_response(c, now) for c in eligible_contracts(contracts, receivables)]


@router.post(
    "/receivables/generate/{contract_id}",
    response_model=ReceivableResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_receivable(
    contract_id: str,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """
    Create the pending receivable for a completed contract.

    Issue date is today, due date today + 30 days. The unique constraint on
    contract_id backs up the existence check against concurrent requests.
    """
    request_id = get_request_id(request)
    contract = ContractRepository(db).get_contract(contract_id)
    if contract is None:
        raise HTTPException(status_code=404, detail="Contract not found")

    repo = ReceivableRepository(db)
    try:
        receivable = build_receivable(
            contract, repo.list_receivables(), now.date(), settings.receivable_due_days
        )
        saved = repo.create_receivable(receivable)
        db.commit()

    except ContractNotEligibleError as e:
        db.rollback()
        logging.warning(f"Receivable not generated: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except (ReceivableAlreadyExistsError, IntegrityError) as e:
        db.rollback()
        logging.warning(f"Duplicate receivable: {e}", extra={"request_id": request_id, "contract_id": contract_id})
        raise HTTPException(status_code=409, detail="Contract already has an accounts receivable record")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    receivables_generated_counter.inc()
    log_receivable_generated(request_id, saved.id, contract_id, saved.due_date.isoformat())
    return receivable_response(saved, now)


@router.put("/receivables/{receivable_id}", response_model=ReceivableResponse)
def update_receivable(
    receivable_id: str,
    body: ReceivableUpdate,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """Edit invoice number, dates, status and observations"""
    existing = ReceivableRepository(db).get_receivable(receivable_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Receivable not found")

    edited = replace(
        existing,
        invoice_number=body.invoice_number,
        issue_date=body.issue_date,
        due_date=body.due_date,
        status=body.status,
        observations=body.observations,
    )
    saved = _save(db, receivable_id, edited, get_request_id(request))
    if saved.status != existing.status:
        receivable_status_counter.labels(status=saved.status.value).inc()
    return receivable_response(saved, now)


@router.post("/receivables/{receivable_id}/status", response_model=ReceivableResponse)
def change_receivable_status(
    receivable_id: str,
    body: ReceivableStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """Mark a receivable as received (payment confirmed) or cancelled"""
    existing = ReceivableRepository(db).get_receivable(receivable_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Receivable not found")

    saved = _save(db, receivable_id, advance_status(existing, body.status), get_request_id(request))
    receivable_status_counter.labels(status=saved.status.value).inc()
    return receivable_response(saved, now)


@router.delete("/receivables/{receivable_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receivable(
    receivable_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a receivable (administrators only)"""
    request_id = get_request_id(request)
    repo = ReceivableRepository(db)
    if repo.get_receivable(receivable_id) is None:
        raise HTTPException(status_code=404, detail="Receivable not found")

    try:
        repo.delete_receivable(receivable_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to delete receivable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
