"""CRUD endpoints for clients (/v1/clients)"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.schemas import ClientRequest, ClientResponse
from sincro_dashboard.api.dependencies import get_current_user, get_request_id, require_admin
from sincro_dashboard.domain.models import Address, Client, User
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ClientRepository

router = APIRouter()


def _to_domain(body: ClientRequest, client_id: str = "") -> Client:
    return Client(
        id=client_id,
        name=body.name,
        cnpj=body.cnpj,
        address=Address(**body.address.model_dump()),
        phone=body.phone,
        whatsapp=body.whatsapp,
        email=body.email,
        contact_person=body.contact_person,
    )


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """List all clients ordered by name"""
    return ClientRepository(db).list_clients()


@router.post("/clients", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Register a new client (name and CNPJ required)"""
    request_id = get_request_id(request)
    try:
        client = ClientRepository(db).create_client(_to_domain(body))
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to create client: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Client created", extra={"request_id": request_id, "client_id": client.id, "user_id": user.id})
    return client


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    client = ClientRepository(db).get_client(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.put("/clients/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: str,
    body: ClientRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Edit client data; the id never changes"""
    request_id = get_request_id(request)
    repo = ClientRepository(db)
    if repo.get_client(client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        client = repo.update_client(client_id, _to_domain(body, client_id))
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to update client: {e}", extra={"request_id": request_id, "client_id": client_id})
        raise HTTPException(status_code=500, detail="Internal server error")
    return client


@router.delete("/clients/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a client and its contracts (administrators only)"""
    request_id = get_request_id(request)
    repo = ClientRepository(db)
    if repo.get_client(client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")

    try:
        repo.delete_client(client_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to delete client: {e}", extra={"request_id": request_id, "client_id": client_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("Client deleted", extra={"request_id": request_id, "client_id": client_id, "user_id": admin.id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
