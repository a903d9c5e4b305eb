"""User profile endpoints (/v1/users, /v1/me)"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.schemas import UserCreate, UserResponse
from sincro_dashboard.api.dependencies import get_current_user, get_request_id, require_admin
from sincro_dashboard.domain.models import User
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import UserRepository

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    """Profile of the acting user"""
    return user


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return UserRepository(db).list_users()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Provision a user profile (administrators only)"""
    repo = UserRepository(db)
    if repo.get_user_by_email(body.email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    request_id = get_request_id(request)
    try:
        user = repo.create_user(body.name, body.email, body.role)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to create user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info("User created", extra={"request_id": request_id, "user_id": user.id, "role": user.role.value})
    return user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove a user profile (administrators only, never the acting admin)"""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Administrators cannot delete their own profile")

    repo = UserRepository(db)
    if repo.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        repo.delete_user(user_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to delete user: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
