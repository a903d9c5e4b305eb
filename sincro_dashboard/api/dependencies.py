"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from sincro_dashboard.domain.models import User
from sincro_dashboard.infrastructure.clients.postal_code import PostalCodeClient
from sincro_dashboard.infrastructure.database.repositories import UserRepository
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.reports.pdf import PdfReportRenderer
from sincro_dashboard.utils.date_utils import utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_now() -> datetime:
    """Reference instant for deadline, warranty and billing rules"""
    return utc_now()


def get_postal_code_client() -> PostalCodeClient:
    """Provide postal code lookup client instance"""
    return PostalCodeClient()


def get_report_renderer() -> PdfReportRenderer:
    """Provide PDF report renderer instance"""
    return PdfReportRenderer()


def get_current_user(
    x_user_id: Optional[str] = Header(None, description="Acting user id"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the acting user from the session header"""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")

    user = UserRepository(db).get_user(x_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Restrict delete and management operations to administrators"""
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return user
