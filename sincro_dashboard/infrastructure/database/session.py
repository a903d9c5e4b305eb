"""Database session management with connection pooling"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sincro_dashboard.config import settings
from sincro_dashboard.domain.models import UserRole
from sincro_dashboard.infrastructure.database.models import Base
from sincro_dashboard.infrastructure.database.repositories import UserRepository


def _engine_options(url: str) -> dict:
    # SQLite uses a single-file pool; server databases get a bounded pool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create missing tables and make sure at least one administrator exists"""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        repo = UserRepository(db)
        if not repo.list_users():
            admin = repo.create_user(settings.default_admin_name, settings.default_admin_email, UserRole.ADMIN)
            db.commit()
            logging.warning("Default administrator created", extra={"user_id": admin.id, "email": admin.email})
    finally:
        db.close()
