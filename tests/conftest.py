"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timezone
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sincro_dashboard.api.main import create_app
from sincro_dashboard.api.dependencies import get_now
from sincro_dashboard.infrastructure.database.models import Base
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ClientRepository, UserRepository
from sincro_dashboard.domain.models import Address, Client, Contract, ContractStatus, User, UserRole


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Reference instant shared by API and domain tests
FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a frozen clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    return TestClient(app)


@pytest.fixture
def admin_user(db: Session) -> User:
    user = UserRepository(db).create_user("Administrador", "admin@example.com", UserRole.ADMIN)
    db.commit()
    return user


@pytest.fixture
def regular_user(db: Session) -> User:
    user = UserRepository(db).create_user("Operador", "operador@example.com", UserRole.USER)
    db.commit()
    return user


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return {"X-User-Id": admin_user.id}


@pytest.fixture
def user_headers(regular_user: User) -> Dict[str, str]:
    return {"X-User-Id": regular_user.id}


@pytest.fixture
def saved_client(db: Session) -> Client:
    """Persisted client located in São Paulo"""
    client = ClientRepository(db).create_client(
        Client(
            id="",
            name="Prefeitura de Campinas",
            cnpj="51.885.242/0001-40",
            address=Address(
                street="Av. Anchieta",
                number="200",
                neighborhood="Centro",
                cep="13015-904",
                city="Campinas",
                state="SP",
            ),
            phone="(19) 2116-0555",
            email="compras@campinas.sp.gov.br",
            contact_person="Maria Souza",
        )
    )
    db.commit()
    return client


@pytest.fixture
def make_contract() -> Callable[..., Contract]:
    """Factory for domain contracts with sensible defaults"""
    counter = {"n": 0}

    def _make(**overrides) -> Contract:
        counter["n"] += 1
        fields = dict(
            id=f"contract-{counter['n']}",
            client_id="client-1",
            title=f"Contrato {counter['n']}",
            platform_contracted=2,
            platform_installed=1,
            elevator_contracted=1,
            elevator_installed=0,
            value=100_000.0,
            start_date=date(2024, 2, 1),
            status=ContractStatus.ACTIVE,
        )
        fields.update(overrides)
        return Contract(**fields)

    return _make
