"""Data access layer translating ORM records to domain entities"""

from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from sincro_dashboard.infrastructure.database.models import (
    ClientRecord,
    ContractRecord,
    ReceivableRecord,
    UserRecord,
)
from sincro_dashboard.domain.models import (
    AccountsReceivable,
    Address,
    Client,
    Contract,
    ContractStatus,
    ReceivableStatus,
    User,
    UserRole,
    Warranty,
)
from sincro_dashboard.utils.date_utils import parse_date

ADDRESS_FIELDS = ("street", "number", "neighborhood", "cep", "city", "state")


def _to_date(value) -> Optional[date]:
    parsed = parse_date(value)
    return parsed.date() if parsed else None


def client_to_domain(record: ClientRecord) -> Client:
    return Client(
        id=record.id,
        name=record.name,
        cnpj=record.cnpj,
        address=Address(**{name: getattr(record, name) or "" for name in ADDRESS_FIELDS}),
        phone=record.phone or "",
        whatsapp=record.whatsapp or "",
        email=record.email or "",
        contact_person=record.contact_person or "",
        created_at=record.created_at,
    )


def contract_to_domain(record: ContractRecord) -> Contract:
    warranty = None
    if record.warranty_completion_date is not None:
        warranty = Warranty(
            completion_date=record.warranty_completion_date,
            warranty_days=record.warranty_days or 0,
        )
    return Contract(
        id=record.id,
        client_id=record.client_id,
        title=record.title,
        platform_contracted=record.platform_contracted,
        platform_installed=record.platform_installed,
        elevator_contracted=record.elevator_contracted,
        elevator_installed=record.elevator_installed,
        value=record.value,
        start_date=record.start_date,
        end_date=record.end_date,
        installation_address=record.installation_address,
        estimated_installation_date=record.estimated_installation_date,
        status=ContractStatus(record.status),
        warranty=warranty,
        observations=record.observations,
        updated_by=record.updated_by,
        created_at=record.created_at,
    )


def receivable_to_domain(record: ReceivableRecord) -> AccountsReceivable:
    contract = record.contract
    return AccountsReceivable(
        id=record.id,
        contract_id=record.contract_id,
        invoice_number=record.invoice_number,
        issue_date=record.issue_date,
        due_date=record.due_date,
        status=ReceivableStatus(record.status),
        observations=record.observations,
        created_at=record.created_at,
        updated_at=record.updated_at,
        client_name=contract.client.name if contract and contract.client else None,
        contract_title=contract.title if contract else None,
    )


def user_to_domain(record: UserRecord) -> User:
    return User(id=record.id, name=record.name, email=record.email, role=UserRole(record.role))


class ClientRepository:
    """Repository for clients"""

    def __init__(self, db: Session):
        self.db = db

    def list_clients(self) -> List[Client]:
        records = self.db.query(ClientRecord).order_by(ClientRecord.name).all()
        return [client_to_domain(r) for r in records]

    def get_client(self, client_id: str) -> Optional[Client]:
        record = self.db.get(ClientRecord, client_id)
        return client_to_domain(record) if record else None

    def create_client(self, client: Client) -> Client:
        record = ClientRecord()
        self._apply(record, client)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        self.db.refresh(record)
        return client_to_domain(record)

    def update_client(self, client_id: str, client: Client) -> Optional[Client]:
        record = self.db.get(ClientRecord, client_id)
        if record is None:
            return None
        self._apply(record, client)
        self.db.flush()
        return client_to_domain(record)

    def delete_client(self, client_id: str) -> bool:
        record = self.db.get(ClientRecord, client_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True

    @staticmethod
    def _apply(record: ClientRecord, client: Client) -> None:
        record.name = client.name
        record.cnpj = client.cnpj
        for name in ADDRESS_FIELDS:
            setattr(record, name, getattr(client.address, name) or "")
        record.phone = client.phone
        record.whatsapp = client.whatsapp
        record.email = client.email
        record.contact_person = client.contact_person


class ContractRepository:
    """Repository for contracts"""

    def __init__(self, db: Session):
        self.db = db

    def list_contracts(self, client_id: Optional[str] = None) -> List[Contract]:
        query = self.db.query(ContractRecord)
        if client_id:
            query = query.filter(ContractRecord.client_id == client_id)
        records = query.order_by(ContractRecord.created_at.desc()).all()
        return [contract_to_domain(r) for r in records]

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        record = self.db.get(ContractRecord, contract_id)
        return contract_to_domain(record) if record else None

    def create_contract(self, contract: Contract) -> Contract:
        record = ContractRecord()
        self._apply(record, contract)
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        return contract_to_domain(record)

    def update_contract(self, contract_id: str, contract: Contract) -> Optional[Contract]:
        record = self.db.get(ContractRecord, contract_id)
        if record is None:
            return None
        self._apply(record, contract)
        self.db.flush()
        return contract_to_domain(record)

    def delete_contract(self, contract_id: str) -> bool:
        record = self.db.get(ContractRecord, contract_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True

    @staticmethod
    def _apply(record: ContractRecord, contract: Contract) -> None:
        record.client_id = contract.client_id
        record.title = contract.title
        record.platform_contracted = contract.platform_contracted
        record.platform_installed = contract.platform_installed
        record.elevator_contracted = contract.elevator_contracted
        record.elevator_installed = contract.elevator_installed
        record.value = contract.value
        record.start_date = _to_date(contract.start_date)
        record.end_date = _to_date(contract.end_date)
        record.installation_address = contract.installation_address
        record.estimated_installation_date = _to_date(contract.estimated_installation_date)
        record.status = ContractStatus(contract.status).value
        if contract.warranty is not None:
            record.warranty_completion_date = _to_date(contract.warranty.completion_date)
            record.warranty_days = contract.warranty.warranty_days
        else:
            record.warranty_completion_date = None
            record.warranty_days = None
        record.observations = contract.observations
        record.updated_by = contract.updated_by


class ReceivableRepository:
    """Repository for accounts receivable (joined with contract and client for display)"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(ReceivableRecord).options(
            joinedload(ReceivableRecord.contract).joinedload(ContractRecord.client)
        )

    def list_receivables(self) -> List[AccountsReceivable]:
        records = self._query().order_by(ReceivableRecord.created_at.desc()).all()
        return [receivable_to_domain(r) for r in records]

    def get_receivable(self, receivable_id: str) -> Optional[AccountsReceivable]:
        record = self._query().filter(ReceivableRecord.id == receivable_id).first()
        return receivable_to_domain(record) if record else None

    def create_receivable(self, receivable: AccountsReceivable) -> AccountsReceivable:
        record = ReceivableRecord(contract_id=receivable.contract_id)
        self._apply(record, receivable)
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        return receivable_to_domain(record)

    def update_receivable(self, receivable_id: str, receivable: AccountsReceivable) -> Optional[AccountsReceivable]:
        record = self.db.get(ReceivableRecord, receivable_id)
        if record is None:
            return None
        self._apply(record, receivable)
        self.db.flush()
        self.db.refresh(record)
        return receivable_to_domain(record)

    def delete_receivable(self, receivable_id: str) -> bool:
        record = self.db.get(ReceivableRecord, receivable_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True

    @staticmethod
    def _apply(record: ReceivableRecord, receivable: AccountsReceivable) -> None:
        record.invoice_number = receivable.invoice_number
        record.issue_date = _to_date(receivable.issue_date)
        record.due_date = _to_date(receivable.due_date)
        record.status = ReceivableStatus(receivable.status).value
        record.observations = receivable.observations or ""


class UserRepository:
    """Repository for user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        records = self.db.query(UserRecord).order_by(UserRecord.name).all()
        return [user_to_domain(r) for r in records]

    def get_user(self, user_id: str) -> Optional[User]:
        record = self.db.get(UserRecord, user_id)
        return user_to_domain(record) if record else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        record = self.db.query(UserRecord).filter(UserRecord.email == email).first()
        return user_to_domain(record) if record else None

    def create_user(self, name: str, email: str, role: UserRole = UserRole.USER) -> User:
        record = UserRecord(name=name, email=email, role=UserRole(role).value)
        self.db.add(record)
        self.db.flush()
        return user_to_domain(record)

    def delete_user(self, user_id: str) -> bool:
        record = self.db.get(UserRecord, user_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True
