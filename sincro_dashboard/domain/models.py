"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

# Dates arrive as ``date`` objects from the database and as ISO strings from
# imports and legacy records; classifiers tolerate both (and malformed strings).
DateLike = Union[date, datetime, str]


class ContractStatus(str, Enum):
    """Contract lifecycle states (persisted labels)"""

    PENDING = "Pendente"
    ACTIVE = "Ativo"
    COMPLETED = "Instalação Concluída"
    CLOSED = "Encerrado"


class ReceivableStatus(str, Enum):
    """Billing states of an accounts receivable record"""

    PENDING = "Pendente"
    RECEIVED = "Recebido"
    CANCELLED = "Cancelado"


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass
class Address:
    """Structured postal address (Brazilian format)"""

    street: str = ""
    number: str = ""
    neighborhood: str = ""
    cep: str = ""
    city: str = ""
    state: str = ""


@dataclass
class Client:
    """Government institution or company buying equipment"""

    id: str
    name: str
    cnpj: str
    address: Address = field(default_factory=Address)
    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    contact_person: str = ""
    created_at: Optional[datetime] = None


@dataclass
class Warranty:
    """Post-installation coverage window"""

    completion_date: DateLike
    warranty_days: int


@dataclass
class Contract:
    """Agreement to supply and install platforms/elevators for a client"""

    id: Optional[str]
    client_id: Optional[str]
    title: str = ""
    platform_contracted: Optional[int] = 0
    platform_installed: Optional[int] = 0
    elevator_contracted: Optional[int] = 0
    elevator_installed: Optional[int] = 0
    value: Optional[float] = 0.0
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None
    installation_address: str = ""
    estimated_installation_date: Optional[DateLike] = None
    status: ContractStatus = ContractStatus.PENDING
    warranty: Optional[Warranty] = None
    observations: str = ""
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class AccountsReceivable:
    """Billing record derived from a completed contract"""

    id: Optional[str]
    contract_id: str
    invoice_number: Optional[str] = None
    issue_date: Optional[DateLike] = None
    due_date: Optional[DateLike] = None
    status: ReceivableStatus = ReceivableStatus.PENDING
    observations: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Presentation-only join fields, never used by domain rules
    client_name: Optional[str] = None
    contract_title: Optional[str] = None


@dataclass
class User:
    """Operator of the system"""

    id: str
    name: str
    email: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class Insight:
    """Qualitative, color-coded dashboard summary"""

    title: str
    value: str
    description: str
    status: str  # "success" | "warning" | "danger" | "info"


@dataclass
class DashboardStats:
    """Aggregate metrics computed over the client/contract collections"""

    active_contracts_count: int
    pending_contracts_count: int
    total_value: float
    annual_value: float
    elevators_installed: int
    elevators_contracted: int
    platforms_installed: int
    platforms_contracted: int
    total_installed: int
    total_contracted: int
    installation_rate: float
    approaching_deadlines: List[Contract]
    critical_contracts: int
    growth_rate: float
    insights: List[Insight]
    current_year: int


@dataclass
class SalesRow:
    """Equipment and value totals for one report group (year or state)"""

    label: str
    platforms: int
    elevators: int
    value: float = 0.0

    @property
    def total_units(self) -> int:
        return self.platforms + self.elevators


@dataclass
class WarrantyRow:
    """Contract currently under equipment warranty"""

    contract_id: Optional[str]
    client_name: str
    contract_title: str
    completion_date: date
    expiry_date: date
    remaining_days: int
    platforms_installed: int
    elevators_installed: int


@dataclass
class ClientContractRow:
    """Contract line in a client file"""

    contract_id: Optional[str]
    title: str
    status: str
    start_date: Optional[date]
    end_date: Optional[date]
    warranty_expiry: Optional[date]
    value: float


@dataclass
class ClientFile:
    """Client registration data with its contract history"""

    client: Client
    contracts: List[ClientContractRow]
    contract_count: int
    total_value: float
