"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Optional

from sincro_dashboard.domain.models import ContractStatus, ReceivableStatus, UserRole

# Warranty coverage accepted on input, in days
MAX_WARRANTY_DAYS = 36_500


class AddressSchema(BaseModel):
    """Structured postal address"""

    model_config = ConfigDict(from_attributes=True)

    street: str = ""
    number: str = ""
    neighborhood: str = ""
    cep: str = ""
    city: str = ""
    state: str = ""


class ClientRequest(BaseModel):
    """Request body for POST/PUT /v1/clients"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="Institution or company name")
    cnpj: str = Field(..., min_length=1, description="Tax id (CNPJ)")
    address: AddressSchema = Field(default_factory=AddressSchema)
    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    contact_person: str = ""


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    cnpj: str
    address: AddressSchema
    phone: str
    whatsapp: str
    email: str
    contact_person: str
    created_at: Optional[datetime] = None


class WarrantySchema(BaseModel):
    """Warranty sub-record (completion date + coverage days)"""

    model_config = ConfigDict(from_attributes=True)

    completion_date: date
    warranty_days: int


class WarrantyRequest(WarrantySchema):
    """Submitted warranty; coverage is capped at 100 years"""

    warranty_days: int = Field(..., le=MAX_WARRANTY_DAYS)


class ContractRequest(BaseModel):
    """
    Request body for POST/PUT /v1/contracts.

    Negative quantities and values are accepted here and clamped to zero by the
    lifecycle rule; a missing client is rejected by the same rule. NaN and
    Infinity literals are rejected.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    client_id: Optional[str] = None
    title: str = ""
    platform_contracted: int = 0
    platform_installed: int = 0
    elevator_contracted: int = 0
    elevator_installed: int = 0
    value: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    installation_address: str = ""
    estimated_installation_date: Optional[date] = None
    status: ContractStatus = ContractStatus.PENDING
    warranty: Optional[WarrantyRequest] = None
    observations: str = ""


class ContractResponse(BaseModel):
    """Contract with deadline and warranty classification"""

    id: str
    client_id: str
    title: str
    platform_contracted: int
    platform_installed: int
    elevator_contracted: int
    elevator_installed: int
    value: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    installation_address: str
    estimated_installation_date: Optional[date] = None
    status: ContractStatus
    warranty: Optional[WarrantySchema] = None
    observations: str
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    urgent: bool
    days_until_deadline: Optional[int] = None
    warranty_expires_on: Optional[date] = None
    warranty_active: bool
    warranty_remaining_days: Optional[int] = None


class InsightSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    value: str
    description: str
    status: str


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

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
    approaching_deadlines: List[ContractResponse]
    critical_contracts: int
    growth_rate: float
    insights: List[InsightSchema]
    current_year: int
    clients_count: int


class ReceivableResponse(BaseModel):
    """Accounts receivable joined with contract and client display fields"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    contract_id: str
    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: ReceivableStatus
    observations: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    client_name: Optional[str] = None
    contract_title: Optional[str] = None
    overdue: bool = False


class ReceivableUpdate(BaseModel):
    """Request body for PUT /v1/receivables/{id}"""

    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: ReceivableStatus = ReceivableStatus.PENDING
    observations: str = ""


class ReceivableStatusUpdate(BaseModel):
    """Request body for POST /v1/receivables/{id}/status"""

    status: ReceivableStatus


class UserCreate(BaseModel):
    """Request body for POST /v1/users"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: UserRole = UserRole.USER


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole


class SalesRowSchema(BaseModel):
    label: str
    platforms: int
    elevators: int
    value: float
    total_units: int


class WarrantyRowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contract_id: Optional[str] = None
    client_name: str
    contract_title: str
    completion_date: date
    expiry_date: date
    remaining_days: int
    platforms_installed: int
    elevators_installed: int
