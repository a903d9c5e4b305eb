"""SQLAlchemy ORM models for clients, contracts, receivables and users"""

import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Date, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class ClientRecord(Base):
    """Government institution or company"""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False, index=True)
    cnpj = Column(String(20), nullable=False, index=True)
    street = Column(Text, nullable=False, default="")
    number = Column(String(20), nullable=False, default="")
    neighborhood = Column(Text, nullable=False, default="")
    cep = Column(String(9), nullable=False, default="")
    city = Column(Text, nullable=False, default="")
    state = Column(String(2), nullable=False, default="")
    phone = Column(String(20), nullable=False, default="")
    whatsapp = Column(String(20), nullable=False, default="")
    email = Column(Text, nullable=False, default="")
    contact_person = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    contracts = relationship("ContractRecord", back_populates="client", cascade="all, delete-orphan")


class ContractRecord(Base):
    """Installation contract with its warranty columns"""

    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False, default="")
    platform_contracted = Column(Integer, nullable=False, default=0)
    platform_installed = Column(Integer, nullable=False, default=0)
    elevator_contracted = Column(Integer, nullable=False, default=0)
    elevator_installed = Column(Integer, nullable=False, default=0)
    value = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    installation_address = Column(Text, nullable=False, default="")
    estimated_installation_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="Pendente")
    warranty_completion_date = Column(Date, nullable=True)
    warranty_days = Column(Integer, nullable=True)
    observations = Column(Text, nullable=False, default="")
    updated_by = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    client = relationship("ClientRecord", back_populates="contracts")
    receivable = relationship(
        "ReceivableRecord", back_populates="contract", uselist=False, cascade="all, delete-orphan"
    )


class ReceivableRecord(Base):
    """Accounts receivable, one per contract"""

    __tablename__ = "accounts_receivable"

    id = Column(String(36), primary_key=True, default=_new_id)
    contract_id = Column(
        String(36), ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    invoice_number = Column(Text, nullable=True)
    issue_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="Pendente")
    observations = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    contract = relationship("ContractRecord", back_populates="receivable")


class UserRecord(Base):
    """System operator profile"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    role = Column(String(10), nullable=False, default="user")
