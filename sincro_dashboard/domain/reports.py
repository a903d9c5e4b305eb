"""Report aggregations behind the sales, regional and warranty reports"""

from datetime import datetime
from typing import Dict, List, Sequence

from sincro_dashboard.domain.classifiers import is_warranty_active, warranty_expiry, warranty_remaining_days
from sincro_dashboard.domain.models import (
    Client,
    ClientContractRow,
    ClientFile,
    Contract,
    SalesRow,
    WarrantyRow,
)
from sincro_dashboard.utils.date_utils import parse_date

UNDEFINED_YEAR = "Indefinido"
UNKNOWN_STATE = "Não Informado"
UNKNOWN_CLIENT = "Cliente N/D"
UNTITLED_CONTRACT = "Contrato s/ Título"


def _index_clients(clients: Sequence[Client]) -> Dict[str, Client]:
    return {c.id: c for c in clients}


def _calendar_date(value):
    parsed = parse_date(value)
    return parsed.date() if parsed else None


def sales_by_year(contracts: Sequence[Contract]) -> List[SalesRow]:
    """Contracted equipment and value grouped by start year, most recent first"""
    stats: Dict[str, SalesRow] = {}
    for c in contracts:
        start = parse_date(c.start_date)
        label = str(start.year) if start else UNDEFINED_YEAR
        row = stats.setdefault(label, SalesRow(label=label, platforms=0, elevators=0, value=0.0))
        row.platforms += c.platform_contracted or 0
        row.elevators += c.elevator_contracted or 0
        row.value += c.value or 0

    return [stats[label] for label in sorted(stats, reverse=True)]


def sales_by_state(contracts: Sequence[Contract], clients: Sequence[Client]) -> List[SalesRow]:
    """Contracted equipment and value grouped by the client's state (UF)"""
    by_id = _index_clients(clients)
    stats: Dict[str, SalesRow] = {}
    for c in contracts:
        client = by_id.get(c.client_id)
        state = (client.address.state if client and client.address else "") or UNKNOWN_STATE
        row = stats.setdefault(state, SalesRow(label=state, platforms=0, elevators=0, value=0.0))
        row.platforms += c.platform_contracted or 0
        row.elevators += c.elevator_contracted or 0
        row.value += c.value or 0

    return [stats[state] for state in sorted(stats)]


def active_warranties(
    contracts: Sequence[Contract],
    clients: Sequence[Client],
    now: datetime,
) -> List[WarrantyRow]:
    """
    Contracts still under warranty, soonest to expire first.

    Warranties with an unparseable completion date are left out.
    """
    by_id = _index_clients(clients)
    rows = []
    for c in contracts:
        if not is_warranty_active(c, now):
            continue
        client = by_id.get(c.client_id)
        rows.append(
            WarrantyRow(
                contract_id=c.id,
                client_name=client.name if client else UNKNOWN_CLIENT,
                contract_title=c.title or UNTITLED_CONTRACT,
                completion_date=_calendar_date(c.warranty.completion_date),
                expiry_date=warranty_expiry(c).date(),
                remaining_days=warranty_remaining_days(c, now),
                platforms_installed=c.platform_installed or 0,
                elevators_installed=c.elevator_installed or 0,
            )
        )

    rows.sort(key=lambda r: r.remaining_days)
    return rows


def client_file(client: Client, contracts: Sequence[Contract]) -> ClientFile:
    """Client registration data plus the history of its contracts"""
    own = [c for c in contracts if c.client_id == client.id]

    rows = []
    for c in own:
        expiry = warranty_expiry(c)
        rows.append(
            ClientContractRow(
                contract_id=c.id,
                title=c.title or "Contrato sem título",
                status=c.status.value if c.status else "N/D",
                start_date=_calendar_date(c.start_date),
                end_date=_calendar_date(c.end_date),
                warranty_expiry=expiry.date() if expiry else None,
                value=float(c.value or 0),
            )
        )

    return ClientFile(
        client=client,
        contracts=rows,
        contract_count=len(own),
        total_value=float(sum(c.value or 0 for c in own)),
    )
