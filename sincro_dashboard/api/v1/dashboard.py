"""GET /v1/dashboard - Aggregate metrics and insights"""

from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.contracts import contract_response
from sincro_dashboard.api.v1.schemas import DashboardResponse, InsightSchema
from sincro_dashboard.api.dependencies import get_current_user, get_now
from sincro_dashboard.config import settings
from sincro_dashboard.domain.metrics import compute_dashboard_stats
from sincro_dashboard.domain.models import User
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ClientRepository, ContractRepository

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """
    Recompute dashboard statistics from the full client/contract collections.

    Returns:
        Counts, financial totals, installation progress, contracts with
        deadlines inside the alert window and the three insights
    """
    clients = ClientRepository(db).list_clients()
    contracts = ContractRepository(db).list_contracts()
    stats = compute_dashboard_stats(clients, contracts, now, settings.deadline_window_days)

    return DashboardResponse(
        active_contracts_count=stats.active_contracts_count,
        pending_contracts_count=stats.pending_contracts_count,
        total_value=stats.total_value,
        annual_value=stats.annual_value,
        elevators_installed=stats.elevators_installed,
        elevators_contracted=stats.elevators_contracted,
        platforms_installed=stats.platforms_installed,
        platforms_contracted=stats.platforms_contracted,
        total_installed=stats.total_installed,
        total_contracted=stats.total_contracted,
        installation_rate=stats.installation_rate,
        approaching_deadlines=[contract_response(c, now) for c in stats.approaching_deadlines],
        critical_contracts=stats.critical_contracts,
        growth_rate=stats.growth_rate,
        insights=[InsightSchema.model_validate(i) for i in stats.insights],
        current_year=stats.current_year,
        clients_count=len(clients),
    )
