"""Dashboard metrics engine - aggregate statistics and insights over contracts"""

from datetime import datetime
from typing import List, Sequence

from sincro_dashboard.domain.classifiers import DEADLINE_WINDOW_DAYS, is_urgent
from sincro_dashboard.domain.models import (
    Client,
    Contract,
    ContractStatus,
    DashboardStats,
    Insight,
)
from sincro_dashboard.utils.date_utils import as_utc, parse_date

# Installation rate below this percentage flags delivery as behind schedule
DELIVERY_TARGET_RATE = 50.0


def _sum_field(contracts: Sequence[Contract], attr: str):
    return sum(getattr(c, attr) or 0 for c in contracts)


def _started_in_year(contract: Contract, year: int) -> bool:
    start = parse_date(contract.start_date)
    return start is not None and start.year == year


def calculate_installation_rate(total_installed: int, total_contracted: int) -> float:
    """Installed units as a percentage of contracted units (0 when nothing contracted)"""
    if total_contracted <= 0:
        return 0.0
    return (total_installed / total_contracted) * 100


def calculate_growth_rate(total_value: float, annual_value: float) -> float:
    """Portfolio value beyond the current year, relative to the current year's value"""
    if total_value > annual_value and annual_value > 0:
        return ((total_value - annual_value) / annual_value) * 100
    return 0.0


def build_insights(
    installation_rate: float,
    critical_contracts: int,
    growth_rate: float,
    window_days: int = DEADLINE_WINDOW_DAYS,
) -> List[Insight]:
    """Derive the three qualitative dashboard insights from the aggregates"""
    behind_target = installation_rate < DELIVERY_TARGET_RATE
    delivery = Insight(
        title="Eficiência de Entrega",
        value=f"{installation_rate:.1f}%",
        description=(
            "Ritmo de instalação abaixo da meta. Considere reforçar a equipe técnica."
            if behind_target
            else "Excelente ritmo de conclusão. Pipeline saudável."
        ),
        status="warning" if behind_target else "success",
    )

    if critical_contracts > 0:
        risk = Insight(
            title="Risco Operacional",
            value="Atenção",
            description=f"{critical_contracts} contratos com prazos críticos. Risco de multa contratual.",
            status="danger",
        )
    else:
        risk = Insight(
            title="Risco Operacional",
            value="Baixo",
            description=f"Sem gargalos de prazo detectados para os próximos {window_days} dias.",
            status="success",
        )

    expansion = Insight(
        title="Potencial de Expansão",
        value=f"{growth_rate:.1f}%",
        description="Crescimento do portfólio em relação ao faturamento base anual.",
        status="info",
    )

    return [delivery, risk, expansion]


def compute_dashboard_stats(
    clients: Sequence[Client],
    contracts: Sequence[Contract],
    now: datetime,
    window_days: int = DEADLINE_WINDOW_DAYS,
) -> DashboardStats:
    """
    Compute every dashboard aggregate from the full client/contract collections.

    Requirements:
    - Pure and total: recomputed from scratch on each call, never raises
    - Missing quantities/values count as 0
    - Malformed dates drop the contract from date-dependent aggregates only
    - Rates guard zero denominators and yield 0

    ``clients`` is accepted so callers pass the same collections the dashboard
    renders; no aggregate currently depends on it.
    """
    current_year = as_utc(now).year

    # Status counts
    active_count = sum(1 for c in contracts if c.status == ContractStatus.ACTIVE)
    pending_count = sum(1 for c in contracts if c.status == ContractStatus.PENDING)

    # Financials
    total_value = float(_sum_field(contracts, "value"))
    annual_value = float(
        sum(c.value or 0 for c in contracts if _started_in_year(c, current_year))
    )

    # Equipment
    elevators_installed = _sum_field(contracts, "elevator_installed")
    elevators_contracted = _sum_field(contracts, "elevator_contracted")
    platforms_installed = _sum_field(contracts, "platform_installed")
    platforms_contracted = _sum_field(contracts, "platform_contracted")
    total_installed = platforms_installed + elevators_installed
    total_contracted = platforms_contracted + elevators_contracted

    # Strategic insights
    installation_rate = calculate_installation_rate(total_installed, total_contracted)
    approaching = [c for c in contracts if is_urgent(c, now, window_days)]
    growth_rate = calculate_growth_rate(total_value, annual_value)

    return DashboardStats(
        active_contracts_count=active_count,
        pending_contracts_count=pending_count,
        total_value=total_value,
        annual_value=annual_value,
        elevators_installed=elevators_installed,
        elevators_contracted=elevators_contracted,
        platforms_installed=platforms_installed,
        platforms_contracted=platforms_contracted,
        total_installed=total_installed,
        total_contracted=total_contracted,
        installation_rate=installation_rate,
        approaching_deadlines=approaching,
        critical_contracts=len(approaching),
        growth_rate=growth_rate,
        insights=build_insights(installation_rate, len(approaching), growth_rate, window_days),
        current_year=current_year,
    )
