"""Report endpoints (/v1/reports) - JSON aggregations and PDF downloads"""

import logging
import re
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from sincro_dashboard.api.v1.schemas import SalesRowSchema, WarrantyRowSchema
from sincro_dashboard.api.dependencies import get_current_user, get_now, get_report_renderer, get_request_id
from sincro_dashboard.domain.exceptions import ReportGenerationError
from sincro_dashboard.domain.models import SalesRow, User
from sincro_dashboard.domain.reports import active_warranties, client_file, sales_by_state, sales_by_year
from sincro_dashboard.infrastructure.database.session import get_db
from sincro_dashboard.infrastructure.database.repositories import ClientRepository, ContractRepository
from sincro_dashboard.infrastructure.reports.pdf import PdfReportRenderer

router = APIRouter()


def _sales_schema(rows: List[SalesRow]) -> List[SalesRowSchema]:
    return [
        SalesRowSchema(
            label=r.label,
            platforms=r.platforms,
            elevators=r.elevators,
            value=r.value,
            total_units=r.total_units,
        )
        for r in rows
    ]


def _pdf(render, filename: str, request_id: str) -> Response:
    """Run a renderer call and wrap the document as an attachment"""
    try:
        content = render()
    except ReportGenerationError as e:
        logging.error(f"Report failed: {e}", extra={"request_id": request_id, "report_file": filename})
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/reports/sales-by-year", response_model=List[SalesRowSchema])
def get_sales_by_year(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Contracted platforms, elevators and value per start year"""
    return _sales_schema(sales_by_year(ContractRepository(db).list_contracts()))


@router.get("/reports/sales-by-state", response_model=List[SalesRowSchema])
def get_sales_by_state(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Contracted platforms and elevators per client state"""
    contracts = ContractRepository(db).list_contracts()
    clients = ClientRepository(db).list_clients()
    return _sales_schema(sales_by_state(contracts, clients))


@router.get("/reports/warranties", response_model=List[WarrantyRowSchema])
def get_active_warranties(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    user: User = Depends(get_current_user),
):
    """Equipment under warranty, soonest to expire first"""
    contracts = ContractRepository(db).list_contracts()
    clients = ClientRepository(db).list_clients()
    return active_warranties(contracts, clients, now)


@router.get("/reports/sales-by-year/pdf")
def get_sales_by_year_pdf(
    request: Request,
    db: Session = Depends(get_db),
    renderer: PdfReportRenderer = Depends(get_report_renderer),
    user: User = Depends(get_current_user),
):
    rows = sales_by_year(ContractRepository(db).list_contracts())
    return _pdf(lambda: renderer.render_sales_by_year(rows), "Relatorio_Vendas_Anual.pdf", get_request_id(request))


@router.get("/reports/sales-by-state/pdf")
def get_sales_by_state_pdf(
    request: Request,
    db: Session = Depends(get_db),
    renderer: PdfReportRenderer = Depends(get_report_renderer),
    user: User = Depends(get_current_user),
):
    rows = sales_by_state(ContractRepository(db).list_contracts(), ClientRepository(db).list_clients())
    return _pdf(lambda: renderer.render_sales_by_state(rows), "Relatorio_Vendas_Estados.pdf", get_request_id(request))


@router.get("/reports/warranties/pdf")
def get_active_warranties_pdf(
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    renderer: PdfReportRenderer = Depends(get_report_renderer),
    user: User = Depends(get_current_user),
):
    rows = active_warranties(ContractRepository(db).list_contracts(), ClientRepository(db).list_clients(), now)
    filename = f"Garantias_Ativas_{now.date().isoformat()}.pdf"
    return _pdf(lambda: renderer.render_warranties(rows, now), filename, get_request_id(request))


@router.get("/reports/clients/{client_id}/pdf")
def get_client_file_pdf(
    client_id: str,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    renderer: PdfReportRenderer = Depends(get_report_renderer),
    user: User = Depends(get_current_user),
):
    """Client registration file with its contract history"""
    client = ClientRepository(db).get_client(client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")

    summary = client_file(client, ContractRepository(db).list_contracts(client_id))
    filename = "Ficha_" + re.sub(r"\s+", "_", client.name or "Cliente") + ".pdf"
    return _pdf(lambda: renderer.render_client_file(summary, now), filename, get_request_id(request))
