"""PDF rendering of client files, sales and warranty reports with reportlab"""

import io
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sincro_dashboard.config import settings
from sincro_dashboard.domain.exceptions import ReportGenerationError
from sincro_dashboard.domain.models import ClientFile, SalesRow, WarrantyRow
from sincro_dashboard.infrastructure.observability.metrics import report_render_counter

logger = logging.getLogger(__name__)


class ReportDesign:
    PRIMARY = "#4f46e5"  # indigo
    REGIONAL = "#10b981"  # emerald
    MUTED = "#8c8c8c"
    STRIPE = "#f8fafc"
    MARGIN = 14 * mm


def format_brl(value: float) -> str:
    """Brazilian currency notation without the symbol: 1.234,56"""
    formatted = f"{value:,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def format_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def _table(rows: List[list], header_color: str, col_widths: Optional[list] = None) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HexColor(header_color)),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, HexColor(ReportDesign.STRIPE)]),
                ("GRID", (0, 0), (-1, -1), 0.25, HexColor("#e2e8f0")),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    return table


class PdfReportRenderer:
    """Builds downloadable PDF documents from report aggregations"""

    def __init__(self, company_name: str | None = None):
        self.company_name = company_name or settings.company_name
        self.styles = getSampleStyleSheet()

    def _render(self, report: str, title: str, subtitle: str, build_body: Callable[[], list]) -> bytes:
        """
        Render a document into memory.

        Any failure is logged and raised as ReportGenerationError; nothing
        partial is returned to the caller.
        """
        try:
            buffer = io.BytesIO()
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=ReportDesign.MARGIN,
                rightMargin=ReportDesign.MARGIN,
                topMargin=ReportDesign.MARGIN,
                bottomMargin=ReportDesign.MARGIN,
                title=title,
                author=self.company_name,
            )
            story = [
                Paragraph(escape(title), self.styles["Title"]),
                Paragraph(escape(f"{self.company_name} · {subtitle}"), self.styles["Normal"]),
                Spacer(1, 6 * mm),
            ]
            story.extend(build_body())
            doc.build(story)
            content = buffer.getvalue()
        except Exception as e:
            report_render_counter.labels(report=report, outcome="failure").inc()
            logger.error(f"Report generation failed: {e}", extra={"report": report})
            raise ReportGenerationError(f"Não foi possível gerar o relatório '{title}'") from e

        report_render_counter.labels(report=report, outcome="success").inc()
        return content

    def render_client_file(self, client_file: ClientFile, generated_at: datetime) -> bytes:
        client = client_file.client
        address = client.address

        def body():
            info = [
                ["Nome:", client.name or "-"],
                ["CNPJ:", client.cnpj or "-"],
                ["Contatos:", client.contact_person or "-"],
                ["E-mail:", client.email or "-"],
                ["Telefone:", client.phone or "-"],
                ["WhatsApp:", client.whatsapp or "-"],
                ["Endereço:", f"{address.street}, {address.number} - {address.neighborhood}"],
                ["Localidade:", f"{address.city} / {address.state} - CEP: {address.cep}"],
            ]
            info_table = Table(info, colWidths=[40 * mm, None])
            info_table.setStyle(TableStyle([("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold")]))

            rows = [["Título do Contrato", "Status", "Início", "Vencimento", "Garantia", "Valor (R$)"]]
            for c in client_file.contracts:
                rows.append(
                    [
                        Paragraph(escape(c.title), self.styles["BodyText"]),
                        c.status,
                        format_date(c.start_date),
                        format_date(c.end_date),
                        format_date(c.warranty_expiry),
                        format_brl(c.value),
                    ]
                )
            contracts_table = _table(rows, ReportDesign.PRIMARY, [60 * mm, 30 * mm, 22 * mm, 22 * mm, 22 * mm, None])

            return [
                Paragraph("Dados da Instituição/Órgão", self.styles["Heading2"]),
                info_table,
                Spacer(1, 6 * mm),
                Paragraph("Histórico de Contratos", self.styles["Heading2"]),
                contracts_table,
                Spacer(1, 6 * mm),
                Paragraph(f"Total de Contratos Localizados: {client_file.contract_count}", self.styles["Heading4"]),
                Paragraph(
                    f"Investimento Global Acumulado: R$ {format_brl(client_file.total_value)}",
                    self.styles["Heading4"],
                ),
            ]

        return self._render(
            "client_file",
            "Ficha Cadastral do Cliente",
            f"Gerado em: {generated_at.strftime('%d/%m/%Y %H:%M')}",
            body,
        )

    def render_sales_by_year(self, rows: Sequence[SalesRow]) -> bytes:
        def body():
            data = [["Exercício (Ano)", "Plataformas", "Elevadores", "Volume Financeiro"]]
            data.extend([r.label, r.platforms, r.elevators, f"R$ {format_brl(r.value)}"] for r in rows)
            return [_table(data, ReportDesign.PRIMARY)]

        return self._render("sales_by_year", "Relatório Consolidado: Vendas por Ano", "Vendas por exercício", body)

    def render_sales_by_state(self, rows: Sequence[SalesRow]) -> bytes:
        def body():
            data = [["Unidade Federativa (UF)", "Plataformas", "Elevadores", "Total de Unidades"]]
            data.extend([r.label, r.platforms, r.elevators, r.total_units] for r in rows)
            return [_table(data, ReportDesign.REGIONAL)]

        return self._render(
            "sales_by_state", "Distribuição Regional de Vendas (Estados)", "Vendas por estado", body
        )

    def render_warranties(self, rows: Sequence[WarrantyRow], now: datetime) -> bytes:
        def body():
            if not rows:
                return [Paragraph("Nenhum equipamento possui garantia ativa no momento.", self.styles["Normal"])]
            data = [["Cliente/Instituição", "Contrato", "Instalação", "Vencimento", "Saldo"]]
            for r in rows:
                data.append(
                    [
                        Paragraph(escape(r.client_name), self.styles["BodyText"]),
                        Paragraph(escape(r.contract_title), self.styles["BodyText"]),
                        format_date(r.completion_date),
                        format_date(r.expiry_date),
                        f"{r.remaining_days} dias",
                    ]
                )
            return [_table(data, ReportDesign.PRIMARY, [50 * mm, 55 * mm, 25 * mm, 25 * mm, None])]

        return self._render(
            "warranties",
            "Relatório de Garantias Ativas",
            f"Posição em: {now.strftime('%d/%m/%Y')}",
            body,
        )
