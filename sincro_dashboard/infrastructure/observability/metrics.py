"""Prometheus metrics for contract lifecycle, billing, reports and collaborators"""

from prometheus_client import Counter, Histogram

# Contract metrics
contract_saves_counter = Counter(
    "sincro_contract_saves_total",
    "Contracts created or updated",
    ["operation", "status"],  # operation: create | update
)

warranty_synthesized_counter = Counter(
    "sincro_warranty_synthesized_total",
    "Warranties started automatically on Installation Completed",
)

# Billing metrics
receivables_generated_counter = Counter(
    "sincro_receivables_generated_total",
    "Accounts receivable records generated from completed contracts",
)

receivable_status_counter = Counter(
    "sincro_receivable_status_changes_total",
    "Receivable status transitions",
    ["status"],  # Pendente | Recebido | Cancelado
)

# Report metrics
report_render_counter = Counter(
    "sincro_report_renders_total",
    "PDF reports rendered",
    ["report", "outcome"],  # outcome: success | failure
)

# Collaborator metrics
postal_code_failures_counter = Counter(
    "postal_code_lookup_failures_total",
    "Failed postal code lookups",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_contract_save(operation: str, status: str, warranty_synthesized: bool) -> None:
    """Record contract save metrics, including automatic warranty starts"""
    contract_saves_counter.labels(operation=operation, status=status).inc()
    if warranty_synthesized:
        warranty_synthesized_counter.inc()
