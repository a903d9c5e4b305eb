"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from typing import Dict
from fastapi.testclient import TestClient
from sincro_dashboard.domain.models import Address, Client


@pytest.fixture
def contract_payload(saved_client: Client) -> Dict:
    """Contract for the saved client, in progress with a deadline in 9 days"""
    return {
        "client_id": saved_client.id,
        "title": "Elevadores UBS Centro",
        "platform_contracted": 2,
        "platform_installed": 1,
        "elevator_contracted": 1,
        "elevator_installed": 0,
        "value": 250000.0,
        "start_date": "2024-02-01",
        "end_date": "2024-12-31",
        "installation_address": "Rua das Flores, 10",
        "estimated_installation_date": "2024-06-10",
        "status": "Ativo",
    }


def _create_contract(client: TestClient, headers: Dict, payload: Dict, **overrides) -> Dict:
    response = client.post("/v1/contracts", json={**payload, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "sincro_contract_saves_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_missing_or_unknown_user_is_rejected(client: TestClient):
    assert client.get("/v1/clients").status_code == 401
    assert client.get("/v1/clients", headers={"X-User-Id": "nobody"}).status_code == 401


def test_me_returns_acting_user(client: TestClient, admin_user, admin_headers):
    response = client.get("/v1/me", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["email"] == admin_user.email


# Clients

def test_client_crud(client: TestClient, user_headers, admin_headers):
    """Create, read, edit and delete a client"""
    payload = {
        "name": "Câmara Municipal de Belo Horizonte",
        "cnpj": "17.316.563/0001-96",
        "address": {"street": "Av. dos Andradas", "number": "3100", "city": "Belo Horizonte", "state": "MG"},
        "contact_person": "João Lima",
    }

    created = client.post("/v1/clients", json=payload, headers=user_headers)
    assert created.status_code == 201
    client_id = created.json()["id"]
    assert created.json()["address"]["state"] == "MG"

    fetched = client.get(f"/v1/clients/{client_id}", headers=user_headers)
    assert fetched.json()["name"] == payload["name"]

    edited = client.put(
        f"/v1/clients/{client_id}",
        json={**payload, "phone": "(31) 3555-1100"},
        headers=user_headers,
    )
    assert edited.status_code == 200
    assert edited.json()["id"] == client_id
    assert edited.json()["phone"] == "(31) 3555-1100"

    assert client.delete(f"/v1/clients/{client_id}", headers=user_headers).status_code == 403
    assert client.delete(f"/v1/clients/{client_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/v1/clients/{client_id}", headers=user_headers).status_code == 404


def test_client_requires_name_and_cnpj(client: TestClient, user_headers):
    response = client.post("/v1/clients", json={"name": "   ", "cnpj": "1"}, headers=user_headers)
    assert response.status_code == 422


def test_clients_are_listed_by_name(client: TestClient, saved_client, user_headers):
    client.post("/v1/clients", json={"name": "Assembleia Legislativa", "cnpj": "2"}, headers=user_headers)

    names = [c["name"] for c in client.get("/v1/clients", headers=user_headers).json()]

    assert names == ["Assembleia Legislativa", "Prefeitura de Campinas"]


# Contracts

def test_completed_contract_starts_warranty_and_clamps_numbers(
    client: TestClient, user_headers, contract_payload
):
    """Created as Installation Completed on 2024-06-01 with negative inputs"""
    data = _create_contract(
        client,
        user_headers,
        contract_payload,
        status="Instalação Concluída",
        platform_contracted=-5,
        value=-100.50,
    )

    assert data["warranty"] == {"completion_date": "2024-06-01", "warranty_days": 365}
    assert data["warranty_active"] is True
    assert data["warranty_expires_on"] == "2025-06-01"
    assert data["warranty_remaining_days"] == 365
    assert data["platform_contracted"] == 0
    assert data["value"] == 0
    assert data["urgent"] is False


def test_submitted_warranty_is_kept(client: TestClient, user_headers, contract_payload):
    data = _create_contract(
        client,
        user_headers,
        contract_payload,
        status="Instalação Concluída",
        warranty={"completion_date": "2024-03-15", "warranty_days": 730},
    )
    assert data["warranty"] == {"completion_date": "2024-03-15", "warranty_days": 730}


def test_contract_update_reapplies_lifecycle(client: TestClient, user_headers, contract_payload):
    """Changing an active contract to completed starts the warranty on save"""
    created = _create_contract(client, user_headers, contract_payload)
    assert created["warranty"] is None
    assert created["urgent"] is True
    assert created["days_until_deadline"] == 9

    response = client.put(
        f"/v1/contracts/{created['id']}",
        json={**contract_payload, "status": "Instalação Concluída", "platform_installed": 2},
        headers=user_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == created["id"]
    assert data["warranty"]["completion_date"] == "2024-06-01"
    assert data["urgent"] is False


def test_contract_without_client_is_rejected(client: TestClient, user_headers, contract_payload):
    response = client.post("/v1/contracts", json={**contract_payload, "client_id": None}, headers=user_headers)
    assert response.status_code == 422
    assert response.json()["detail"] == "Selecione um cliente para o contrato"

    response = client.post("/v1/contracts", json={**contract_payload, "client_id": "ghost"}, headers=user_headers)
    assert response.status_code == 422


def test_contracts_filtered_by_client(client: TestClient, user_headers, contract_payload):
    other = client.post("/v1/clients", json={"name": "Outro Órgão", "cnpj": "3"}, headers=user_headers).json()
    _create_contract(client, user_headers, contract_payload)
    _create_contract(client, user_headers, contract_payload, client_id=other["id"])

    all_contracts = client.get("/v1/contracts", headers=user_headers).json()
    filtered = client.get(f"/v1/contracts?client_id={other['id']}", headers=user_headers).json()

    assert len(all_contracts) == 2
    assert [c["client_id"] for c in filtered] == [other["id"]]


def test_contract_delete_requires_admin(client: TestClient, user_headers, admin_headers, contract_payload):
    created = _create_contract(client, user_headers, contract_payload)

    assert client.delete(f"/v1/contracts/{created['id']}", headers=user_headers).status_code == 403
    assert client.delete(f"/v1/contracts/{created['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/v1/contracts/{created['id']}", headers=user_headers).status_code == 404


def test_edit_without_warranty_keeps_stored_one(client: TestClient, user_headers, contract_payload):
    """Re-saving a completed contract never restarts its warranty"""
    created = _create_contract(
        client,
        user_headers,
        contract_payload,
        status="Instalação Concluída",
        warranty={"completion_date": "2024-03-15", "warranty_days": 730},
    )

    response = client.put(
        f"/v1/contracts/{created['id']}",
        json={**contract_payload, "status": "Instalação Concluída", "observations": "Vistoria ok"},
        headers=user_headers,
    )

    assert response.status_code == 200
    assert response.json()["warranty"] == {"completion_date": "2024-03-15", "warranty_days": 730}
    assert response.json()["observations"] == "Vistoria ok"


def test_oversized_warranty_is_rejected(client: TestClient, user_headers, contract_payload):
    response = client.post(
        "/v1/contracts",
        json={
            **contract_payload,
            "status": "Instalação Concluída",
            "warranty": {"completion_date": "2024-01-01", "warranty_days": 3_000_000},
        },
        headers=user_headers,
    )

    assert response.status_code == 422
    assert client.get("/v1/contracts", headers=user_headers).json() == []
    assert client.get("/v1/reports/warranties", headers=user_headers).status_code == 200


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_value_is_rejected(client: TestClient, user_headers, saved_client, literal):
    body = f'{{"client_id": "{saved_client.id}", "title": "Plataforma", "value": {literal}}}'

    response = client.post(
        "/v1/contracts",
        content=body,
        headers={**user_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert client.get("/v1/dashboard", headers=user_headers).json()["total_value"] == 0


# Dashboard

def test_dashboard_empty(client: TestClient, user_headers):
    response = client.get("/v1/dashboard", headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["installation_rate"] == 0
    assert data["growth_rate"] == 0
    assert data["clients_count"] == 0
    assert [i["title"] for i in data["insights"]] == [
        "Eficiência de Entrega",
        "Risco Operacional",
        "Potencial de Expansão",
    ]


def test_dashboard_metrics(client: TestClient, user_headers, contract_payload):
    _create_contract(client, user_headers, contract_payload)
    _create_contract(
        client,
        user_headers,
        contract_payload,
        status="Pendente",
        estimated_installation_date=None,
        start_date="2023-05-01",
        value=100000.0,
    )

    data = client.get("/v1/dashboard", headers=user_headers).json()

    assert data["active_contracts_count"] == 1
    assert data["pending_contracts_count"] == 1
    assert data["total_value"] == 350000.0
    assert data["annual_value"] == 250000.0
    assert data["total_contracted"] == 6
    assert data["total_installed"] == 2
    assert data["critical_contracts"] == 1
    assert data["approaching_deadlines"][0]["title"] == "Elevadores UBS Centro"
    assert data["insights"][1]["value"] == "Atenção"
    assert data["clients_count"] == 1
    assert data["current_year"] == 2024


# Receivables

def test_receivable_generation_flow(client: TestClient, user_headers, admin_headers, contract_payload):
    """Completed contract -> eligible -> billed once -> received"""
    contract = _create_contract(client, user_headers, contract_payload, status="Instalação Concluída")

    eligible = client.get("/v1/receivables/eligible", headers=user_headers).json()
    assert [c["id"] for c in eligible] == [contract["id"]]

    generated = client.post(f"/v1/receivables/generate/{contract['id']}", headers=user_headers)
    assert generated.status_code == 201
    receivable = generated.json()
    assert receivable["issue_date"] == "2024-06-01"
    assert receivable["due_date"] == "2024-07-01"
    assert receivable["status"] == "Pendente"
    assert receivable["client_name"] == "Prefeitura de Campinas"
    assert receivable["contract_title"] == "Elevadores UBS Centro"
    assert receivable["overdue"] is False

    duplicate = client.post(f"/v1/receivables/generate/{contract['id']}", headers=user_headers)
    assert duplicate.status_code == 409
    assert client.get("/v1/receivables/eligible", headers=user_headers).json() == []

    received = client.post(
        f"/v1/receivables/{receivable['id']}/status",
        json={"status": "Recebido"},
        headers=user_headers,
    )
    assert received.status_code == 200
    assert received.json()["status"] == "Recebido"

    assert client.delete(f"/v1/receivables/{receivable['id']}", headers=user_headers).status_code == 403
    assert client.delete(f"/v1/receivables/{receivable['id']}", headers=admin_headers).status_code == 204


def test_receivable_requires_completed_contract(client: TestClient, user_headers, contract_payload):
    contract = _create_contract(client, user_headers, contract_payload)

    assert client.post(f"/v1/receivables/generate/{contract['id']}", headers=user_headers).status_code == 422
    assert client.post("/v1/receivables/generate/missing", headers=user_headers).status_code == 404


def test_receivable_edit_search_and_overdue(client: TestClient, user_headers, contract_payload):
    contract = _create_contract(client, user_headers, contract_payload, status="Instalação Concluída")
    receivable = client.post(f"/v1/receivables/generate/{contract['id']}", headers=user_headers).json()

    edited = client.put(
        f"/v1/receivables/{receivable['id']}",
        json={
            "invoice_number": "NF-2024-0042",
            "issue_date": "2024-04-01",
            "due_date": "2024-05-01",
            "status": "Pendente",
            "observations": "Empenho 123",
        },
        headers=user_headers,
    )
    assert edited.status_code == 200
    assert edited.json()["overdue"] is True

    by_invoice = client.get("/v1/receivables?search=nf-2024", headers=user_headers).json()
    by_status = client.get("/v1/receivables?status=Cancelado", headers=user_headers).json()

    assert [r["id"] for r in by_invoice] == [receivable["id"]]
    assert by_status == []


def test_deleting_contract_removes_receivable(client: TestClient, user_headers, admin_headers, contract_payload):
    contract = _create_contract(client, user_headers, contract_payload, status="Instalação Concluída")
    client.post(f"/v1/receivables/generate/{contract['id']}", headers=user_headers)

    client.delete(f"/v1/contracts/{contract['id']}", headers=admin_headers)

    assert client.get("/v1/receivables", headers=user_headers).json() == []


# Reports

def test_report_aggregations(client: TestClient, user_headers, contract_payload):
    _create_contract(client, user_headers, contract_payload, status="Instalação Concluída")
    _create_contract(client, user_headers, contract_payload, start_date=None)

    by_year = client.get("/v1/reports/sales-by-year", headers=user_headers).json()
    by_state = client.get("/v1/reports/sales-by-state", headers=user_headers).json()
    warranties = client.get("/v1/reports/warranties", headers=user_headers).json()

    assert [r["label"] for r in by_year] == ["Indefinido", "2024"]
    assert by_state == [
        {"label": "SP", "platforms": 4, "elevators": 2, "value": 500000.0, "total_units": 6}
    ]
    assert len(warranties) == 1
    assert warranties[0]["client_name"] == "Prefeitura de Campinas"
    assert warranties[0]["remaining_days"] == 365


@pytest.mark.parametrize(
    "path,filename",
    [
        ("/v1/reports/sales-by-year/pdf", "Relatorio_Vendas_Anual.pdf"),
        ("/v1/reports/sales-by-state/pdf", "Relatorio_Vendas_Estados.pdf"),
        ("/v1/reports/warranties/pdf", "Garantias_Ativas_2024-06-01.pdf"),
    ],
)
def test_report_pdfs(client: TestClient, user_headers, contract_payload, path, filename):
    _create_contract(client, user_headers, contract_payload, status="Instalação Concluída")

    response = client.get(path, headers=user_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert filename in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_client_file_pdf(client: TestClient, saved_client, user_headers, contract_payload):
    _create_contract(client, user_headers, contract_payload)

    response = client.get(f"/v1/reports/clients/{saved_client.id}/pdf", headers=user_headers)

    assert response.status_code == 200
    assert "Ficha_Prefeitura_de_Campinas.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
    assert client.get("/v1/reports/clients/missing/pdf", headers=user_headers).status_code == 404


# Users

def test_user_management(client: TestClient, admin_user, admin_headers, user_headers):
    payload = {"name": "Técnico", "email": "tecnico@example.com", "role": "user"}

    assert client.post("/v1/users", json=payload, headers=user_headers).status_code == 403

    created = client.post("/v1/users", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assert client.post("/v1/users", json=payload, headers=admin_headers).status_code == 409

    assert client.delete(f"/v1/users/{admin_user.id}", headers=admin_headers).status_code == 400
    assert client.delete(f"/v1/users/{created.json()['id']}", headers=admin_headers).status_code == 204
    assert client.delete("/v1/users/missing", headers=admin_headers).status_code == 404


# Postal codes

@patch("sincro_dashboard.infrastructure.clients.postal_code.PostalCodeClient.lookup")
def test_postal_code_lookup(mock_lookup: AsyncMock, client: TestClient, user_headers):
    mock_lookup.return_value = Address(
        street="Praça da Sé", neighborhood="Sé", cep="01001-000", city="São Paulo", state="SP"
    )

    response = client.get("/v1/postal-codes/01001-000", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["city"] == "São Paulo"
    assert response.json()["number"] == ""


@patch("sincro_dashboard.infrastructure.clients.postal_code.PostalCodeClient.lookup")
def test_postal_code_not_found(mock_lookup: AsyncMock, client: TestClient, user_headers):
    mock_lookup.return_value = None

    response = client.get("/v1/postal-codes/99999-999", headers=user_headers)

    assert response.status_code == 404
