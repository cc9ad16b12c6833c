"""
Tests para el módulo de Clientes

Cubren CRUD, búsqueda, estadísticas y el aislamiento por usuario.
"""

import pytest

from app.common.exceptions import NotFound, ValidationError
from app.modules.clients.schemas import ClientCreate, ClientUpdate
from app.modules.clients.service import ClientService


# ===== FIXTURES =====

@pytest.fixture
def client_payload():
    return {
        "name": "Laura Gómez",
        "email": "laura@acmestudio.io",
        "company": "Acme Studio",
        "phone": "+57 300 123 4567",
    }


# ===== TESTS DEL SERVICIO =====

class TestClientService:
    """Tests del servicio de clientes"""

    def test_create_client(self, storage, client_payload):
        result = ClientService(storage).create_client(ClientCreate(**client_payload), "user_1")
        assert result.user_id == "user_1"
        assert result.company == "Acme Studio"
        assert len(storage.clients) == 4

    def test_create_requires_name_and_email(self, storage):
        service = ClientService(storage)
        with pytest.raises(ValidationError):
            service.create_client(ClientCreate(email="a@acmestudio.io"), "user_1")
        with pytest.raises(ValidationError):
            service.create_client(ClientCreate(name="Ana"), "user_1")
        assert len(storage.clients) == 3

    def test_list_with_search(self, storage):
        result = ClientService(storage).list_clients("user_1", search="design")
        assert [c.id for c in result.clients] == ["client_3"]
        assert result.stats.total_clients == 3
        assert result.stats.with_company == 3

    def test_list_most_recent_first(self, storage):
        result = ClientService(storage).list_clients("user_1")
        assert [c.id for c in result.clients] == ["client_3", "client_2", "client_1"]

    def test_update_client(self, storage):
        result = ClientService(storage).update_client("client_1", ClientUpdate(company="Smith & Co"), "user_1")
        assert result.company == "Smith & Co"
        assert result.name == "John Smith"

    def test_other_user_cannot_update(self, storage):
        with pytest.raises(NotFound):
            ClientService(storage).update_client("client_1", ClientUpdate(company="X"), "user_2")

    def test_delete_client_with_invoices_fails(self, storage):
        with pytest.raises(ValidationError):
            ClientService(storage).delete_client("client_1", "user_1")

    def test_delete_client_without_invoices(self, storage):
        service = ClientService(storage)
        created = service.create_client(ClientCreate(name="Temp", email="temp@acmestudio.io"), "user_1")
        service.delete_client(created.id, "user_1")
        assert len(storage.clients) == 3


# ===== TESTS DE ENDPOINTS =====

class TestClientEndpoints:
    """Tests de la API de clientes"""

    def test_create(self, client, client_payload):
        response = client.post("/clients/", json=client_payload)
        assert response.status_code == 201
        assert response.json()["email"] == "laura@acmestudio.io"

    def test_create_invalid_email(self, client, client_payload):
        client_payload["email"] = "not-an-email"
        assert client.post("/clients/", json=client_payload).status_code == 422

    def test_create_invalid_phone(self, client, client_payload):
        client_payload["phone"] = "call me"
        assert client.post("/clients/", json=client_payload).status_code == 422

    def test_create_without_name(self, client):
        response = client.post("/clients/", json={"email": "x@acmestudio.io"})
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_list(self, client):
        response = client.get("/clients/")
        assert response.status_code == 200
        assert response.json()["total"] == 3

    def test_get_and_patch(self, client):
        assert client.get("/clients/client_2").json()["name"] == "Sarah Johnson"
        response = client.patch("/clients/client_2", json={"address": "1 Market St"})
        assert response.status_code == 200
        assert response.json()["address"] == "1 Market St"

    def test_delete_with_invoices(self, client):
        assert client.delete("/clients/client_1").status_code == 400

    def test_other_user(self, other_user_client):
        assert other_user_client.get("/clients/client_1").status_code == 404
        assert other_user_client.get("/clients/").json()["total"] == 0
