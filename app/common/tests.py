"""
Tests para el almacenamiento en memoria, los validadores compartidos y el
manejo de errores de dominio en la API.
"""

import pytest
from datetime import date

from app.common.exceptions import InvalidTransition, NotFound, OutOfRange, PersistenceFailure, ValidationError
from app.common.fixtures import build_fixture_storage
from app.common.storage import COLLECTIONS, InMemoryStorage, parse_order_by
from app.common.validators import in_month, parse_month, validate_currency_code, validate_phone
from app.dependencies.storageDependencies import build_storage


class TestInMemoryStorage:
    """Tests del contrato de colección sobre memoria"""

    def test_every_collection_exists(self):
        storage = InMemoryStorage()
        for name in COLLECTIONS:
            assert storage[name] is getattr(storage, name)
            assert storage[name].list() == []

    def test_unknown_collection(self):
        with pytest.raises(AttributeError):
            InMemoryStorage().payments

    def test_create_assigns_id(self):
        collection = InMemoryStorage().clients
        record = collection.create({"name": "Ana"})
        assert record["id"]
        assert collection.get(record["id"])["name"] == "Ana"

    def test_get_missing(self):
        with pytest.raises(NotFound) as exc:
            InMemoryStorage().invoices.get("invoice_404")
        assert exc.value.collection == "invoices"

    def test_update_ignores_id(self):
        collection = InMemoryStorage({"clients": [{"id": "c1", "name": "A"}]}).clients
        updated = collection.update("c1", {"id": "c2", "name": "B"})
        assert updated == {"id": "c1", "name": "B"}

    def test_update_and_delete_missing(self):
        collection = InMemoryStorage().clients
        with pytest.raises(NotFound):
            collection.update("c1", {"name": "B"})
        with pytest.raises(NotFound):
            collection.delete("c1")

    def test_returned_records_are_copies(self):
        storage = build_fixture_storage()
        record = storage.invoices.get("invoice_1")
        record["status"] = "cancelled"
        assert storage.invoices.get("invoice_1")["status"] == "paid"

    def test_list_filters_order_and_limit(self):
        rows = [
            {"id": "a", "user_id": "u1", "due": date(2024, 3, 1)},
            {"id": "b", "user_id": "u1", "due": None},
            {"id": "c", "user_id": "u1", "due": date(2024, 1, 1)},
            {"id": "d", "user_id": "u2", "due": date(2024, 2, 1)},
        ]
        collection = InMemoryStorage({"invoices": rows}).invoices
        assert [r["id"] for r in collection.list(filters={"user_id": "u1"}, order_by="due")] == ["c", "a", "b"]
        assert [r["id"] for r in collection.list(filters={"user_id": "u1"}, order_by="-due")] == ["a", "c", "b"]
        assert [r["id"] for r in collection.list(order_by="due", limit=2)] == ["c", "d"]
        assert collection.first({"user_id": "u3"}) is None

    def test_fixture_storages_are_independent(self):
        first = build_fixture_storage()
        second = build_fixture_storage()
        first.invoices.delete("invoice_1")
        assert len(first.invoices) == 3
        assert len(second.invoices) == 4

    def test_build_memory_storage(self):
        storage = build_storage("memory")
        assert storage.backend == "memory"
        assert len(storage.clients) == 3

    def test_parse_order_by(self):
        assert parse_order_by("-created_at") == ("created_at", True)
        assert parse_order_by("name") == ("name", False)
        assert parse_order_by(None) == (None, False)


class TestValidators:

    @pytest.mark.parametrize("value, expected", [("2024-02", (2024, 2)), ("", None), (None, None)])
    def test_parse_month(self, value, expected):
        assert parse_month(value) == expected

    @pytest.mark.parametrize("value", ["2024-00", "2024-13", "2024/02", "Feb 2024"])
    def test_parse_month_invalid(self, value):
        with pytest.raises(ValueError):
            parse_month(value)

    def test_in_month(self):
        assert in_month(date(2024, 2, 29), (2024, 2))
        assert not in_month(date(2023, 2, 1), (2024, 2))

    def test_currency_code(self):
        assert validate_currency_code("usd")
        assert not validate_currency_code("US")
        assert not validate_currency_code("")

    def test_phone(self):
        assert validate_phone("+1 (555) 123-4567")
        assert not validate_phone("12")


class TestErrors:
    """Cada error de dominio tiene su código HTTP"""

    @pytest.mark.parametrize("error, status_code", [
        (ValidationError("x"), 400),
        (InvalidTransition("x"), 409),
        (OutOfRange(3, 1), 422),
        (NotFound("invoices", "x"), 404),
        (PersistenceFailure("x"), 503),
    ])
    def test_status_codes(self, error, status_code):
        assert error.status_code == status_code
        assert error.error == type(error).__name__

    def test_error_response_body(self, client):
        response = client.post("/invoices/invoice_1/cancel")
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "InvalidTransition"
        assert "paid" in body["detail"]

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Process-Time" in response.headers
