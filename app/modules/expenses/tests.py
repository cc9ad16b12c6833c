"""
Tests para el módulo de Gastos
"""

import pytest
from datetime import date
from decimal import Decimal

from app.common.exceptions import NotFound, ValidationError
from app.modules.expenses.defaults import DEFAULT_CATEGORIES
from app.modules.expenses.schemas import ExpenseCategoryCreate, ExpenseCreate, ExpenseFilters, ExpenseUpdate
from app.modules.expenses.service import ExpenseService


# ===== FIXTURES =====

@pytest.fixture
def service(storage):
    return ExpenseService(storage, today=date(2024, 2, 10))


@pytest.fixture
def expense_payload():
    return {
        "category": "Meals & Entertainment",
        "description": "Lunch with client",
        "amount": "48.20",
        "expense_date": "2024-02-05",
        "is_billable": True,
        "client_id": "client_2",
    }


# ===== TESTS DE CATEGORÍAS =====

class TestExpenseCategories:

    def test_default_categories_seeded_once(self, service, storage):
        first = service.list_categories("user_2")
        assert len(first) == len(DEFAULT_CATEGORIES)
        assert all(c.is_default for c in first)
        service.list_categories("user_2")
        assert len(storage.expense_categories.list(filters={"user_id": "user_2"})) == len(DEFAULT_CATEGORIES)

    def test_categories_sorted_by_name(self, service):
        names = [c.name for c in service.list_categories("user_1")]
        assert names == sorted(names)

    def test_create_category(self, service):
        category = service.create_category(ExpenseCategoryCreate(name="Coworking", color="#aabbcc"), "user_1")
        assert category.color == "#AABBCC"
        assert not category.is_default

    def test_duplicate_category(self, service):
        with pytest.raises(ValidationError):
            service.create_category(ExpenseCategoryCreate(name="Other"), "user_1")


# ===== TESTS DE GASTOS =====

class TestExpenseService:

    def test_create_expense(self, service, expense_payload):
        expense = service.create_expense(ExpenseCreate(**expense_payload), "user_1")
        assert expense.amount == Decimal("48.20")
        assert expense.client_name == "Sarah Johnson"
        assert expense.category_color == "#F59E0B"

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_amount_must_be_positive(self, service, expense_payload, amount):
        expense_payload["amount"] = amount
        with pytest.raises(ValidationError):
            service.create_expense(ExpenseCreate(**expense_payload), "user_1")

    def test_required_fields(self, service):
        with pytest.raises(ValidationError):
            service.create_expense(ExpenseCreate(description="x", amount=Decimal("1")), "user_1")

    def test_unknown_client(self, service, expense_payload):
        expense_payload["client_id"] = "client_404"
        with pytest.raises(NotFound):
            service.create_expense(ExpenseCreate(**expense_payload), "user_1")

    def test_list_by_month(self, service):
        result = service.list_expenses("user_1", ExpenseFilters(month="2024-01"))
        assert [e.id for e in result.expenses] == ["exp_2", "exp_1"]
        summary = result.summary
        assert summary.total_expenses == Decimal("1545.49")
        assert summary.billable_expenses == Decimal("245.50")
        assert summary.this_month_expenses == Decimal("52.99")
        assert summary.count == 2
        assert summary.by_category["Office Supplies"] == Decimal("1299.99")

    def test_invalid_month(self, service):
        with pytest.raises(ValidationError):
            service.list_expenses("user_1", ExpenseFilters(month="2024-13"))

    def test_search_and_billable(self, service):
        assert service.list_expenses("user_1", ExpenseFilters(search="adobe")).total == 1
        assert [e.id for e in service.list_expenses("user_1", ExpenseFilters(is_billable=True)).expenses] == ["exp_2"]

    def test_update_expense(self, service):
        expense = service.update_expense("exp_3", ExpenseUpdate(amount=Decimal("59.99")), "user_1")
        assert expense.amount == Decimal("59.99")

    def test_update_rejects_blank_description(self, service):
        with pytest.raises(ValidationError):
            service.update_expense("exp_3", ExpenseUpdate(description=""), "user_1")

    def test_delete_other_user(self, service):
        with pytest.raises(NotFound):
            service.delete_expense("exp_1", "user_2")


# ===== TESTS DE ENDPOINTS =====

class TestExpenseEndpoints:

    def test_list(self, client):
        response = client.get("/expenses/", params={"month": "2024-02"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert Decimal(data["summary"]["total_expenses"]) == Decimal("52.99")

    def test_list_invalid_month(self, client):
        response = client.get("/expenses/", params={"month": "02-2024"})
        assert response.status_code == 400

    def test_create(self, client, expense_payload):
        response = client.post("/expenses/", json=expense_payload)
        assert response.status_code == 201
        assert response.json()["is_billable"] is True

    def test_create_invalid_currency(self, client, expense_payload):
        expense_payload["currency"] = "U$D"
        assert client.post("/expenses/", json=expense_payload).status_code == 422

    def test_categories(self, client):
        response = client.get("/expenses/categories")
        assert response.status_code == 200
        assert len(response.json()) == len(DEFAULT_CATEGORIES)

    def test_create_category_invalid_color(self, client):
        response = client.post("/expenses/categories", json={"name": "Rent", "color": "blue"})
        assert response.status_code == 422

    def test_get_patch_delete(self, client):
        assert client.get("/expenses/exp_1").status_code == 200
        assert client.patch("/expenses/exp_1", json={"notes": "Refurbished"}).json()["notes"] == "Refurbished"
        assert client.delete("/expenses/exp_1").status_code == 204
        assert client.get("/expenses/exp_1").status_code == 404
