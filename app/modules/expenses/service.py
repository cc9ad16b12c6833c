"""
Servicio de gastos

Los gastos pueden ser facturables a un cliente. Cada usuario recibe las
categorías por defecto la primera vez que lista sus categorías.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
import logging

from app.common.exceptions import NotFound, ValidationError
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.common.validators import in_month, parse_month
from app.modules.expenses.defaults import DEFAULT_CATEGORIES
from app.modules.expenses.schemas import (
    ExpenseCategoryCreate, ExpenseCategoryOut, ExpenseCreate, ExpenseFilters,
    ExpenseList, ExpenseOut, ExpenseSummary, ExpenseUpdate
)

logger = logging.getLogger(__name__)


class ExpenseService:
    """Servicio para gastos y categorías de gasto"""

    def __init__(self, storage: Storage, today: Optional[date] = None):
        self.storage = storage
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # ===== CATEGORÍAS =====

    def list_categories(self, user_id: str) -> List[ExpenseCategoryOut]:
        rows = self.storage.expense_categories.list(filters={"user_id": user_id}, order_by="name")
        if not rows:
            rows = self._seed_categories(user_id)
        return [ExpenseCategoryOut(**row) for row in rows]

    def _seed_categories(self, user_id: str) -> List[dict]:
        now = utcnow()
        rows = [
            self.storage.expense_categories.create({
                "user_id": user_id,
                "name": name,
                "color": color,
                "is_default": True,
                "created_at": now,
                "updated_at": now,
            })
            for name, color in DEFAULT_CATEGORIES
        ]
        logger.info(f"Default expense categories created for user {user_id}")
        return sorted(rows, key=lambda r: r["name"])

    def create_category(self, data: ExpenseCategoryCreate, user_id: str) -> ExpenseCategoryOut:
        name = data.name.strip()
        if self.storage.expense_categories.first({"user_id": user_id, "name": name}):
            raise ValidationError(f"Ya existe la categoría {name}")
        now = utcnow()
        row = self.storage.expense_categories.create({
            "user_id": user_id,
            "name": name,
            "color": data.color,
            "is_default": False,
            "created_at": now,
            "updated_at": now,
        })
        return ExpenseCategoryOut(**row)

    # ===== GASTOS =====

    def _get_owned(self, expense_id: str, user_id: str) -> dict:
        record = self.storage.expenses.get(expense_id)
        if record["user_id"] != user_id:
            raise NotFound("expenses", expense_id)
        return record

    def _check_client(self, client_id: Optional[str], user_id: str):
        if client_id:
            client = self.storage.clients.get(client_id)
            if client["user_id"] != user_id:
                raise NotFound("clients", client_id)

    def _to_out(self, record: dict, colors: Dict[str, str], clients: Dict[str, dict]) -> ExpenseOut:
        client = clients.get(record.get("client_id")) or {}
        return ExpenseOut(
            **record,
            category_color=colors.get(record["category"]),
            client_name=client.get("name"),
        )

    def _lookups(self, user_id: str):
        colors = {c.name: c.color for c in self.list_categories(user_id)}
        clients = {c["id"]: c for c in self.storage.clients.list(filters={"user_id": user_id})}
        return colors, clients

    def get_expense(self, expense_id: str, user_id: str) -> ExpenseOut:
        colors, clients = self._lookups(user_id)
        return self._to_out(self._get_owned(expense_id, user_id), colors, clients)

    def list_expenses(self, user_id: str, filters: ExpenseFilters) -> ExpenseList:
        """Gastos del usuario (más recientes primero) con el resumen de los filtrados"""
        try:
            month = parse_month(filters.month)
        except ValueError as e:
            raise ValidationError(str(e))

        rows = self.storage.expenses.list(filters={"user_id": user_id}, order_by="-expense_date")
        all_rows = rows
        if filters.category:
            rows = [r for r in rows if r["category"] == filters.category]
        if month:
            rows = [r for r in rows if in_month(r["expense_date"], month)]
        if filters.is_billable is not None:
            rows = [r for r in rows if r["is_billable"] == filters.is_billable]
        if filters.search:
            term = filters.search.lower()
            rows = [
                r for r in rows
                if term in (r.get("description") or "").lower() or term in (r.get("category") or "").lower()
            ]

        colors, clients = self._lookups(user_id)
        return ExpenseList(
            expenses=[self._to_out(r, colors, clients) for r in rows],
            total=len(rows),
            summary=self.summarize(rows, all_rows),
        )

    def summarize(self, rows: List[dict], all_rows: Optional[List[dict]] = None) -> ExpenseSummary:
        """
        Totales de gastos

        Args:
            rows: Gastos sobre los que se calculan total, facturables y por categoría
            all_rows: Gastos para el total del mes en curso (por defecto rows)
        """
        current_month = (self.today.year, self.today.month)
        by_category: Dict[str, Decimal] = {}
        for r in rows:
            by_category[r["category"]] = by_category.get(r["category"], Decimal("0")) + Decimal(r["amount"])
        return ExpenseSummary(
            total_expenses=sum((Decimal(r["amount"]) for r in rows), Decimal("0")),
            billable_expenses=sum((Decimal(r["amount"]) for r in rows if r["is_billable"]), Decimal("0")),
            this_month_expenses=sum(
                (Decimal(r["amount"]) for r in (all_rows if all_rows is not None else rows)
                 if in_month(r["expense_date"], current_month)),
                Decimal("0")
            ),
            count=len(rows),
            by_category=by_category,
        )

    def _validate_amount(self, amount: Optional[Decimal]):
        if amount is None or amount <= 0:
            raise ValidationError("El monto debe ser mayor que 0")

    def create_expense(self, data: ExpenseCreate, user_id: str) -> ExpenseOut:
        if not (data.category or "").strip() or not (data.description or "").strip() or data.amount is None:
            raise ValidationError("Categoría, descripción y monto son obligatorios")
        self._validate_amount(data.amount)
        self._check_client(data.client_id, user_id)

        now = utcnow()
        record = self.storage.expenses.create({
            **data.model_dump(),
            "category": data.category.strip(),
            "description": data.description.strip(),
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Expense {record['id']} created for user {user_id} ({record['amount']} {record['currency']})")
        colors, clients = self._lookups(user_id)
        return self._to_out(record, colors, clients)

    def update_expense(self, expense_id: str, data: ExpenseUpdate, user_id: str) -> ExpenseOut:
        self._get_owned(expense_id, user_id)
        patch = data.model_dump(exclude_unset=True)
        for field in ("category", "description", "amount", "currency", "expense_date", "is_billable"):
            if field in patch and patch[field] in (None, ""):
                raise ValidationError(f"El campo {field} es obligatorio")
        if "amount" in patch:
            self._validate_amount(patch["amount"])
        if "client_id" in patch:
            self._check_client(patch["client_id"], user_id)

        patch["updated_at"] = utcnow()
        record = self.storage.expenses.update(expense_id, patch)
        colors, clients = self._lookups(user_id)
        return self._to_out(record, colors, clients)

    def delete_expense(self, expense_id: str, user_id: str):
        self._get_owned(expense_id, user_id)
        self.storage.expenses.delete(expense_id)
        logger.info(f"Expense {expense_id} deleted")
