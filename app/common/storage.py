"""
Contrato de almacenamiento usado por los servicios

Cada colección expone list / get / create / update / delete sobre registros
planos (dict). Existen dos implementaciones:

- SqlAlchemyStorage: tablas de PostgreSQL a través de los modelos ORM
- InMemoryStorage (app.common.fixtures): dataset de demostración por proceso

La implementación se elige al componer la aplicación
(app.dependencies.storageDependencies), nunca en tiempo de ejecución por reflexión.
"""
from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any, Callable, Dict, List, Optional
import logging

from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.common.exceptions import NotFound, PersistenceFailure
from app.common.mixins import new_id

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

COLLECTIONS = (
    "clients",
    "invoices",
    "invoice_items",
    "payment_gateways",
    "email_templates",
    "reminder_settings",
    "expenses",
    "expense_categories",
)


class Collection(ABC):
    """Operaciones mínimas sobre una colección de registros"""

    name: str

    @abstractmethod
    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        ...

    @abstractmethod
    def get(self, record_id: str) -> Record:
        ...

    @abstractmethod
    def create(self, record: Record) -> Record:
        ...

    @abstractmethod
    def update(self, record_id: str, patch: Record) -> Record:
        ...

    @abstractmethod
    def delete(self, record_id: str) -> None:
        ...

    def first(self, filters: Dict[str, Any]) -> Optional[Record]:
        rows = self.list(filters=filters, limit=1)
        return rows[0] if rows else None


class Storage:
    """Agrupa las colecciones por nombre: storage.invoices, storage["clients"]"""

    backend = "base"

    def __init__(self, collections: Dict[str, Collection]):
        self._collections = collections

    def __getitem__(self, name: str) -> Collection:
        return self._collections[name]

    def __getattr__(self, name: str) -> Collection:
        try:
            return self.__dict__["_collections"][name]
        except KeyError:
            raise AttributeError(name)


def parse_order_by(order_by: Optional[str]):
    """'-created_at' -> ('created_at', True)"""
    if not order_by:
        return None, False
    if order_by.startswith("-"):
        return order_by[1:], True
    return order_by, False


# ===== SQLALCHEMY =====

class SqlAlchemyCollection(Collection):
    """Colección respaldada por un modelo ORM"""

    def __init__(self, name: str, model, session_factory: Callable[[], Session]):
        self.name = name
        self.model = model
        self.session_factory = session_factory
        self._columns = [c.name for c in model.__table__.columns]

    def _to_record(self, obj) -> Record:
        return {column: getattr(obj, column) for column in self._columns}

    def _clean(self, record: Record) -> Record:
        return {k: v for k, v in record.items() if k in self._columns}

    def list(self, filters=None, order_by=None, limit=None) -> List[Record]:
        try:
            with self.session_factory() as db:
                query = db.query(self.model)
                for field, value in (filters or {}).items():
                    query = query.filter(getattr(self.model, field) == value)
                field, descending = parse_order_by(order_by)
                if field:
                    column = getattr(self.model, field)
                    query = query.order_by(desc(column) if descending else asc(column))
                if limit:
                    query = query.limit(limit)
                return [self._to_record(obj) for obj in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing {self.name}: {e}")
            raise PersistenceFailure(f"No se pudo consultar {self.name}")

    def get(self, record_id: str) -> Record:
        try:
            with self.session_factory() as db:
                obj = db.get(self.model, record_id)
                if obj is None:
                    raise NotFound(self.name, record_id)
                return self._to_record(obj)
        except SQLAlchemyError as e:
            logger.error(f"Error reading {self.name}/{record_id}: {e}")
            raise PersistenceFailure(f"No se pudo leer {self.name}")

    def create(self, record: Record) -> Record:
        data = self._clean(record)
        data.setdefault("id", new_id())
        try:
            with self.session_factory() as db:
                obj = self.model(**data)
                db.add(obj)
                db.commit()
                db.refresh(obj)
                return self._to_record(obj)
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.name}: {e}")
            raise PersistenceFailure(f"No se pudo guardar en {self.name}")

    def update(self, record_id: str, patch: Record) -> Record:
        try:
            with self.session_factory() as db:
                obj = db.get(self.model, record_id)
                if obj is None:
                    raise NotFound(self.name, record_id)
                for field, value in self._clean(patch).items():
                    if field != "id":
                        setattr(obj, field, value)
                db.commit()
                db.refresh(obj)
                return self._to_record(obj)
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.name}/{record_id}: {e}")
            raise PersistenceFailure(f"No se pudo actualizar {self.name}")

    def delete(self, record_id: str) -> None:
        try:
            with self.session_factory() as db:
                obj = db.get(self.model, record_id)
                if obj is None:
                    raise NotFound(self.name, record_id)
                db.delete(obj)
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.name}/{record_id}: {e}")
            raise PersistenceFailure(f"No se pudo eliminar de {self.name}")


class SqlAlchemyStorage(Storage):
    backend = "sql"

    def __init__(self, session_factory: Callable[[], Session]):
        from app.modules.clients.models import Client
        from app.modules.invoices.models import Invoice, InvoiceItem
        from app.modules.payment_gateways.models import PaymentGateway
        from app.modules.email_templates.models import EmailTemplate
        from app.modules.reminders.models import ReminderSetting
        from app.modules.expenses.models import Expense, ExpenseCategory

        models = {
            "clients": Client,
            "invoices": Invoice,
            "invoice_items": InvoiceItem,
            "payment_gateways": PaymentGateway,
            "email_templates": EmailTemplate,
            "reminder_settings": ReminderSetting,
            "expenses": Expense,
            "expense_categories": ExpenseCategory,
        }
        super().__init__({
            name: SqlAlchemyCollection(name, model, session_factory)
            for name, model in models.items()
        })


# ===== MEMORIA =====

class InMemoryCollection(Collection):
    """Colección en memoria con el mismo contrato que la de SQL"""

    def __init__(self, name: str, rows: Optional[List[Record]] = None):
        self.name = name
        self._rows: Dict[str, Record] = {}
        for row in rows or []:
            self._rows[row["id"]] = deepcopy(row)

    def list(self, filters=None, order_by=None, limit=None) -> List[Record]:
        rows = [
            row for row in self._rows.values()
            if all(row.get(field) == value for field, value in (filters or {}).items())
        ]
        field, descending = parse_order_by(order_by)
        if field:
            # None siempre al final, igual que NULLS LAST
            present = [r for r in rows if r.get(field) is not None]
            missing = [r for r in rows if r.get(field) is None]
            rows = sorted(present, key=lambda r: r[field], reverse=descending) + missing
        if limit:
            rows = rows[:limit]
        return [deepcopy(row) for row in rows]

    def get(self, record_id: str) -> Record:
        if record_id not in self._rows:
            raise NotFound(self.name, record_id)
        return deepcopy(self._rows[record_id])

    def create(self, record: Record) -> Record:
        row = deepcopy(record)
        row.setdefault("id", new_id())
        self._rows[row["id"]] = row
        return deepcopy(row)

    def update(self, record_id: str, patch: Record) -> Record:
        if record_id not in self._rows:
            raise NotFound(self.name, record_id)
        row = self._rows[record_id]
        row.update({k: deepcopy(v) for k, v in patch.items() if k != "id"})
        return deepcopy(row)

    def delete(self, record_id: str) -> None:
        if record_id not in self._rows:
            raise NotFound(self.name, record_id)
        del self._rows[record_id]

    def __len__(self):
        return len(self._rows)


class InMemoryStorage(Storage):
    backend = "memory"

    def __init__(self, dataset: Optional[Dict[str, List[Record]]] = None):
        dataset = dataset or {}
        super().__init__({
            name: InMemoryCollection(name, dataset.get(name, []))
            for name in COLLECTIONS
        })
