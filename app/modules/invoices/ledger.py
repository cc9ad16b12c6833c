"""
Ítems de una factura en edición

El ledger mantiene la lista ordenada de ítems antes de persistirla. Siempre
hay al menos un ítem y el total de cada línea se recalcula, nunca se edita.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List
import logging

from app.common.exceptions import OutOfRange, ValidationError
from app.modules.invoices.schemas import LineItemDraft

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("description", "quantity", "unit_price")


def coerce_quantity(value: Any) -> int:
    """Cantidad entera, mínimo 1; entradas no numéricas valen 1"""
    try:
        quantity = int(Decimal(str(value)))
    except (InvalidOperation, ValueError, TypeError, OverflowError):
        return 1
    return max(quantity, 1)


def coerce_unit_price(value: Any) -> Decimal:
    """Precio unitario, mínimo 0; entradas no numéricas valen 0"""
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")
    if not price.is_finite():
        return Decimal("0")
    return max(price, Decimal("0"))


class LineItemLedger:
    """Lista ordenada de ítems de una factura en edición (un solo editor)"""

    def __init__(self):
        self._items: List[LineItemDraft] = [LineItemDraft()]

    @classmethod
    def from_items(cls, items: Iterable) -> "LineItemLedger":
        """Cargar ítems persistidos o recibidos en una petición"""
        ledger = cls()
        loaded = []
        for item in items:
            data = item if isinstance(item, dict) else item.model_dump()
            draft = LineItemDraft(
                description=data.get("description") or "",
                quantity=coerce_quantity(data.get("quantity", 1)),
                unit_price=coerce_unit_price(data.get("unit_price", 0)),
            )
            draft.total = draft.quantity * draft.unit_price
            loaded.append(draft)
        if loaded:
            ledger._items = loaded
        return ledger

    @property
    def items(self) -> List[LineItemDraft]:
        return [item.model_copy() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def _check_index(self, index: int):
        if not isinstance(index, int) or index < 0 or index >= len(self._items):
            raise OutOfRange(index, len(self._items))

    def add_item(self) -> LineItemDraft:
        item = LineItemDraft()
        self._items.append(item)
        return item.model_copy()

    def remove_item(self, index: int) -> bool:
        """
        Eliminar el ítem en la posición indicada

        Returns:
            False si era el último ítem (no se elimina), True en otro caso
        """
        self._check_index(index)
        if len(self._items) <= 1:
            logger.debug("Ignoring removal of the last line item")
            return False
        del self._items[index]
        return True

    def update_item(self, index: int, field: str, value: Any) -> LineItemDraft:
        self._check_index(index)
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Campo de ítem no editable: {field}")

        item = self._items[index]
        if field == "description":
            item.description = "" if value is None else str(value)
        elif field == "quantity":
            item.quantity = coerce_quantity(value)
        else:
            item.unit_price = coerce_unit_price(value)

        if field in ("quantity", "unit_price"):
            item.total = item.quantity * item.unit_price
        return item.model_copy()

    def validate(self):
        """Todos los ítems deben tener descripción antes de guardar"""
        missing = [i for i, item in enumerate(self._items) if not item.description.strip()]
        if missing:
            positions = ", ".join(str(i + 1) for i in missing)
            raise ValidationError(f"Todos los ítems deben tener descripción (ítems sin descripción: {positions})")
