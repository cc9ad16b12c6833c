"""
Ciclo de vida del estado de una factura

    draft -> sent -> paid
      |        |
      +--------+--> cancelled

"overdue" no se guarda: una factura "sent" con fecha de vencimiento pasada se
muestra como vencida (is_overdue / display_status). Ningún otro módulo debe
comparar fechas de vencimiento por su cuenta.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
import logging

from app.common.exceptions import InvalidTransition
from app.common.mixins import utcnow
from app.modules.invoices.models import InvoiceStatus

logger = logging.getLogger(__name__)


class DisplayStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class InvoiceAction(str, Enum):
    SEND = "send"
    MARK_PAID = "mark_paid"
    CANCEL = "cancel"


TERMINAL_STATUSES = frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED})

# acción -> (estados de origen permitidos, estado destino)
TRANSITIONS = {
    InvoiceAction.SEND: (frozenset({InvoiceStatus.DRAFT}), InvoiceStatus.SENT),
    InvoiceAction.MARK_PAID: (frozenset({InvoiceStatus.SENT}), InvoiceStatus.PAID),
    InvoiceAction.CANCEL: (frozenset({InvoiceStatus.DRAFT, InvoiceStatus.SENT}), InvoiceStatus.CANCELLED),
}


def _field(invoice: Any, name: str):
    return invoice.get(name) if isinstance(invoice, dict) else getattr(invoice, name)


def normalize_status(value: Any) -> InvoiceStatus:
    """Estado guardado; registros antiguos con "overdue" se leen como "sent" """
    raw = value.value if isinstance(value, Enum) else str(value)
    if raw == DisplayStatus.OVERDUE.value:
        return InvoiceStatus.SENT
    return InvoiceStatus(raw)


def is_overdue(status: Any, due_date: Optional[date], today: Optional[date] = None) -> bool:
    """Una factura enviada cuyo vencimiento ya pasó"""
    if due_date is None:
        return False
    today = today or date.today()
    return normalize_status(status) == InvoiceStatus.SENT and due_date < today


def days_overdue(due_date: Optional[date], today: Optional[date] = None) -> int:
    if due_date is None:
        return 0
    today = today or date.today()
    return max((today - due_date).days, 0)


def days_until_due(due_date: Optional[date], today: Optional[date] = None) -> int:
    if due_date is None:
        return 0
    today = today or date.today()
    return max((due_date - today).days, 0)


def display_status(invoice: Any, today: Optional[date] = None) -> DisplayStatus:
    status = normalize_status(_field(invoice, "status"))
    if is_overdue(status, _field(invoice, "due_date"), today):
        return DisplayStatus.OVERDUE
    return DisplayStatus(status.value)


def initial_status() -> InvoiceStatus:
    return InvoiceStatus.DRAFT


def can_transition(invoice: Any, action: InvoiceAction) -> bool:
    allowed_from, _ = TRANSITIONS[action]
    return normalize_status(_field(invoice, "status")) in allowed_from


def transition(invoice: Any, action: InvoiceAction, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Calcular el cambio de estado de una factura

    Args:
        invoice: Factura actual (registro o esquema)
        action: Acción a aplicar
        now: Momento del cambio (por defecto ahora, UTC)

    Returns:
        Patch con el nuevo estado y las marcas de tiempo

    Raises:
        InvalidTransition: si la acción no es válida desde el estado actual
    """
    current = normalize_status(_field(invoice, "status"))
    allowed_from, target = TRANSITIONS[action]
    if current not in allowed_from:
        if current in TERMINAL_STATUSES:
            detail = f"La factura está en estado terminal '{current.value}' y no admite cambios"
        else:
            detail = f"No se puede aplicar '{action.value}' a una factura en estado '{current.value}'"
        raise InvalidTransition(detail, current=current, target=target)

    now = now or utcnow()
    patch: Dict[str, Any] = {"status": target, "updated_at": now}
    if action == InvoiceAction.SEND:
        patch["sent_at"] = now
    elif action == InvoiceAction.MARK_PAID:
        patch["paid_at"] = now
    return patch


def send(invoice: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
    return transition(invoice, InvoiceAction.SEND, now)


def mark_paid(invoice: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
    return transition(invoice, InvoiceAction.MARK_PAID, now)


def cancel(invoice: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
    return transition(invoice, InvoiceAction.CANCEL, now)
