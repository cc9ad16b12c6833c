"""
Cálculo de fechas de recordatorio

Dada una factura y las configuraciones de recordatorio de su dueño, genera
los eventos (tipo + fecha) en que correspondería avisar al cliente. No hace
I/O ni envía nada: el envío lo hace app.modules.reminders.tasks.
"""
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Iterator, Optional

from app.modules.invoices.lifecycle import normalize_status
from app.modules.invoices.models import InvoiceStatus
from app.modules.reminders.models import ReminderKind
from app.modules.reminders.schemas import ReminderEvent

DEFAULT_OFFSETS = {
    ReminderKind.BEFORE_DUE: 3,
    ReminderKind.AFTER_DUE: 1,
    ReminderKind.THANK_YOU: 0,
}


def _get(record: Any, name: str, default=None):
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_reminders(invoice: Any, settings: Iterable[Any]) -> Iterator[ReminderEvent]:
    """
    Generar los eventos de recordatorio de una factura

    Args:
        invoice: Factura (registro o esquema) con status, issue_date, due_date y paid_at
        settings: Configuraciones de recordatorio del dueño de la factura

    Yields:
        ReminderEvent por cada configuración activa que aplica
    """
    status = normalize_status(_get(invoice, "status"))
    due_date = _as_date(_get(invoice, "due_date"))
    issue_date = _as_date(_get(invoice, "issue_date"))
    # Registros sin paid_at: la última modificación es el pago
    paid_on = _as_date(_get(invoice, "paid_at") or _get(invoice, "updated_at"))

    for setting in settings:
        if not _get(setting, "is_active", False):
            continue
        kind = ReminderKind(_get(setting, "reminder_type"))
        offset = _get(setting, "days_offset")
        if offset is None:
            offset = DEFAULT_OFFSETS[kind]

        if kind == ReminderKind.BEFORE_DUE:
            if status != InvoiceStatus.SENT or due_date is None:
                continue
            fires_on = due_date - timedelta(days=offset)
            if issue_date is not None and fires_on < issue_date:
                continue
        elif kind == ReminderKind.AFTER_DUE:
            if status != InvoiceStatus.SENT or due_date is None:
                continue
            fires_on = due_date + timedelta(days=offset)
        else:
            if status != InvoiceStatus.PAID or paid_on is None:
                continue
            fires_on = paid_on + timedelta(days=offset)

        yield ReminderEvent(
            invoice_id=_get(invoice, "id"),
            invoice_number=_get(invoice, "invoice_number"),
            client_id=_get(invoice, "client_id"),
            reminder_type=kind,
            scheduled_for=fires_on,
            days_offset=offset,
            email_template_id=_get(setting, "email_template_id"),
        )


def due_reminders(invoices: Iterable[Any], settings: Iterable[Any], on_date: date) -> Iterator[ReminderEvent]:
    """Eventos de varias facturas que caen en on_date"""
    settings = list(settings)
    for invoice in invoices:
        for event in resolve_reminders(invoice, settings):
            if event.scheduled_for == on_date:
                yield event
