"""
Servicio de configuración de recordatorios

Una configuración por (usuario, tipo). Guardar es idempotente: si ya existe
se actualiza en lugar de crear otra.
"""
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from app.core.config import settings
from app.common.exceptions import NotFound
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.modules.email_templates.models import TemplateType
from app.modules.email_templates.service import EmailTemplateService
from app.modules.invoices.calculator import round_money
from app.modules.invoices.lifecycle import days_overdue, days_until_due, normalize_status
from app.modules.invoices.models import InvoiceStatus
from app.modules.reminders.models import ReminderKind
from app.modules.reminders.resolver import DEFAULT_OFFSETS, due_reminders, resolve_reminders
from app.modules.reminders.schemas import ReminderEvent, ReminderSettingIn, ReminderSettingOut

logger = logging.getLogger(__name__)

# Solo estas facturas pueden generar recordatorios
REMINDABLE_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.PAID)


class ReminderSettingsService:
    """Servicio para configuraciones y eventos de recordatorio"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _find(self, user_id: str, kind: ReminderKind) -> Optional[dict]:
        return self.storage.reminder_settings.first({"user_id": user_id, "reminder_type": kind})

    def list_settings(self, user_id: str) -> List[ReminderSettingOut]:
        """Configuraciones guardadas completadas con los valores por defecto (inactivos)"""
        result = []
        for kind in ReminderKind:
            record = self._find(user_id, kind)
            if record:
                result.append(ReminderSettingOut(**record))
            else:
                result.append(ReminderSettingOut(
                    user_id=user_id,
                    reminder_type=kind,
                    days_offset=DEFAULT_OFFSETS[kind],
                    is_active=False,
                    configured=False,
                ))
        return result

    def active_settings(self, user_id: str) -> List[dict]:
        return self.storage.reminder_settings.list(filters={"user_id": user_id, "is_active": True})

    def save_setting(self, kind: ReminderKind, data: ReminderSettingIn, user_id: str) -> ReminderSettingOut:
        """Crear o actualizar la configuración del tipo indicado"""
        if data.email_template_id:
            template = self.storage.email_templates.first({"id": data.email_template_id, "user_id": user_id})
            if template is None:
                raise NotFound("email_templates", data.email_template_id)

        now = utcnow()
        patch = {
            "days_offset": data.days_offset,
            "is_active": data.is_active,
            "email_template_id": data.email_template_id,
            "updated_at": now,
        }
        existing = self._find(user_id, kind)
        if existing:
            record = self.storage.reminder_settings.update(existing["id"], patch)
        else:
            record = self.storage.reminder_settings.create({
                **patch,
                "user_id": user_id,
                "reminder_type": kind,
                "created_at": now,
            })
        logger.info(
            f"Reminder '{kind.value}' saved for user {user_id} "
            f"(offset={data.days_offset}, active={data.is_active})"
        )
        return ReminderSettingOut(**record)

    def _remindable_invoices(self, user_id: str) -> List[dict]:
        invoices = self.storage.invoices.list(filters={"user_id": user_id}, order_by="due_date")
        return [i for i in invoices if normalize_status(i["status"]) in REMINDABLE_STATUSES]

    def events_for_invoice(self, invoice: dict) -> List[ReminderEvent]:
        return list(resolve_reminders(invoice, self.active_settings(invoice["user_id"])))

    def upcoming_events(
        self,
        user_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[ReminderEvent]:
        """Eventos de todas las facturas del usuario, ordenados por fecha"""
        active = self.active_settings(user_id)
        events = [
            event
            for invoice in self._remindable_invoices(user_id)
            for event in resolve_reminders(invoice, active)
            if (date_from is None or event.scheduled_for >= date_from)
            and (date_to is None or event.scheduled_for <= date_to)
        ]
        return sorted(events, key=lambda e: e.scheduled_for)

    def due_on(self, user_id: str, on_date: date) -> List[ReminderEvent]:
        return list(due_reminders(self._remindable_invoices(user_id), self.active_settings(user_id), on_date))


class ReminderDispatchService:
    """
    Envío diario de recordatorios

    Resuelve los eventos del día, renderiza la plantilla que corresponde y
    delega el envío en `enqueue` (normalmente send_template_email_task.delay).
    """

    TEMPLATE_FOR_KIND = {
        ReminderKind.BEFORE_DUE: TemplateType.UPCOMING,
        ReminderKind.AFTER_DUE: TemplateType.REMINDER,
        ReminderKind.THANK_YOU: TemplateType.THANK_YOU,
    }

    def __init__(self, storage: Storage, enqueue: Callable[..., Any]):
        self.storage = storage
        self.enqueue = enqueue
        self.settings_service = ReminderSettingsService(storage)
        self.template_service = EmailTemplateService(storage)

    def _users_with_reminders(self) -> List[str]:
        rows = self.storage.reminder_settings.list(filters={"is_active": True})
        return sorted({row["user_id"] for row in rows})

    def dispatch(self, on_date: date) -> Dict[str, int]:
        """Encolar los recordatorios que caen en on_date para todos los usuarios"""
        sent = failed = 0
        for user_id in self._users_with_reminders():
            # Un usuario que falla no corta el envío de los demás
            try:
                events = self.settings_service.due_on(user_id, on_date)
            except Exception as e:
                failed += 1
                logger.error(f"Could not resolve reminders of user {user_id}: {e}")
                continue
            for event in events:
                try:
                    self._dispatch_event(user_id, event, on_date)
                    sent += 1
                except Exception as e:
                    failed += 1
                    logger.error(f"Reminder '{event.reminder_type.value}' for invoice {event.invoice_id} failed: {e}")
        logger.info(f"Reminders for {on_date.isoformat()}: {sent} queued, {failed} failed")
        return {"queued": sent, "failed": failed}

    def _dispatch_event(self, user_id: str, event: ReminderEvent, on_date: date):
        invoice = self.storage.invoices.get(event.invoice_id)
        client = self.storage.clients.get(invoice["client_id"])
        template_type = self.TEMPLATE_FOR_KIND[event.reminder_type]
        email = self.template_service.render_template(
            user_id,
            template_type,
            build_email_context(invoice, client, on_date),
            template_id=event.email_template_id,
        )
        self.enqueue(
            to_emails=[client["email"]],
            subject=email.subject,
            template_name="notification_email.html",
            context={
                "subject": email.subject,
                "paragraphs": [p for p in email.body.split("\n\n") if p.strip()],
                "company_name": settings.COMPANY_NAME,
                "payment_link": invoice.get("payment_link"),
            },
        )
        logger.debug(f"Queued '{event.reminder_type.value}' reminder for invoice {event.invoice_id}")


def build_email_context(invoice: dict, client: dict, today: date) -> Dict[str, Any]:
    """Variables de plantilla para una factura"""
    def fmt_date(value):
        if value is None:
            return ""
        if isinstance(value, datetime):
            value = value.date()
        return value.strftime("%B %d, %Y")

    return {
        "client_name": client.get("name"),
        "invoice_number": invoice.get("invoice_number"),
        "total_amount": f"{round_money(invoice.get('total_amount') or 0):,.2f}",
        "currency": invoice.get("currency"),
        "due_date": fmt_date(invoice.get("due_date")),
        "invoice_date": fmt_date(invoice.get("issue_date")),
        "days_overdue": days_overdue(invoice.get("due_date"), today),
        "days_until_due": days_until_due(invoice.get("due_date"), today),
        "payment_link": invoice.get("payment_link") or "",
        "payment_date": fmt_date(invoice.get("paid_at")),
        "payment_method": invoice.get("payment_gateway") or "",
        "company_name": settings.COMPANY_NAME,
    }
