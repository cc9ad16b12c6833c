"""
Estadísticas y calendario del panel principal

El estado vencido se obtiene siempre de lifecycle.is_overdue y los
recordatorios del resolver; aquí no se comparan fechas de vencimiento.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
import logging

from app.common.storage import Storage
from app.common.validators import in_month
from app.modules.invoices import calculator, lifecycle
from app.modules.invoices.models import InvoiceStatus
from app.modules.invoices.service import InvoiceService
from app.modules.reminders.service import ReminderSettingsService
from app.modules.dashboard.schemas import CalendarEvent, CalendarEventType, CalendarResponse, DashboardStats

logger = logging.getLogger(__name__)

RECENT_INVOICES = 5

REMINDER_TITLES = {
    "before_due": "Send Reminder",
    "after_due": "Overdue Reminder",
    "thank_you": "Send Thank You",
}


def _sum(values) -> Decimal:
    return sum((Decimal(v) for v in values), Decimal("0"))


class DashboardService:
    """Servicio de estadísticas del usuario"""

    def __init__(self, storage: Storage, today: Optional[date] = None):
        self.storage = storage
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def get_stats(self, user_id: str) -> DashboardStats:
        invoices = self.storage.invoices.list(filters={"user_id": user_id}, order_by="-created_at")
        clients = self.storage.clients.list(filters={"user_id": user_id})
        expenses = self.storage.expenses.list(filters={"user_id": user_id})
        current_month = (self.today.year, self.today.month)

        def with_status(status):
            return [i for i in invoices if lifecycle.normalize_status(i["status"]) == status]

        paid = with_status(InvoiceStatus.PAID)
        sent = with_status(InvoiceStatus.SENT)
        overdue = [i for i in sent if lifecycle.is_overdue(i["status"], i.get("due_date"), self.today)]

        total_revenue = _sum(i["total_amount"] for i in paid)
        total_expenses = _sum(e["amount"] for e in expenses)

        invoice_service = InvoiceService(self.storage, today=self.today)
        clients_by_id = {c["id"]: c for c in clients}

        return DashboardStats(
            total_invoices=len(invoices),
            total_clients=len(clients),
            total_revenue=total_revenue,
            monthly_revenue=_sum(i["total_amount"] for i in paid if in_month(i["issue_date"], current_month)),
            pending_amount=_sum(i["total_amount"] for i in sent),
            overdue_count=len(overdue),
            overdue_amount=_sum(i["total_amount"] for i in overdue),
            total_expenses=total_expenses,
            monthly_expenses=_sum(e["amount"] for e in expenses if in_month(e["expense_date"], current_month)),
            billable_expenses=_sum(e["amount"] for e in expenses if e["is_billable"]),
            net_profit=total_revenue - total_expenses,
            recent_invoices=[invoice_service.to_out(i, clients_by_id) for i in invoices[:RECENT_INVOICES]],
        )

    def get_calendar(self, user_id: str, on_date: Optional[date] = None) -> CalendarResponse:
        """
        Eventos del calendario: vencimientos de facturas enviadas y recordatorios

        Args:
            user_id: Usuario autenticado
            on_date: Solo los eventos de ese día
        """
        invoices = self.storage.invoices.list(filters={"user_id": user_id})
        clients = {c["id"]: c for c in self.storage.clients.list(filters={"user_id": user_id})}
        by_id = {i["id"]: i for i in invoices}
        events: List[CalendarEvent] = []

        for invoice in invoices:
            if lifecycle.normalize_status(invoice["status"]) != InvoiceStatus.SENT or not invoice.get("due_date"):
                continue
            client_name = clients.get(invoice["client_id"], {}).get("name") or "Unknown Client"
            events.append(CalendarEvent(
                id=f"due_{invoice['id']}",
                title=f"Payment Due: {invoice['invoice_number']}",
                description=f"{client_name} - {calculator.round_money(invoice['total_amount'])} {invoice['currency']}",
                event_type=CalendarEventType.PAYMENT_DUE,
                event_date=invoice["due_date"],
                related_id=invoice["id"],
            ))

        for reminder in ReminderSettingsService(self.storage).upcoming_events(user_id):
            invoice = by_id.get(reminder.invoice_id, {})
            client_name = clients.get(invoice.get("client_id"), {}).get("name") or "Unknown Client"
            events.append(CalendarEvent(
                id=f"{reminder.reminder_type.value}_{reminder.invoice_id}",
                title=f"{REMINDER_TITLES[reminder.reminder_type.value]}: {reminder.invoice_number}",
                description=f"Reminder for {client_name}",
                event_type=CalendarEventType.REMINDER,
                event_date=reminder.scheduled_for,
                related_id=reminder.invoice_id,
                reminder_type=reminder.reminder_type,
                is_completed=reminder.scheduled_for < self.today,
            ))

        if on_date:
            events = [e for e in events if e.event_date == on_date]
        events.sort(key=lambda e: e.event_date)
        return CalendarResponse(events=events, total=len(events), on_date=on_date)
