from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional
from datetime import date
import enum

from app.modules.invoices.schemas import InvoiceOut
from app.modules.reminders.models import ReminderKind


class DashboardStats(BaseModel):
    total_invoices: int = 0
    total_clients: int = 0
    total_revenue: Decimal = Decimal("0")
    monthly_revenue: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    overdue_count: int = 0
    overdue_amount: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    monthly_expenses: Decimal = Decimal("0")
    billable_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    recent_invoices: List[InvoiceOut] = Field(default_factory=list)


class CalendarEventType(str, enum.Enum):
    PAYMENT_DUE = "payment_due"
    REMINDER = "reminder"


class CalendarEvent(BaseModel):
    id: str
    title: str
    description: str
    event_type: CalendarEventType
    event_date: date
    related_id: str
    related_type: str = "invoice"
    reminder_type: Optional[ReminderKind] = None
    is_completed: bool = False


class CalendarResponse(BaseModel):
    events: List[CalendarEvent]
    total: int
    on_date: Optional[date] = None
