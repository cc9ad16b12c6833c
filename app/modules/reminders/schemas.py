from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from app.modules.reminders.models import ReminderKind


class ReminderSettingIn(BaseModel):
    days_offset: int = Field(..., ge=0, description="Días antes/después de la fecha de referencia")
    is_active: bool = True
    email_template_id: Optional[str] = None


class ReminderSettingOut(BaseModel):
    id: Optional[str] = None
    user_id: str
    reminder_type: ReminderKind
    days_offset: int
    is_active: bool
    email_template_id: Optional[str] = None
    configured: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReminderEvent(BaseModel):
    """Momento en que correspondería enviar un recordatorio"""
    invoice_id: str
    invoice_number: Optional[str] = None
    client_id: Optional[str] = None
    reminder_type: ReminderKind
    scheduled_for: date
    days_offset: int
    email_template_id: Optional[str] = None
