from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from datetime import date

from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.reminders.models import ReminderKind
from app.modules.reminders.schemas import ReminderEvent, ReminderSettingIn, ReminderSettingOut
from app.modules.reminders.service import ReminderSettingsService

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("/settings", response_model=List[ReminderSettingOut])
async def list_settings(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Configuración de recordatorios del usuario

    Los tipos sin configurar se devuelven con su valor por defecto e inactivos
    (before_due: 3 días, after_due: 1 día, thank_you: 0 días).
    """
    return ReminderSettingsService(storage).list_settings(auth_context.user_id)


@router.put("/settings/{reminder_type}", response_model=ReminderSettingOut)
async def save_setting(
    reminder_type: ReminderKind,
    data: ReminderSettingIn,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Guardar la configuración de un tipo de recordatorio (crea o actualiza)

    - **days_offset**: días (>= 0) respecto al vencimiento o al pago
    - **email_template_id**: plantilla propia opcional
    """
    return ReminderSettingsService(storage).save_setting(reminder_type, data, auth_context.user_id)


@router.get("/upcoming", response_model=List[ReminderEvent])
async def upcoming_reminders(
    storage: storage_dependency,
    date_from: Optional[date] = Query(None, description="Desde (inclusive)"),
    date_to: Optional[date] = Query(None, description="Hasta (inclusive)"),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Recordatorios calculados para las facturas del usuario"""
    return ReminderSettingsService(storage).upcoming_events(auth_context.user_id, date_from, date_to)
