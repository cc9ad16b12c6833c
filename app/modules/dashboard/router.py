from fastapi import APIRouter, Depends, Query
from typing import Optional
from datetime import date

from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.dashboard.schemas import CalendarResponse, DashboardStats
from app.modules.dashboard.service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Resumen financiero del usuario

    - Ingresos (facturas pagadas), pendiente (enviadas) y vencido
    - Gastos totales, del mes y facturables
    - Utilidad neta y últimas 5 facturas
    """
    return DashboardService(storage).get_stats(auth_context.user_id)


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    storage: storage_dependency,
    on_date: Optional[date] = Query(None, alias="date", description="Solo eventos de este día"),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Vencimientos y recordatorios de las facturas"""
    return DashboardService(storage).get_calendar(auth_context.user_id, on_date)
