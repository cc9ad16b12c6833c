"""
Router para el módulo de Facturas

Endpoints REST para:
- CRUD de facturas en borrador
- Cambios de estado (enviar, marcar pagada, cancelar)
- Próximo número, vista previa de totales y recordatorios calculados

Todos los endpoints requieren autenticación y están filtrados por usuario.
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from datetime import date

from app.core.config import settings
from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.invoices.lifecycle import DisplayStatus
from app.modules.invoices.schemas import (
    InvoiceActionResult, InvoiceCancel, InvoiceCreate, InvoiceDetail, InvoiceFilters,
    InvoiceList, InvoiceUpdate, NextInvoiceNumber, TotalsPreview, TotalsPreviewRequest
)
from app.modules.invoices.service import InvoiceService
from app.modules.reminders.schemas import ReminderEvent

router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"],
    responses={404: {"description": "Not found"}}
)


@router.post("/", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    storage: storage_dependency,
    send: bool = Query(False, description="Enviar la factura al crearla"),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Crear una factura (estado inicial: draft)

    - **client_id**: Cliente (requerido)
    - **invoice_number**: Si se omite se genera INV-AAAA-NNN
    - **items**: Al menos un ítem, todos con descripción
    - **tax_rate**: Porcentaje entre 0 y 100
    - **payment_gateway**: Debe ser una pasarela activa
    """
    return InvoiceService(storage).create_invoice(invoice_data, auth_context.user_id, send=send)


@router.get("/", response_model=InvoiceList)
async def list_invoices(
    storage: storage_dependency,
    status_filter: Optional[DisplayStatus] = Query(None, alias="status", description="draft, sent, paid, overdue, cancelled"),
    client_id: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, description="Emitidas desde"),
    date_to: Optional[date] = Query(None, description="Emitidas hasta"),
    search: Optional[str] = Query(None, description="Número, título o nombre del cliente"),
    limit: int = Query(settings.MAX_PAGE_SIZE, ge=1, le=500),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Listar facturas con filtros

    "overdue" filtra las facturas enviadas con vencimiento pasado.
    """
    filters = InvoiceFilters(
        status=status_filter,
        client_id=client_id,
        date_from=date_from,
        date_to=date_to,
        search=search
    )
    return InvoiceService(storage).list_invoices(auth_context.user_id, filters, limit)


@router.get("/next-number", response_model=NextInvoiceNumber)
async def get_next_invoice_number(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Próximo número de factura sugerido"""
    return InvoiceService(storage).next_invoice_number(auth_context.user_id)


@router.post("/preview-totals", response_model=TotalsPreview)
async def preview_totals(
    data: TotalsPreviewRequest,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Calcular totales de un borrador sin guardarlo

    Cantidades no numéricas valen 1 y precios no numéricos valen 0.
    """
    return InvoiceService.preview_totals(data)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(
    invoice_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return InvoiceService(storage).get_invoice(invoice_id, auth_context.user_id)


@router.patch("/{invoice_id}", response_model=InvoiceDetail)
async def update_invoice(
    invoice_id: str,
    invoice_data: InvoiceUpdate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Actualizar una factura en borrador

    Si se envían **items** reemplazan a los existentes y se recalculan los totales.
    """
    return InvoiceService(storage).update_invoice(invoice_id, invoice_data, auth_context.user_id)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Eliminar la factura y sus ítems"""
    InvoiceService(storage).delete_invoice(invoice_id, auth_context.user_id)


@router.post("/{invoice_id}/send", response_model=InvoiceActionResult)
async def send_invoice(
    invoice_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Enviar factura (draft -> sent)"""
    return InvoiceService(storage).send_invoice(invoice_id, auth_context.user_id)


@router.post("/{invoice_id}/pay", response_model=InvoiceActionResult)
async def mark_invoice_paid(
    invoice_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Marcar como pagada (sent -> paid, incluye vencidas)"""
    return InvoiceService(storage).mark_paid(invoice_id, auth_context.user_id)


@router.post("/{invoice_id}/cancel", response_model=InvoiceActionResult)
async def cancel_invoice(
    invoice_id: str,
    storage: storage_dependency,
    cancel_data: Optional[InvoiceCancel] = None,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Cancelar factura (draft o sent -> cancelled)"""
    reason = cancel_data.reason if cancel_data else None
    return InvoiceService(storage).cancel_invoice(invoice_id, auth_context.user_id, reason)


@router.get("/{invoice_id}/reminders", response_model=List[ReminderEvent])
async def get_invoice_reminders(
    invoice_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Fechas en que se enviarían los recordatorios de esta factura"""
    return InvoiceService(storage).get_invoice_reminders(invoice_id, auth_context.user_id)
