from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Any, List, Optional
from datetime import date, datetime

from app.common.validators import validate_currency_code
from app.modules.invoices.models import InvoiceStatus
from app.modules.invoices.lifecycle import DisplayStatus


# Line Item Schemas
class LineItemDraft(BaseModel):
    """Ítem en edición dentro del ledger"""
    description: str = ""
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class InvoiceItemIn(BaseModel):
    description: str = ""
    # Se aceptan valores crudos del formulario; el ledger los normaliza
    quantity: Any = 1
    unit_price: Any = 0


class InvoiceItemOut(BaseModel):
    id: str
    invoice_id: str
    position: int
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal

    class Config:
        from_attributes = True


# Totals
class InvoiceTotals(BaseModel):
    """Totales calculados de la factura (precisión completa)"""
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal


class TotalsPreviewRequest(BaseModel):
    items: List[InvoiceItemIn] = Field(default_factory=list)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)


class TotalsPreview(InvoiceTotals):
    items: List[LineItemDraft]
    subtotal_display: Decimal
    tax_amount_display: Decimal
    total_amount_display: Decimal


# Invoice Schemas
class InvoiceBase(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    due_date: Optional[date] = None
    currency: str = Field("USD", min_length=3, max_length=3)
    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100, description="Porcentaje entre 0 y 100")
    payment_gateway: Optional[str] = None
    payment_link: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    terms: Optional[str] = None

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if not validate_currency_code(v):
            raise ValueError('Código de moneda inválido (ISO 4217, ej. USD)')
        return v.upper()


class InvoiceCreate(InvoiceBase):
    # client_id e invoice_number se validan en el servicio (ValidationError)
    client_id: Optional[str] = None
    invoice_number: Optional[str] = Field(None, max_length=50, description="Si se omite se genera INV-AAAA-NNN")
    issue_date: date = Field(default_factory=date.today)
    items: List[InvoiceItemIn] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_due_date(self):
        if self.due_date and self.issue_date and self.due_date < self.issue_date:
            raise ValueError('La fecha de vencimiento no puede ser anterior a la fecha de emisión')
        return self


class InvoiceUpdate(BaseModel):
    client_id: Optional[str] = None
    invoice_number: Optional[str] = Field(None, max_length=50)
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    payment_gateway: Optional[str] = None
    payment_link: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = None
    terms: Optional[str] = None
    items: Optional[List[InvoiceItemIn]] = None

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if v is not None and not validate_currency_code(v):
            raise ValueError('Código de moneda inválido (ISO 4217, ej. USD)')
        return v.upper() if v else v


class InvoiceOut(BaseModel):
    id: str
    user_id: str
    client_id: str
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    invoice_number: str
    title: Optional[str] = None
    description: Optional[str] = None
    status: InvoiceStatus
    display_status: DisplayStatus
    is_overdue: bool = False
    days_overdue: int = 0
    currency: str
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    subtotal_display: Decimal
    tax_amount_display: Decimal
    total_amount_display: Decimal
    issue_date: date
    due_date: Optional[date] = None
    sent_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    payment_gateway: Optional[str] = None
    payment_link: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceDetail(InvoiceOut):
    """Factura con sus ítems"""
    items: List[InvoiceItemOut] = Field(default_factory=list)


# Search y Filter Schemas
class InvoiceFilters(BaseModel):
    """Filtros para búsqueda de facturas"""
    status: Optional[DisplayStatus] = None
    client_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = Field(None, description="Buscar en número, título o nombre del cliente")


class InvoiceStatusCounts(BaseModel):
    all: int = 0
    draft: int = 0
    sent: int = 0
    paid: int = 0
    overdue: int = 0
    cancelled: int = 0


class InvoiceList(BaseModel):
    invoices: List[InvoiceOut]
    total: int
    limit: Optional[int] = None
    applied_filters: Optional[InvoiceFilters] = None
    counts_by_status: InvoiceStatusCounts


class NextInvoiceNumber(BaseModel):
    next_number: str
    prefix: str
    current_sequence: int


class InvoiceActionResult(BaseModel):
    invoice: InvoiceDetail
    previous_status: InvoiceStatus
    message: str


class InvoiceCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500, description="Se agrega a las notas de la factura")
