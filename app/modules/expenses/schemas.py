from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Dict, List, Optional
from datetime import date, datetime

from app.common.validators import validate_currency_code, validate_hex_color


# Expense Schemas
class ExpenseBase(BaseModel):
    currency: str = Field("USD", min_length=3, max_length=3)
    expense_date: date = Field(default_factory=date.today)
    receipt_url: Optional[str] = Field(None, max_length=500)
    is_billable: bool = False
    client_id: Optional[str] = None
    project_name: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if not validate_currency_code(v):
            raise ValueError('Código de moneda inválido (ISO 4217, ej. USD)')
        return v.upper()


class ExpenseCreate(ExpenseBase):
    # category, description y amount se validan en el servicio
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    amount: Optional[Decimal] = None


class ExpenseUpdate(BaseModel):
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    amount: Optional[Decimal] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    expense_date: Optional[date] = None
    receipt_url: Optional[str] = Field(None, max_length=500)
    is_billable: Optional[bool] = None
    client_id: Optional[str] = None
    project_name: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if v is not None and not validate_currency_code(v):
            raise ValueError('Código de moneda inválido (ISO 4217, ej. USD)')
        return v.upper() if v else v


class ExpenseOut(BaseModel):
    id: str
    user_id: str
    category: str
    category_color: Optional[str] = None
    description: str
    amount: Decimal
    currency: str
    expense_date: date
    receipt_url: Optional[str] = None
    is_billable: bool
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseFilters(BaseModel):
    category: Optional[str] = None
    month: Optional[str] = Field(None, description="AAAA-MM")
    search: Optional[str] = Field(None, description="Buscar en descripción o categoría")
    is_billable: Optional[bool] = None


class ExpenseSummary(BaseModel):
    total_expenses: Decimal = Decimal("0")
    billable_expenses: Decimal = Decimal("0")
    this_month_expenses: Decimal = Decimal("0")
    count: int = 0
    by_category: Dict[str, Decimal] = Field(default_factory=dict)


class ExpenseList(BaseModel):
    expenses: List[ExpenseOut]
    total: int
    summary: ExpenseSummary


# Category Schemas
class ExpenseCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#64748B")

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        if not validate_hex_color(v):
            raise ValueError('El color debe tener formato #RRGGBB')
        return v.upper()


class ExpenseCategoryOut(BaseModel):
    id: str
    user_id: str
    name: str
    color: str
    is_default: bool

    class Config:
        from_attributes = True
