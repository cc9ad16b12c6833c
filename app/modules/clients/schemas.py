from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.common.validators import validate_phone


class ClientBase(BaseModel):
    company: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    tax_id: Optional[str] = Field(None, max_length=50, description="EIN, VAT, NIT...")

    @field_validator('phone')
    @classmethod
    def check_phone(cls, v):
        if v and not validate_phone(v):
            raise ValueError('Formato de teléfono inválido')
        return v


class ClientCreate(ClientBase):
    # name y email se validan en el servicio para devolver ValidationError
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None


class ClientUpdate(ClientBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None


class ClientOut(BaseModel):
    id: str
    user_id: str
    name: str
    email: str
    company: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientStats(BaseModel):
    total_clients: int = 0
    with_company: int = 0
    active_this_month: int = 0


class ClientList(BaseModel):
    clients: List[ClientOut]
    total: int
    stats: ClientStats
