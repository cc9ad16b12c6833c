from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from app.modules.payment_gateways.models import GatewayType


class GatewayField(BaseModel):
    key: str
    label: str
    secret: bool = False
    options: Optional[List[str]] = None


class GatewayDefinition(BaseModel):
    gateway_type: GatewayType
    name: str
    description: str
    fields: List[GatewayField]


class PaymentGatewayIn(BaseModel):
    config: Dict[str, str] = Field(default_factory=dict)
    is_active: bool = False


class PaymentGatewayOut(BaseModel):
    id: Optional[str] = None
    user_id: str
    gateway_type: GatewayType
    name: str
    is_active: bool = False
    configured: bool = False
    config: Dict[str, str] = Field(default_factory=dict, description="Valores secretos enmascarados")
    missing_fields: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
