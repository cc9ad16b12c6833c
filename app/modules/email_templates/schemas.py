from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.modules.email_templates.models import TemplateType


class EmailTemplateIn(BaseModel):
    subject: str = Field(..., min_length=1, max_length=300)
    body: str = Field(..., min_length=1)


class EmailTemplateOut(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    template_type: TemplateType
    subject: str
    body: str
    is_default: bool = False
    customized: bool = False
    variables: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateVariables(BaseModel):
    template_type: TemplateType
    variables: List[str]


class TemplatePreviewRequest(BaseModel):
    """Sin subject/body se usa la plantilla vigente del usuario"""
    subject: Optional[str] = None
    body: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


class RenderedEmail(BaseModel):
    template_type: TemplateType
    subject: str
    body: str
