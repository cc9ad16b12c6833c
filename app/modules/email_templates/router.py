from fastapi import APIRouter, Depends
from typing import List

from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.email_templates.defaults import TEMPLATE_VARIABLES
from app.modules.email_templates.models import TemplateType
from app.modules.email_templates.schemas import (
    EmailTemplateIn, EmailTemplateOut, RenderedEmail, TemplatePreviewRequest, TemplateVariables
)
from app.modules.email_templates.service import EmailTemplateService

router = APIRouter(prefix="/email-templates", tags=["Email Templates"])


@router.get("/", response_model=List[EmailTemplateOut])
async def list_templates(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Plantillas vigentes del usuario, una por tipo (invoice, reminder, thank_you, upcoming)
    """
    return EmailTemplateService(storage).list_templates(auth_context.user_id)


@router.get("/variables", response_model=List[TemplateVariables])
async def list_variables():
    """Variables disponibles en cada tipo de plantilla"""
    return [
        TemplateVariables(template_type=template_type, variables=variables)
        for template_type, variables in TEMPLATE_VARIABLES.items()
    ]


@router.get("/{template_type}", response_model=EmailTemplateOut)
async def get_template(
    template_type: TemplateType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return EmailTemplateService(storage).get_effective_template(auth_context.user_id, template_type)


@router.put("/{template_type}", response_model=EmailTemplateOut)
async def save_template(
    template_type: TemplateType,
    data: EmailTemplateIn,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Personalizar la plantilla de un tipo

    - **subject** / **body**: solo pueden usar las variables del tipo, con formato {variable}
    """
    return EmailTemplateService(storage).save_template(template_type, data, auth_context.user_id)


@router.delete("/{template_type}", response_model=EmailTemplateOut)
async def reset_template(
    template_type: TemplateType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Restaurar la plantilla por defecto"""
    return EmailTemplateService(storage).reset_template(template_type, auth_context.user_id)


@router.post("/{template_type}/preview", response_model=RenderedEmail)
async def preview_template(
    template_type: TemplateType,
    data: TemplatePreviewRequest,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Renderizar la plantilla con datos de ejemplo"""
    return EmailTemplateService(storage).preview(template_type, data, auth_context.user_id)
