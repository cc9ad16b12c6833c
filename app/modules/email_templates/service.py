"""
Servicio de plantillas de correo

Cada usuario puede personalizar una plantilla por tipo; si no lo hace se usa
la plantilla por defecto. Los marcadores tienen la forma {variable}.
"""
import re
from typing import Any, Dict, List, Optional
import logging

from app.common.exceptions import ValidationError
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.modules.email_templates.defaults import DEFAULT_TEMPLATES, SAMPLE_CONTEXT, TEMPLATE_VARIABLES
from app.modules.email_templates.models import TemplateType
from app.modules.email_templates.schemas import (
    EmailTemplateIn, EmailTemplateOut, RenderedEmail, TemplatePreviewRequest
)

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{(\w+)\}")


def render(text: str, context: Dict[str, Any]) -> str:
    """Sustituir {variable}; los marcadores sin valor quedan intactos"""
    def replace(match):
        value = context.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return PLACEHOLDER.sub(replace, text or "")


def placeholders(text: str) -> List[str]:
    return PLACEHOLDER.findall(text or "")


class EmailTemplateService:
    """Servicio para gestión de plantillas de correo"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _find(self, user_id: str, template_type: TemplateType) -> Optional[dict]:
        return self.storage.email_templates.first({"user_id": user_id, "template_type": template_type})

    def _to_out(self, record: dict) -> EmailTemplateOut:
        template_type = TemplateType(record["template_type"])
        return EmailTemplateOut(
            **{k: v for k, v in record.items() if k in EmailTemplateOut.model_fields and k != "template_type"},
            template_type=template_type,
            customized=True,
            variables=TEMPLATE_VARIABLES[template_type],
        )

    def _default_out(self, template_type: TemplateType, user_id: str) -> EmailTemplateOut:
        default = DEFAULT_TEMPLATES[template_type]
        return EmailTemplateOut(
            user_id=user_id,
            template_type=template_type,
            subject=default["subject"],
            body=default["body"],
            is_default=True,
            variables=TEMPLATE_VARIABLES[template_type],
        )

    def list_templates(self, user_id: str) -> List[EmailTemplateOut]:
        """Una plantilla por tipo: la guardada o la de por defecto"""
        return [self.get_effective_template(user_id, template_type) for template_type in TemplateType]

    def get_effective_template(self, user_id: str, template_type: TemplateType) -> EmailTemplateOut:
        record = self._find(user_id, template_type)
        if record is None:
            return self._default_out(template_type, user_id)
        return self._to_out(record)

    def get_template_by_id(self, template_id: str, user_id: str) -> Optional[EmailTemplateOut]:
        record = self.storage.email_templates.first({"id": template_id, "user_id": user_id})
        return self._to_out(record) if record else None

    def validate_placeholders(self, template_type: TemplateType, *texts: str):
        allowed = set(TEMPLATE_VARIABLES[template_type])
        unknown = sorted({name for text in texts for name in placeholders(text)} - allowed)
        if unknown:
            raise ValidationError(
                f"Variables no permitidas para '{template_type.value}': {', '.join(unknown)}"
            )

    def save_template(self, template_type: TemplateType, data: EmailTemplateIn, user_id: str) -> EmailTemplateOut:
        """Crear o actualizar la plantilla del usuario para el tipo"""
        self.validate_placeholders(template_type, data.subject, data.body)

        now = utcnow()
        existing = self._find(user_id, template_type)
        if existing:
            record = self.storage.email_templates.update(existing["id"], {
                "subject": data.subject,
                "body": data.body,
                "is_default": False,
                "updated_at": now,
            })
        else:
            record = self.storage.email_templates.create({
                "user_id": user_id,
                "template_type": template_type,
                "subject": data.subject,
                "body": data.body,
                "is_default": False,
                "created_at": now,
                "updated_at": now,
            })
        logger.info(f"Email template '{template_type.value}' saved for user {user_id}")
        return self._to_out(record)

    def reset_template(self, template_type: TemplateType, user_id: str) -> EmailTemplateOut:
        """Eliminar la personalización y volver a la plantilla por defecto"""
        existing = self._find(user_id, template_type)
        if existing:
            self.storage.email_templates.delete(existing["id"])
            logger.info(f"Email template '{template_type.value}' reset for user {user_id}")
        return self._default_out(template_type, user_id)

    def render_template(
        self,
        user_id: str,
        template_type: TemplateType,
        context: Dict[str, Any],
        template_id: Optional[str] = None
    ) -> RenderedEmail:
        """Renderizar la plantilla indicada o, si no existe, la vigente del tipo"""
        template = self.get_template_by_id(template_id, user_id) if template_id else None
        if template is None or template.template_type != template_type:
            template = self.get_effective_template(user_id, template_type)
        return RenderedEmail(
            template_type=template_type,
            subject=render(template.subject, context),
            body=render(template.body, context),
        )

    def preview(self, template_type: TemplateType, data: TemplatePreviewRequest, user_id: str) -> RenderedEmail:
        """Vista previa con datos de ejemplo"""
        template = self.get_effective_template(user_id, template_type)
        context = {**SAMPLE_CONTEXT, **data.context}
        return RenderedEmail(
            template_type=template_type,
            subject=render(data.subject if data.subject is not None else template.subject, context),
            body=render(data.body if data.body is not None else template.body, context),
        )
