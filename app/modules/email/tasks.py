"""
Tareas asíncronas de Celery para el envío de correos electrónicos.
"""
import logging
from typing import Dict, Any, List, Optional
from app.core.celery import celery_app
from app.modules.email.service import email_service

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """El servidor SMTP rechazó o no aceptó el envío"""


@celery_app.task(bind=True, max_retries=3)
def send_template_email_task(
    self,
    to_emails: List[str],
    subject: str,
    template_name: str,
    context: Dict[str, Any],
    cc_emails: Optional[List[str]] = None
):
    """
    Tarea asíncrona para envío de correos con template (recordatorios y facturas).
    """
    try:
        success = email_service.send_template_email(
            to_emails=to_emails,
            subject=subject,
            template_name=template_name,
            context=context,
            cc_emails=cc_emails
        )
        if not success:
            raise EmailDeliveryError("Failed to send template email")

        logger.info(f"Template email '{template_name}' sent successfully to {', '.join(to_emails)}")
        return {"status": "success", "template": template_name, "recipients": to_emails}

    except EmailDeliveryError as exc:
        logger.error(f"Template email sending failed: {exc}")

        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))

        return {"status": "failed", "error": str(exc), "template": template_name, "recipients": to_emails}
