from fastapi import APIRouter, Depends, HTTPException
from kombu.exceptions import OperationalError
from pydantic import BaseModel, EmailStr
from app.modules.auth.dependencies import AuthDependencies
from app.modules.email.tasks import send_template_email_task
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["Email"])


class TestEmailRequest(BaseModel):
    to_email: EmailStr
    subject: str = "Test Email from Invoice Builder"
    message: str = "This is a test email to verify SMTP configuration."


@router.post("/test")
async def test_email(request: TestEmailRequest, auth_context=Depends(AuthDependencies.get_auth_context)):
    """Encolar un correo de prueba (verifica worker, broker y SMTP)"""
    try:
        async_result = send_template_email_task.delay(
            to_emails=[request.to_email],
            subject=request.subject,
            template_name="notification_email.html",
            context={"paragraphs": [request.message], "company_name": settings.COMPANY_NAME}
        )
    except OperationalError as e:
        logger.error(f"Error enqueueing test email: {e}")
        raise HTTPException(status_code=503, detail="No se pudo encolar el correo de prueba")
    return {"message": "Task enqueued", "task_id": async_result.id}


@router.get("/config")
async def get_email_config(auth_context=Depends(AuthDependencies.get_auth_context)):
    """Configuración SMTP actual, sin credenciales"""
    return {
        "smtp_server": settings.EMAIL_SMTP_SERVER,
        "smtp_port": settings.EMAIL_SMTP_PORT,
        "use_tls": settings.EMAIL_USE_TLS,
        "from_email": settings.EMAIL_FROM,
        "from_name": settings.EMAIL_FROM_NAME,
    }
