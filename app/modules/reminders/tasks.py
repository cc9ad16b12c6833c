"""
Tareas de Celery para el envío de recordatorios.

El worker compone su propio almacenamiento con get_storage(). Con
STORAGE_BACKEND=memory (o auto sin base de datos) ese almacenamiento es un
dataset de demostración nuevo, distinto del que ve la API, así que el envío
solo se hace sobre almacenamiento SQL.
"""
import logging
from datetime import date
from typing import Optional

from app.core.celery import celery_app
from app.dependencies.storageDependencies import get_storage
from app.modules.email.tasks import send_template_email_task
from app.modules.reminders.service import ReminderDispatchService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def dispatch_due_reminders(self, on_date: Optional[str] = None):
    """
    Encolar los correos de recordatorio del día (programada en beat).

    Args:
        on_date: Fecha ISO a procesar; por defecto hoy
    """
    target = date.fromisoformat(on_date) if on_date else date.today()
    storage = get_storage()
    if storage.backend != "sql":
        logger.warning(
            f"Reminder dispatch for {target.isoformat()} skipped: worker storage is '{storage.backend}', not sql"
        )
        return {"status": "skipped", "date": target.isoformat(), "backend": storage.backend}

    try:
        service = ReminderDispatchService(storage, send_template_email_task.delay)
        result = service.dispatch(target)
        return {"status": "success", "date": target.isoformat(), **result}
    except Exception as exc:
        logger.error(f"Reminder dispatch for {target.isoformat()} failed: {exc}")
        if self.request.retries < self.max_retries:
            raise self.retry(exc=exc, countdown=300 * (2 ** self.request.retries))
        return {"status": "failed", "date": target.isoformat(), "error": str(exc)}
