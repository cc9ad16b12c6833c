"""
Composición del almacenamiento

STORAGE_BACKEND decide qué implementación reciben los servicios:
- sql: PostgreSQL vía SQLAlchemy
- memory: dataset de demostración en memoria
- auto: PostgreSQL si responde al arrancar, si no el dataset en memoria
"""
from fastapi import Depends
from typing import Annotated, Optional
import logging

from app.core.config import settings
from app.common.fixtures import build_fixture_storage
from app.common.storage import SqlAlchemyStorage, Storage
from app.database.database import SessionLocal, database_available

logger = logging.getLogger(__name__)

_storage: Optional[Storage] = None


def build_storage(backend: str) -> Storage:
    """Construir el almacenamiento para el backend indicado"""
    if backend == "memory":
        logger.info("Using in-memory fixture storage")
        return build_fixture_storage(settings.DEMO_USER_ID)

    if backend == "auto" and not database_available():
        logger.warning("Database unreachable, falling back to in-memory fixture storage")
        return build_fixture_storage(settings.DEMO_USER_ID)

    logger.info("Using SQL storage")
    return SqlAlchemyStorage(SessionLocal)


def get_storage() -> Storage:
    """Almacenamiento del proceso, compuesto una sola vez"""
    global _storage
    if _storage is None:
        _storage = build_storage(settings.STORAGE_BACKEND)
    return _storage


def reset_storage():
    """Olvidar el almacenamiento compuesto (arranque y pruebas)"""
    global _storage
    _storage = None


storage_dependency = Annotated[Storage, Depends(get_storage)]
