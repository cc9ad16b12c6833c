from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

# create_engine no abre conexiones hasta el primer uso
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    echo=settings.DEBUG and settings.ENVIRONMENT != "test"
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def database_available() -> bool:
    """Verificar que la base de datos responde (usado al componer el almacenamiento)."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Database not reachable: {e}")
        return False


def create_tables():
    """Crear todas las tablas registradas en Base (solo desarrollo)."""
    import app.modules.clients.models  # noqa: F401
    import app.modules.invoices.models  # noqa: F401
    import app.modules.payment_gateways.models  # noqa: F401
    import app.modules.email_templates.models  # noqa: F401
    import app.modules.reminders.models  # noqa: F401
    import app.modules.expenses.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
