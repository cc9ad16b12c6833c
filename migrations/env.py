from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app.database.database import Base
import app.modules.clients.models  # noqa: F401
import app.modules.invoices.models  # noqa: F401
import app.modules.payment_gateways.models  # noqa: F401
import app.modules.email_templates.models  # noqa: F401
import app.modules.reminders.models  # noqa: F401
import app.modules.expenses.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    """Generar SQL sin conexión a la base de datos."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
