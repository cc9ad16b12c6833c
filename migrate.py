#!/usr/bin/env python3
"""
Script para gestionar migraciones de base de datos con Alembic.
"""
import sys
from pathlib import Path

from alembic.config import Config
from alembic import command
from app.core.config import settings

root_dir = Path(__file__).parent


def get_alembic_config():
    """Obtener configuración de Alembic (sin alembic.ini)."""
    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(root_dir / "migrations"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def create_migration(message: str):
    """Crear nueva migración."""
    alembic_cfg = get_alembic_config()
    command.revision(alembic_cfg, autogenerate=True, message=message)
    print(f"Migración creada: {message}")


def run_migrations():
    """Ejecutar migraciones pendientes."""
    alembic_cfg = get_alembic_config()
    command.upgrade(alembic_cfg, "head")
    print("Migraciones ejecutadas exitosamente")


def rollback_migration():
    """Rollback de la última migración."""
    alembic_cfg = get_alembic_config()
    command.downgrade(alembic_cfg, "-1")
    print("Rollback ejecutado exitosamente")


def show_current():
    """Mostrar migración actual."""
    alembic_cfg = get_alembic_config()
    command.current(alembic_cfg)


def seed_demo_data(user_id: str):
    """Cargar el dataset de demostración en la base de datos."""
    from app.common.fixtures import build_fixture_dataset
    from app.common.storage import COLLECTIONS, SqlAlchemyStorage
    from app.database.database import SessionLocal

    storage = SqlAlchemyStorage(SessionLocal)
    dataset = build_fixture_dataset(user_id)
    # Orden de COLLECTIONS: los clientes y plantillas antes que quienes los referencian
    for name in COLLECTIONS:
        for record in dataset[name]:
            storage[name].create(record)
        print(f"{name}: {len(dataset[name])} registros")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Uso:")
        print("  python migrate.py create 'message'  # Crear migración")
        print("  python migrate.py upgrade            # Ejecutar migraciones")
        print("  python migrate.py downgrade          # Rollback")
        print("  python migrate.py current            # Ver actual")
        print("  python migrate.py seed [user_id]     # Cargar datos de demostración")
        sys.exit(1)

    action = sys.argv[1]

    if action == "create":
        if len(sys.argv) < 3:
            print("Error: Se requiere un mensaje para la migración")
            sys.exit(1)
        create_migration(sys.argv[2])
    elif action == "upgrade":
        run_migrations()
    elif action == "downgrade":
        rollback_migration()
    elif action == "current":
        show_current()
    elif action == "seed":
        seed_demo_data(sys.argv[2] if len(sys.argv) > 2 else settings.DEMO_USER_ID)
    else:
        print(f"Acción desconocida: {action}")
        sys.exit(1)
