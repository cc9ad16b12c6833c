from datetime import timedelta
from typing import List, Optional
import logging

from app.common.exceptions import NotFound, ValidationError
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.modules.clients.schemas import ClientCreate, ClientList, ClientOut, ClientStats, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Servicio para gestión de clientes"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _get_owned(self, client_id: str, user_id: str) -> dict:
        record = self.storage.clients.get(client_id)
        if record["user_id"] != user_id:
            raise NotFound("clients", client_id)
        return record

    def get_client(self, client_id: str, user_id: str) -> ClientOut:
        return ClientOut(**self._get_owned(client_id, user_id))

    def list_clients(self, user_id: str, search: Optional[str] = None, limit: Optional[int] = None) -> ClientList:
        """Clientes del usuario, los más recientes primero"""
        rows = self.storage.clients.list(filters={"user_id": user_id}, order_by="-created_at")
        stats = self._stats(rows)

        if search:
            term = search.lower()
            rows = [
                r for r in rows
                if term in (r.get("name") or "").lower()
                or term in (r.get("email") or "").lower()
                or term in (r.get("company") or "").lower()
            ]
        total = len(rows)
        if limit:
            rows = rows[:limit]
        return ClientList(clients=[ClientOut(**r) for r in rows], total=total, stats=stats)

    def _stats(self, rows: List[dict]) -> ClientStats:
        month_ago = utcnow() - timedelta(days=30)
        return ClientStats(
            total_clients=len(rows),
            with_company=sum(1 for r in rows if r.get("company")),
            active_this_month=sum(1 for r in rows if r.get("updated_at") and r["updated_at"] > month_ago),
        )

    def create_client(self, data: ClientCreate, user_id: str) -> ClientOut:
        if not (data.name or "").strip() or not data.email:
            raise ValidationError("El nombre y el email del cliente son obligatorios")

        now = utcnow()
        record = self.storage.clients.create({
            **data.model_dump(),
            "name": data.name.strip(),
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Client {record['id']} created for user {user_id}")
        return ClientOut(**record)

    def update_client(self, client_id: str, data: ClientUpdate, user_id: str) -> ClientOut:
        self._get_owned(client_id, user_id)
        patch = data.model_dump(exclude_unset=True)
        if "name" in patch and not (patch["name"] or "").strip():
            raise ValidationError("El nombre del cliente es obligatorio")
        if "email" in patch and not patch["email"]:
            raise ValidationError("El email del cliente es obligatorio")
        patch["updated_at"] = utcnow()
        return ClientOut(**self.storage.clients.update(client_id, patch))

    def delete_client(self, client_id: str, user_id: str):
        """No se puede eliminar un cliente con facturas"""
        self._get_owned(client_id, user_id)
        if self.storage.invoices.first({"user_id": user_id, "client_id": client_id}):
            raise ValidationError("No se puede eliminar un cliente que tiene facturas")
        self.storage.clients.delete(client_id)
        logger.info(f"Client {client_id} deleted")
