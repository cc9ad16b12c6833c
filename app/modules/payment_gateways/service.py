"""
Servicio de pasarelas de pago

Una configuración por (usuario, pasarela). Los valores secretos nunca se
devuelven completos: se enmascaran y, si el cliente reenvía el valor
enmascarado, se conserva el guardado.
"""
from typing import Dict, List, Optional
import logging

from app.common.exceptions import NotFound, ValidationError
from app.common.mixins import utcnow
from app.common.storage import Storage
from app.modules.payment_gateways.definitions import GATEWAY_DEFINITIONS, required_keys, secret_keys
from app.modules.payment_gateways.models import GatewayType
from app.modules.payment_gateways.schemas import PaymentGatewayIn, PaymentGatewayOut

logger = logging.getLogger(__name__)

MASK = "********"


def mask_value(value: str) -> str:
    if not value:
        return value
    return MASK + value[-4:] if len(value) > 8 else MASK


def missing_keys(gateway_type: GatewayType, config: Dict[str, str]) -> List[str]:
    return [key for key in required_keys(gateway_type) if not (config or {}).get(key)]


class PaymentGatewayService:
    """Servicio para configuración de pasarelas de pago"""

    def __init__(self, storage: Storage):
        self.storage = storage

    def _find(self, user_id: str, gateway_type: GatewayType) -> Optional[dict]:
        return self.storage.payment_gateways.first({"user_id": user_id, "gateway_type": gateway_type})

    def _to_out(self, gateway_type: GatewayType, user_id: str, record: Optional[dict]) -> PaymentGatewayOut:
        definition = GATEWAY_DEFINITIONS[gateway_type]
        if record is None:
            return PaymentGatewayOut(
                user_id=user_id,
                gateway_type=gateway_type,
                name=definition.name,
                missing_fields=required_keys(gateway_type),
            )

        config = record.get("config") or {}
        secrets = secret_keys(gateway_type)
        missing = missing_keys(gateway_type, config)
        return PaymentGatewayOut(
            id=record["id"],
            user_id=user_id,
            gateway_type=gateway_type,
            name=definition.name,
            is_active=record["is_active"],
            configured=not missing,
            config={k: mask_value(v) if k in secrets else v for k, v in config.items()},
            missing_fields=missing,
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )

    def list_gateways(self, user_id: str) -> List[PaymentGatewayOut]:
        return [self._to_out(gateway_type, user_id, self._find(user_id, gateway_type)) for gateway_type in GatewayType]

    def get_gateway(self, gateway_type: GatewayType, user_id: str) -> PaymentGatewayOut:
        return self._to_out(gateway_type, user_id, self._find(user_id, gateway_type))

    def active_gateway_types(self, user_id: str) -> List[GatewayType]:
        rows = self.storage.payment_gateways.list(filters={"user_id": user_id, "is_active": True})
        return [GatewayType(row["gateway_type"]) for row in rows]

    def is_active_gateway(self, user_id: str, gateway: str) -> bool:
        return gateway in {g.value for g in self.active_gateway_types(user_id)}

    def _merge_config(self, gateway_type: GatewayType, incoming: Dict[str, str], stored: Dict[str, str]) -> Dict[str, str]:
        allowed = {f.key: f for f in GATEWAY_DEFINITIONS[gateway_type].fields}
        unknown = sorted(set(incoming) - set(allowed))
        if unknown:
            raise ValidationError(f"Campos no válidos para {gateway_type.value}: {', '.join(unknown)}")

        merged = dict(stored)
        for key, value in incoming.items():
            value = (value or "").strip()
            if value.startswith(MASK) and key in stored:
                continue
            field = allowed[key]
            if value and field.options and value not in field.options:
                raise ValidationError(f"{field.label} debe ser uno de: {', '.join(field.options)}")
            merged[key] = value
        return merged

    def save_gateway(self, gateway_type: GatewayType, data: PaymentGatewayIn, user_id: str) -> PaymentGatewayOut:
        """
        Crear o actualizar la configuración de una pasarela

        Raises:
            ValidationError: si se activa sin todos los campos requeridos
        """
        existing = self._find(user_id, gateway_type)
        config = self._merge_config(gateway_type, data.config, (existing or {}).get("config") or {})

        missing = missing_keys(gateway_type, config)
        if data.is_active and missing:
            raise ValidationError(f"Faltan campos requeridos para activar {gateway_type.value}: {', '.join(missing)}")

        now = utcnow()
        if existing:
            record = self.storage.payment_gateways.update(existing["id"], {
                "config": config,
                "is_active": data.is_active,
                "updated_at": now,
            })
        else:
            record = self.storage.payment_gateways.create({
                "user_id": user_id,
                "gateway_type": gateway_type,
                "config": config,
                "is_active": data.is_active,
                "created_at": now,
                "updated_at": now,
            })
        logger.info(f"Payment gateway '{gateway_type.value}' saved for user {user_id} (active={data.is_active})")
        return self._to_out(gateway_type, user_id, record)

    def set_active(self, gateway_type: GatewayType, is_active: bool, user_id: str) -> PaymentGatewayOut:
        existing = self._find(user_id, gateway_type)
        if existing is None:
            raise NotFound("payment_gateways", gateway_type.value)
        missing = missing_keys(gateway_type, existing.get("config") or {})
        if is_active and missing:
            raise ValidationError(f"Faltan campos requeridos para activar {gateway_type.value}: {', '.join(missing)}")
        record = self.storage.payment_gateways.update(existing["id"], {"is_active": is_active, "updated_at": utcnow()})
        return self._to_out(gateway_type, user_id, record)

    def delete_gateway(self, gateway_type: GatewayType, user_id: str):
        existing = self._find(user_id, gateway_type)
        if existing is None:
            raise NotFound("payment_gateways", gateway_type.value)
        self.storage.payment_gateways.delete(existing["id"])
        logger.info(f"Payment gateway '{gateway_type.value}' removed for user {user_id}")
