from fastapi import APIRouter, Depends, status
from typing import List

from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.payment_gateways.definitions import GATEWAY_DEFINITIONS
from app.modules.payment_gateways.models import GatewayType
from app.modules.payment_gateways.schemas import GatewayDefinition, PaymentGatewayIn, PaymentGatewayOut
from app.modules.payment_gateways.service import PaymentGatewayService

router = APIRouter(prefix="/payment-gateways", tags=["Payment Gateways"])


@router.get("/definitions", response_model=List[GatewayDefinition])
async def list_definitions():
    """Pasarelas soportadas y los campos que requiere cada una"""
    return list(GATEWAY_DEFINITIONS.values())


@router.get("/", response_model=List[PaymentGatewayOut])
async def list_gateways(
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Estado de cada pasarela para el usuario

    Los valores secretos se devuelven enmascarados.
    """
    return PaymentGatewayService(storage).list_gateways(auth_context.user_id)


@router.get("/{gateway_type}", response_model=PaymentGatewayOut)
async def get_gateway(
    gateway_type: GatewayType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return PaymentGatewayService(storage).get_gateway(gateway_type, auth_context.user_id)


@router.put("/{gateway_type}", response_model=PaymentGatewayOut)
async def save_gateway(
    gateway_type: GatewayType,
    data: PaymentGatewayIn,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Guardar credenciales de una pasarela

    - **config**: valores por campo; un valor enmascarado conserva el guardado
    - **is_active**: solo se puede activar con todos los campos completos
    """
    return PaymentGatewayService(storage).save_gateway(gateway_type, data, auth_context.user_id)


@router.post("/{gateway_type}/activate", response_model=PaymentGatewayOut)
async def activate_gateway(
    gateway_type: GatewayType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return PaymentGatewayService(storage).set_active(gateway_type, True, auth_context.user_id)


@router.post("/{gateway_type}/deactivate", response_model=PaymentGatewayOut)
async def deactivate_gateway(
    gateway_type: GatewayType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return PaymentGatewayService(storage).set_active(gateway_type, False, auth_context.user_id)


@router.delete("/{gateway_type}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gateway(
    gateway_type: GatewayType,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    PaymentGatewayService(storage).delete_gateway(gateway_type, auth_context.user_id)
