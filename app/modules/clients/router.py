from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from app.core.config import settings
from app.dependencies.storageDependencies import storage_dependency
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext
from app.modules.clients.schemas import ClientCreate, ClientList, ClientOut, ClientUpdate
from app.modules.clients.service import ClientService

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses={404: {"description": "Not found"}}
)


@router.post("/", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """
    Crear un cliente

    - **name**: Nombre (requerido)
    - **email**: Email (requerido)
    """
    return ClientService(storage).create_client(data, auth_context.user_id)


@router.get("/", response_model=ClientList)
async def list_clients(
    storage: storage_dependency,
    search: Optional[str] = Query(None, description="Búsqueda por nombre, email o empresa"),
    limit: int = Query(settings.MAX_PAGE_SIZE, ge=1, le=500),
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Listar clientes con estadísticas"""
    return ClientService(storage).list_clients(auth_context.user_id, search=search, limit=limit)


@router.get("/{client_id}", response_model=ClientOut)
async def get_client(
    client_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return ClientService(storage).get_client(client_id, auth_context.user_id)


@router.patch("/{client_id}", response_model=ClientOut)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    return ClientService(storage).update_client(client_id, data, auth_context.user_id)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    storage: storage_dependency,
    auth_context: AuthContext = Depends(AuthDependencies.get_auth_context)
):
    """Eliminar un cliente sin facturas"""
    ClientService(storage).delete_client(client_id, auth_context.user_id)
