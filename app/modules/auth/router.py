from fastapi import APIRouter, Depends

from app.core.config import settings
from app.modules.auth.dependencies import get_auth_context
from app.modules.auth.schemas import AuthContext, CurrentUserOut

auth_router = APIRouter()


@auth_router.get("/me", response_model=CurrentUserOut)
async def me(auth_context: AuthContext = Depends(get_auth_context)):
    """
    Usuario autenticado actual (equivalente a auth.me() del proveedor).
    """
    return CurrentUserOut(**auth_context.model_dump(), auth_disabled=settings.AUTH_DISABLED)
