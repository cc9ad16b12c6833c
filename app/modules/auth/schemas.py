from pydantic import BaseModel
from typing import Optional


class AuthContext(BaseModel):
    """Usuario autenticado por el proveedor externo"""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None


class CurrentUserOut(AuthContext):
    """Respuesta de /auth/me"""
    auth_disabled: bool = False
