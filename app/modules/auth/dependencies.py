"""
Dependencias de autenticación para FastAPI.

La autenticación la resuelve un proveedor externo: aquí solo se valida el
JWT recibido y se expone el identificador del usuario actual.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
import logging

from app.core.config import settings
from app.modules.auth.schemas import AuthContext
from app.modules.auth.utils import decode_access_token

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def get_auth_context(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
    ) -> AuthContext:
        """
        Obtener el usuario actual desde el token JWT.
        Con AUTH_DISABLED (solo desarrollo) se usa el usuario de demostración.
        """
        if settings.AUTH_DISABLED:
            return AuthContext(user_id=settings.DEMO_USER_ID, name="Demo User")

        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No se pudieron validar las credenciales",
            headers={"WWW-Authenticate": "Bearer"},
        )

        if credentials is None:
            raise credentials_exception

        try:
            payload = decode_access_token(credentials.credentials)
            user_id = payload.get("sub")
            if user_id is None:
                raise credentials_exception
        except jwt.PyJWTError as e:
            logger.debug(f"Invalid token: {e}")
            raise credentials_exception

        return AuthContext(
            user_id=str(user_id),
            email=payload.get("email"),
            name=payload.get("name")
        )


# Instancias de dependencias
get_auth_context = AuthDependencies.get_auth_context
