from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from app.core.config import settings

SECRET_KEY = settings.APP_SECRET_STRING
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token with an expiration time.
    Tokens are normally issued by the hosted auth provider; this helper
    mirrors its format for local tooling and tests.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT; raises jwt.PyJWTError when invalid or expired."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
