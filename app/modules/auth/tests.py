"""
Tests de autenticación (validación del JWT del proveedor)
"""

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
import jwt

from app.core.config import settings
from app.dependencies.storageDependencies import get_storage
from app.main import app
from app.modules.auth.utils import create_access_token, decode_access_token


# ===== FIXTURES =====

@pytest.fixture
def anonymous_client(storage, monkeypatch):
    """Cliente sin override de autenticación"""
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


# ===== TESTS =====

class TestTokens:

    def test_create_and_decode(self):
        token = create_access_token({"sub": "user_1", "email": "demo@acmestudio.io"})
        payload = decode_access_token(token)
        assert payload["sub"] == "user_1"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_expired_token(self):
        token = create_access_token({"sub": "user_1"}, expires_delta=timedelta(seconds=-10))
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "user_1"}, "another-secret", algorithm=settings.ALGORITHM)
        with pytest.raises(jwt.PyJWTError):
            decode_access_token(token)


class TestAuthDependency:

    def test_missing_token(self, anonymous_client):
        response = anonymous_client.get("/invoices/")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, anonymous_client):
        assert anonymous_client.get("/auth/me", headers=bearer("not-a-jwt")).status_code == 401

    def test_token_without_subject(self, anonymous_client):
        token = create_access_token({"email": "demo@acmestudio.io"})
        assert anonymous_client.get("/auth/me", headers=bearer(token)).status_code == 401

    def test_valid_token(self, anonymous_client):
        token = create_access_token({"sub": "user_1", "email": "demo@acmestudio.io", "name": "Demo"})
        response = anonymous_client.get("/auth/me", headers=bearer(token))
        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "user_1"
        assert data["auth_disabled"] is False

    def test_token_scopes_data(self, anonymous_client):
        token = create_access_token({"sub": "user_2"})
        response = anonymous_client.get("/invoices/", headers=bearer(token))
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_auth_disabled_uses_demo_user(self, anonymous_client, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_DISABLED", True)
        response = anonymous_client.get("/auth/me")
        assert response.status_code == 200
        assert response.json()["user_id"] == settings.DEMO_USER_ID
