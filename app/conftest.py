"""
Fixtures compartidas por los tests de los módulos

Cada test recibe un almacenamiento en memoria nuevo con el dataset de
demostración y un usuario autenticado fijo (user_1).
"""
import pytest
from fastapi.testclient import TestClient

from app.common.fixtures import DEMO_USER_ID, build_fixture_storage
from app.dependencies.storageDependencies import get_storage
from app.main import app
from app.modules.auth.dependencies import AuthDependencies
from app.modules.auth.schemas import AuthContext


@pytest.fixture
def storage():
    return build_fixture_storage()


@pytest.fixture
def auth_context():
    return AuthContext(user_id=DEMO_USER_ID, email="demo@example.com", name="Demo User")


@pytest.fixture
def client(storage, auth_context):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[AuthDependencies.get_auth_context] = lambda: auth_context
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def other_user_client(storage):
    """Cliente autenticado como un usuario sin datos"""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[AuthDependencies.get_auth_context] = lambda: AuthContext(user_id="user_2")
    yield TestClient(app)
    app.dependency_overrides.clear()
