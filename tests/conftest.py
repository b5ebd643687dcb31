"""
Fixtures compartidas
Conjunto Residencial Arkania

Cada test corre sobre una base SQLite en memoria nueva, con los roles por
defecto ya creados.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas")
os.environ.setdefault("SEED_DEFAULT_ROLES", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_async_db
from app.core.policies import ADMIN_ROLE
from app.main import app
from app.models.user import DocumentType
from app.schemas.users import UserCreate
from app.services.role_service import RoleService
from app.services.user_role_service import UserRoleService
from app.services.user_service import UserService

PASSWORD = "Arkania2024"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with factory() as session:
        await RoleService(session).initialize_default_roles()
    return factory


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_async_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_db] = override_get_async_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# =============================================================================
# DATOS DE PRUEBA
# =============================================================================

def user_payload(index: int = 1, **overrides) -> dict:
    payload = {
        "document_type": DocumentType.CC,
        "document_number": f"10203040{index:02d}",
        "first_name": "María",
        "last_name": f"Gómez{chr(64 + index)}",
        "email": f"usuario{index}@arkania.com",
        "phone": "+57 300 1234567",
        "password": PASSWORD,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_user(db):
    async def _make_user(index: int = 1, **overrides):
        return await UserService(db).create_user(UserCreate(**user_payload(index, **overrides)))
    return _make_user


@pytest.fixture
def role_id(db):
    async def _role_id(name: str) -> int:
        return (await RoleService(db).get_role_by_name(name)).id
    return _role_id


@pytest_asyncio.fixture
async def admin_user(db, make_user, role_id):
    user = await make_user(99, email="admin@arkania.com", first_name="Admin")
    await UserRoleService(db).assign_role(user.id, await role_id(ADMIN_ROLE))
    return user


@pytest_asyncio.fixture
async def admin_headers(client, admin_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "admin@arkania.com", "password": PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
