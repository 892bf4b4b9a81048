"""Shared pytest fixtures for back-office tests."""

import os

# Settings are read at import time, so the environment goes first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["MENU_FALLBACK_POLICY"] = "empty"

from types import SimpleNamespace
from typing import AsyncIterator, Dict, Iterable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backoffice.adapters.outbound.persistence.database import get_db
from backoffice.adapters.outbound.persistence.models import Admin, Base, Permission, Role
from backoffice.adapters.outbound.security.auth_admin_manager import AdminAuthManager


@pytest_asyncio.fixture()
async def engine():
    """In-memory SQLite engine with a fresh schema per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture()
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
def app(session_factory):
    """Application with ``get_db`` bound to the test database."""
    from backoffice.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


async def create_permission(db: AsyncSession, code: str, type: str = "menu", parent: Permission = None,
                            sort: int = 0, status: int = 1) -> Permission:
    permission = Permission(
        code=code,
        name=code,
        title=code.title(),
        type=type,
        parent_id=parent.id if parent else 0,
        path=f"/{code.replace('.', '/')}" if type in ("menu", "page") else None,
        sort=sort,
        status=status,
    )
    db.add(permission)
    await db.flush()
    return permission


async def create_role(db: AsyncSession, code: str, permissions: Iterable[Permission] = ()) -> Role:
    role = Role(code=code, name=code.replace("_", " ").title(), status=1, creator_id=0)
    role.permissions = list(permissions)
    db.add(role)
    await db.flush()
    return role


async def create_admin(db: AsyncSession, username: str, roles: Iterable[Role] = (), role_level: int = 3) -> Admin:
    admin = Admin(username=username, nickname=username.title(), role_level=role_level, status=1)
    admin.roles = list(roles)
    db.add(admin)
    await db.flush()
    return admin


def auth_headers(admin: Admin) -> Dict[str, str]:
    token = AdminAuthManager.create_access_token(admin.id, name=admin.nickname, role_level=admin.role_level)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def graph(db: AsyncSession) -> SimpleNamespace:
    """
    A small catalogue with roles and admins.

    dashboard (menu, sort 1)
    products (menu, sort 2)
      products.list (page)
        products.create (button)
    system (menu, sort 9)
      system.roles (page, sort 1)
      system.permissions (page, sort 2)
      system.admins (page, sort 3)
    finance (menu, disabled)
    """
    p = {}
    p["dashboard"] = await create_permission(db, "dashboard", sort=1)
    p["products"] = await create_permission(db, "products", sort=2)
    p["products.list"] = await create_permission(db, "products.list", "page", p["products"], sort=1)
    p["products.create"] = await create_permission(db, "products.create", "button", p["products.list"])
    p["system"] = await create_permission(db, "system", sort=9)
    p["system.roles"] = await create_permission(db, "system.roles", "page", p["system"], sort=1)
    p["system.permissions"] = await create_permission(db, "system.permissions", "page", p["system"], sort=2)
    p["system.admins"] = await create_permission(db, "system.admins", "page", p["system"], sort=3)
    p["finance"] = await create_permission(db, "finance", sort=5, status=0)

    r = {}
    r["super_admin"] = await create_role(db, "super_admin", p.values())
    r["operator"] = await create_role(
        db, "operator",
        [p["dashboard"], p["products"], p["products.list"], p["products.create"], p["system"], p["system.roles"]],
    )
    r["viewer"] = await create_role(db, "viewer", [p["dashboard"]])
    r["buttons"] = await create_role(db, "buttons", [p["products.create"]])
    r["empty"] = await create_role(db, "empty")

    a = {}
    a["root"] = await create_admin(db, "root", [r["super_admin"]], role_level=1)
    a["operator"] = await create_admin(db, "operator", [r["operator"]])
    a["viewer"] = await create_admin(db, "viewer", [r["viewer"]])
    a["buttons"] = await create_admin(db, "buttons", [r["buttons"]])
    a["lonely"] = await create_admin(db, "lonely")

    await db.commit()
    return SimpleNamespace(permissions=p, roles=r, admins=a)
