import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ALGORITHM"] = "HS256"
os.environ["DEFAULT_TAX_RATE"] = "10"
os.environ["DEFAULT_PACKAGE_CHARGE"] = "0"
os.environ["BUSINESS_NAME"] = "QuickBilling"

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from quickbill.core.storage import get_storage_client
from quickbill.db import get_db
from quickbill.main import app
from quickbill.models import Base


def make_token(user_id: uuid.UUID, permissions: List[str] | None = None, expires_in: int = 3600) -> str:
    payload = {
        "id": str(user_id),
        "sub": f"{user_id.hex[:8]}@example.com",
        "permissions": permissions or [],
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def bearer(user_id: uuid.UUID, permissions: List[str] | None = None) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, permissions)}"}


class FakeStorage:
    """
    Stands in for the blob store: remembers uploads and hands back a CDN-like URL.
    """

    def __init__(self):
        self.uploads = []

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        self.uploads.append((path, content, content_type))
        return f"https://cdn.test/product-images/{path}"


@pytest.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'quickbill.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession, autoflush=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
async def client(session_factory, storage):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_storage_client] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def auth(user_id) -> Dict[str, str]:
    return bearer(user_id)


@pytest.fixture()
def other_auth() -> Dict[str, str]:
    return bearer(uuid.uuid4())


@pytest.fixture()
def create_product(client, auth):
    async def _create(name: str, price: str, headers: Dict[str, str] | None = None, **extra) -> dict:
        resp = await client.post(
            "/products/",
            json={"name": name, "price": price, **extra},
            headers=headers or auth,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture()
def create_order(client, auth):
    async def _create(items: List[tuple], headers: Dict[str, str] | None = None, **extra) -> dict:
        body = {
            "items": [{"product_id": p["id"], "quantity": q} for p, q in items],
            **extra,
        }
        resp = await client.post("/orders/", json=body, headers=headers or auth)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
