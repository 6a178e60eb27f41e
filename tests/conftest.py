from __future__ import annotations

import os

import httpx
import pytest_asyncio

# Settings are instantiated at import time and the module-level app builds a
# Database from them. Point both at SQLite before anything imports invoicedesk.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

SEED_USER_EMAIL = "user@nextmail.com"
SEED_USER_PASSWORD = "123456"


@pytest_asyncio.fixture()
async def database(tmp_path):
    from invoicedesk.db.init_db import init_db
    from invoicedesk.db.session import Database

    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'invoicedesk.db'}")
    await init_db(db)
    yield db
    await db.disconnect()


@pytest_asyncio.fixture()
async def seeded(database):
    from invoicedesk.services.seed import run_seed

    return await run_seed(database)


@pytest_asyncio.fixture()
async def session(database):
    async with database.session() as db:
        yield db


@pytest_asyncio.fixture()
async def app(database):
    from invoicedesk.main import create_app

    return create_app(database)


@pytest_asyncio.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture()
async def auth_headers(client, seeded):
    r = await client.post(
        "/login/access-token",
        data={"username": SEED_USER_EMAIL, "password": SEED_USER_PASSWORD},
    )
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}
