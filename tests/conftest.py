"""Pytest bootstrap configuration.

Ensure mandatory environment variables are set before test collection
and module imports that depend on application settings.
"""
import os
import tempfile

# Mandatory admin token for settings validation
os.environ.setdefault("ADMIN_API_TOKEN", "test-admin-token")
# 独立的 SQLite 文件库，HTTP 测试在每个用例前重建表
_DB_DIR = tempfile.mkdtemp(prefix="safetap-tests-")
os.environ.setdefault("DATABASE__URL", f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from tests.fakes import InMemoryStore, make_uow_factory  # noqa: E402

ADMIN_TOKEN = os.environ["ADMIN_API_TOKEN"]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def uow_factory(store):
    return make_uow_factory(store)


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest_asyncio.fixture
async def db():
    """重建 SQLite 表结构，测试结束后释放连接池"""
    from infrastructure.database import create_tables, drop_tables, engine

    await drop_tables()
    await create_tables()
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    from httpx import ASGITransport, AsyncClient
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
