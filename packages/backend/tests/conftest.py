"""Test fixtures — a fresh SQLite database per test.

Pattern:
1. Each test gets its own on-disk SQLite file under tmp_path, with all
   tables created. No cross-test pollution, no external database.
2. The app's get_db dependency is overridden to open sessions on that
   database, and app.state.relay is swapped for a relay bound to it.
3. Relay tests use FakeConnection instead of real sockets: it records
   every payload sent and can be "closed" or made to fail on send.
"""

import os

# Must be set before globalsoft.config is imported.
os.environ.setdefault("GLOBALSOFT_BCRYPT_ROUNDS", "4")
os.environ.setdefault("GLOBALSOFT_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from globalsoft.db.engine import get_db, init_models
from globalsoft.main import app
from globalsoft.realtime import Connection, ConnectionRegistry, RealtimeRelay


class FakeConnection(Connection):
    """In-memory stand-in for a WebSocket-backed connection."""

    def __init__(self, verified_user_id=None, fail_on_send=False):
        super().__init__(None, verified_user_id=verified_user_id)
        self.open = True
        self.fail_on_send = fail_on_send
        self.sent: list[dict] = []

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_json(self, payload):
        if self.fail_on_send:
            raise RuntimeError("socket is gone")
        self.sent.append(payload)


@pytest_asyncio.fixture()
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def relay(session_factory):
    return RealtimeRelay(ConnectionRegistry(), session_factory)


@pytest.fixture()
def make_connection(relay):
    """Factory: a FakeConnection already connected to the relay."""

    def _make(**kwargs) -> FakeConnection:
        conn = FakeConnection(**kwargs)
        relay.connect(conn)
        return conn

    return _make


@pytest_asyncio.fixture()
async def client(session_factory, relay):
    """HTTP client against the app, bound to the test database and relay."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    original_relay = app.state.relay
    app.dependency_overrides[get_db] = override_get_db
    app.state.relay = relay

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.relay = original_relay


async def _register(client, email: str, name: str, role: str) -> dict:
    resp = await client.post(
        "/api/auth/register",
        json={"email": email, "name": name, "password": "password_123", "role": role},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {
        "id": body["user"]["id"],
        "name": name,
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest_asyncio.fixture()
async def seller(client):
    return await _register(client, "bob@example.com", "Bob", "seller")


@pytest_asyncio.fixture()
async def buyer(client):
    return await _register(client, "alice@example.com", "Alice", "buyer")
