import sqlite3

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

import riskassess.models  # noqa: F401
from riskassess.database import Base, build_engine, get_db
from riskassess.main import app
from riskassess.services.identity import AuthError, Principal, get_identity_provider

# token → user id
TOKENS = {
    "token-u1": "U1",
    "token-u2": "U2",
}


class FakeIdentityProvider:
    """Accepts the tokens in TOKENS, rejects everything else."""

    def __init__(self, tokens=None):
        self.tokens = dict(TOKENS if tokens is None else tokens)
        self.calls = []

    async def verify(self, token):
        self.calls.append(token)
        if token not in self.tokens:
            raise AuthError("Invalid token")
        return Principal(id=self.tokens[token])


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "riskassess-test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path):
    engine = build_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def client(session_factory, identity):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def asgi_http(client):
    """An httpx.AsyncClient that talks to the app in-process, same overrides as *client*."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http


@pytest.fixture
def stored_rows(db_path):
    """Read back the projects table straight from SQLite."""

    def _rows():
        with sqlite3.connect(db_path) as conn:
            conn.row_factory = sqlite3.Row
            return [dict(r) for r in conn.execute("SELECT * FROM projects ORDER BY id")]

    return _rows


def auth(token="token-u1"):
    return {"Authorization": f"Bearer {token}"}
