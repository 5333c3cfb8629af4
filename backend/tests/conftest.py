"""
Notes Service — Test Configuration (conftest.py)
==================================================

Shared pytest fixtures for the entire test suite.

Fixture Hierarchy:
    Module-level:
    └── environment: SQLite database file, test signing secret, quiet logging

    Function-scoped (created fresh for each test):
    ├── make_token: signs arbitrary payloads the way a token issuer would
    ├── auth_headers: Authorization header with a valid, unexpired token
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── database: creates/drops the schema on the SQLite test database
    └── test_client: HTTPX AsyncClient bound to the FastAPI app
"""

import base64
import hashlib
import hmac
import json
import os
import tempfile
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any notes_service import: Settings and the engine are built
# at import time
TEST_SECRET = "test-secret-not-for-production"

_db_dir = tempfile.mkdtemp(prefix="notes_service_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_db_dir}/test.db"
os.environ["JWT_SECRET"] = TEST_SECRET
os.environ["JWT_REQUIRE_EXP"] = "false"
os.environ["ALLOW_INSECURE_JWT_SECRET"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# Token Helpers
# ══════════════════════════════════════════════════════════════════════════

def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def sign_segments(header_b64: str, payload_b64: str, secret: str = TEST_SECRET) -> str:
    """Append an HS256 signature to two already-encoded segments."""
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{b64url(signature)}"


def encode_token(payload, secret: str = TEST_SECRET) -> str:
    header_b64 = b64url(json.dumps({"alg": "HS256", "typ": "JWT"}).encode("utf-8"))
    payload_b64 = b64url(json.dumps(payload).encode("utf-8"))
    return sign_segments(header_b64, payload_b64, secret)


@pytest.fixture
def make_token():
    """
    Returns encode_token(payload, secret=TEST_SECRET).

    Usage:
        def test_x(make_token):
            token = make_token({"user": "a", "exp": int(time.time()) + 60})
    """
    return encode_token


@pytest.fixture
def auth_headers():
    token = encode_token({"user": "test-user", "exp": int(time.time()) + 3600})
    return {"Authorization": f"Bearer {token}"}


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_note(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = note
            result = await note_service.get_note(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database():
    """Fresh notes table for each test on the SQLite test database."""
    from notes_service.database import Base, engine
    from notes_service.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient wired to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from notes_service.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
