"""Shared pytest fixtures for NatureNest tests."""
import os
import sys
import tempfile

sys.dont_write_bytecode = True

# Must be set before naturenest.core.config is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="naturenest-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/import.db"
os.environ["STATS_TASKS_BACKEND"] = "inline"
os.environ["THROTTLE_LIMIT"] = "1000"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from naturenest.core.throttle import limiter  # noqa: E402
from naturenest.db import session as db_session  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_limiter():
    """The limiter is module-level; hits from one test must not leak into the next."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def session_factory(tmp_path, monkeypatch):
    """Fresh SQLite database per test.

    NullPool: every TestClient / asyncio.run gets its own event loop, so
    connections must not be reused across loops.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'naturenest.db'}",
        poolclass=NullPool,
    )
    factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "AsyncSessionLocal", factory)
    return factory


@pytest.fixture
def app(session_factory):
    from naturenest.main import create_app

    return create_app()


@pytest.fixture
def client(app):
    # context manager runs the lifespan: tables + catalog seed
    with TestClient(app) as c:
        yield c
