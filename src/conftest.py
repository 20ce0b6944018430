import contextlib

import pytest
from httpx import ASGITransport, AsyncClient

from src.config.database import engine
from src.guests.repository import orm_models  # noqa: F401  registers the tables
from src.main import app
from src.models.base import BaseModel


@pytest.fixture(scope="function")
async def test_db():
    """Create the schema on the in-memory test database, and drop it afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture(scope="function")
async def client():
    """Create a test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Create a test client with FastAPI dependency overrides installed."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory
