"""Test fixtures for the URL shortener service."""

import os

# Settings are read at import time, so the environment goes first
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["EXPIRY_CLEANUP_ENABLED"] = "false"

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.db.base import Database
from shorturl.main import create_app
from shorturl.repositories.url_repository import URLRepository


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_database() -> AsyncGenerator[Database, None]:
    """A connected store client on a fresh in-memory database."""
    database = Database(TEST_SQLALCHEMY_DATABASE_URL)
    await database.connect(create_tables=True)

    yield database

    await database.dispose()


@pytest_asyncio.fixture
async def test_db(test_database) -> AsyncGenerator[AsyncSession, None]:
    """Database session on the test store."""
    async with test_database.session() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def url_repository() -> URLRepository:
    """Return URL repository instance."""
    return URLRepository()


@pytest.fixture
def test_app(test_database) -> FastAPI:
    """FastAPI app serving from the test store."""
    return create_app(database=test_database)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the app in-process; redirects are not followed."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
