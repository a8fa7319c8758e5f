"""
Pytest configuration and fixtures.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from contact_upload.config import Settings
from contact_upload.main import create_app
from contact_upload.uploads.store import UploadStore


class TickingClock:
    """Clock returning a new second on every call so generated names never collide."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir: Path) -> Settings:
    """Create test settings."""
    return Settings(
        app_env="dev",
        debug=True,
        log_level="DEBUG",
        upload_dir=upload_dir,
        upload_chunk_size=8,
        csv_encoding="utf-8",
        csv_delimiter=",",
        cors_origins="*",
        cors_methods="GET,POST,OPTIONS",
        cors_headers="Content-Type,Authorization",
    )


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 2, 3, 4, 5))


@pytest.fixture
def store(upload_dir: Path, clock: TickingClock) -> UploadStore:
    store = UploadStore(directory=upload_dir, chunk_size=8, clock=clock)
    store.ensure_directory()
    return store


@pytest.fixture
def app(test_settings: Settings, store: UploadStore) -> FastAPI:
    application = create_app(test_settings)
    application.state.upload_store = store
    return application


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def valid_csv() -> bytes:
    return b"name,phone\nAlice,555-1234\nBob,555 5678\n"
