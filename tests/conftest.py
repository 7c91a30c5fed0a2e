"""Pytest configuration and fixtures for stash.

Every test gets its own data and upload directories under tmp_path.
HTTP tests run the real lifespan around an ASGI client.
"""

import io
from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from PIL import Image

from stash.core.config import Settings, get_settings
from stash.core.lifespan import create_lifespan
from stash.main import create_app


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings pointed at tmp_path; rate limiting and file watching off."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "uploads"))
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("WATCH_CREDENTIALS", "false")
    monkeypatch.setenv("DOMAIN", "stash.test")
    monkeypatch.setenv("PORT", "40115")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    """Application with startup done (stores loaded, services on app.state)."""
    application = create_app()
    async with create_lifespan(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def token(app: FastAPI) -> str:
    """The bootstrap token written to auth.json at startup."""
    return app.state.credentials.tokens()[0]


def make_png(color: tuple[int, int, int] = (255, 0, 0), size: tuple[int, int] = (32, 32)) -> bytes:
    """Encode a solid-colour PNG."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_factory():
    """make_png as a fixture, for tests needing several distinct images."""
    return make_png
