from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from summary_server.main import app
from summary_server.api import mcp, mcp_streamable
from summary_server.core.config import settings


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Keep process defaults predictable regardless of the developer's .env."""
    monkeypatch.setattr(settings, "OUTPUT_DIRECTORY", None)
    monkeypatch.setattr(settings, "INCLUDE_GIT_HISTORY", True)
    monkeypatch.setattr(settings, "DEBUG", False)
    monkeypatch.setattr(settings, "PUBLIC_URL", None)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an AsyncClient for the FastAPI app."""
    # Use ASGITransport for testing FastAPI apps
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    mcp_streamable.active_sessions.clear()
    mcp.legacy_sessions.clear()


@pytest.fixture
def protocol_headers() -> dict:
    return {"MCP-Protocol-Version": "2025-06-18"}


@pytest.fixture
def initialize_payload() -> dict:
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "initialize",
        "params": {
            "protocolVersion": "2025-06-18",
            "capabilities": {},
            "clientInfo": {"name": "TestClient", "version": "1.0.0"}
        }
    }
