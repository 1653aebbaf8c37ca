"""Tests for the application-wide error handlers."""

import pytest
from httpx import ASGITransport, AsyncClient

from pocketpacks.api.dependencies import get_catalog, get_registry
from pocketpacks.main import app
from pocketpacks.services.catalog import CatalogRegistry


class BrokenRegistry:
    async def get(self, save_id: str):
        raise RuntimeError(f"internal state for {save_id}")


@pytest.fixture
async def broken_client(catalog: CatalogRegistry):
    app.dependency_overrides[get_registry] = lambda: BrokenRegistry()
    app.dependency_overrides[get_catalog] = lambda: catalog

    # The server error handler responds and then re-raises.
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestUnknownErrors:
    async def test_unhandled_error_becomes_unknown_failure(
        self, broken_client: AsyncClient
    ) -> None:
        response = await broken_client.get("/collection/save-1/BLB")

        assert response.status_code == 500
        data = response.json()
        assert data["outcome"] == "unknown_failure"
        assert data["failure"]["kind"] == "unknown"
        assert data["failure"]["detail"] == "RuntimeError"
        assert "internal state" not in response.text

    async def test_known_errors_keep_their_status(self, client: AsyncClient) -> None:
        response = await client.post("/packs/save-1/open", json={"set_code": "XYZ"})

        assert response.status_code == 404
        assert response.json()["outcome"] == "known_failure"
