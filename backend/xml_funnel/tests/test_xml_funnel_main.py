from __future__ import annotations

import pytest
from fastapi import FastAPI

from xml_funnel import main as xml_funnel_main
from xml_funnel.services.dataset_store import InMemoryDatasetStore


@pytest.mark.asyncio
async def test_root_and_health() -> None:
    root = await xml_funnel_main.root()
    assert root["service"] == "xml-funnel"
    assert root["status"] == "running"
    assert root["endpoints"]["parse"] == "/api/v1/xml/parse"

    health = await xml_funnel_main.health_check()
    assert health["status"] == "success"
    assert health["data"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_lifespan_provides_a_dataset_store() -> None:
    app = FastAPI()

    async with xml_funnel_main.lifespan(app):
        assert isinstance(app.state.dataset_store, InMemoryDatasetStore)


def test_app_registers_routes() -> None:
    paths = xml_funnel_main.app.openapi()["paths"]

    assert "/api/v1/xml/parse" in paths
    assert "/api/v1/tenants/{tenant_id}/dashboards/{dashboard_id}/upload-xml" in paths
    assert "/health" in paths
