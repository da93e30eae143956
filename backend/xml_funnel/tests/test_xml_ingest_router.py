from __future__ import annotations

import time

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from funnel_shared.config.settings import ApplicationSettings, XmlParsingSettings
from funnel_shared.models.xml_dataset import ColumnSelectionRequest, XmlParseRequest, XmlStructureRequest
from xml_funnel import main as xml_funnel_main
from xml_funnel.routers import xml_ingest_router as router
from xml_funnel.services.dataset_store import InMemoryDatasetStore
from xml_funnel.services.xml_parser import UniversalXmlParser

SALES_XML = """
<Sales>
  <Sale><Product>Apple</Product><Qty>3</Qty><Price>1.5</Price><Date>2024-03-01</Date></Sale>
  <Sale><Product>Pear</Product><Qty>1</Qty><Price>2</Price><Date>2024-03-05</Date></Sale>
  <Sale><Product>Apple</Product><Qty>2</Qty><Price>1.5</Price><Date>2024-02-28</Date></Sale>
</Sales>
"""


class _FailingParser:
    def parse(self, xml_text, options=None):  # noqa: ANN001
        raise RuntimeError("boom")

    def analyze_structure(self, xml_text):  # noqa: ANN001
        raise RuntimeError("boom")


class _SlowParser:
    def parse(self, xml_text, options=None):  # noqa: ANN001
        time.sleep(0.3)
        return UniversalXmlParser().parse(xml_text, options)


def _settings(**parsing) -> ApplicationSettings:
    return ApplicationSettings(parsing=XmlParsingSettings(**parsing))


def test_build_parse_options_prefers_request_values() -> None:
    parsing = XmlParsingSettings(default_max_records=50, default_skip_empty_fields=False)

    defaults = router.build_parse_options(XmlParseRequest(xml_content="<a/>"), parsing)
    explicit = router.build_parse_options(
        XmlParseRequest(xml_content="<a/>", max_records=3, skip_empty_fields=True, normalize_field_names=False),
        parsing,
    )

    assert (defaults.max_records, defaults.skip_empty_fields, defaults.normalize_field_names) == (50, False, True)
    assert (explicit.max_records, explicit.skip_empty_fields, explicit.normalize_field_names) == (3, True, False)


def test_get_xml_parser_uses_inference_settings() -> None:
    parser = router.get_xml_parser(_settings(type_sample_size=4, type_threshold=0.9))

    assert parser.inference.sample_size == 4
    assert parser.inference.type_threshold == 0.9


@pytest.mark.asyncio
async def test_parse_xml_document_success_and_errors() -> None:
    request = XmlParseRequest(xml_content=SALES_XML, max_records=2)
    response = await router.parse_xml_document(request, parser=UniversalXmlParser(), app_settings=_settings())

    assert response.record_element == "Sale"
    assert response.total_records == 3
    assert len(response.records) == 2
    assert response.available_columns == ["product", "qty", "price", "date"]

    with pytest.raises(HTTPException) as exc_info:
        await router.parse_xml_document(
            XmlParseRequest(xml_content="<a><b></a>"), parser=UniversalXmlParser(), app_settings=_settings()
        )
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["code"] == "XML_SYNTAX_ERROR"

    with pytest.raises(HTTPException) as exc_info:
        await router.parse_xml_document(request, parser=_FailingParser(), app_settings=_settings())
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_parse_timeout_maps_to_gateway_timeout() -> None:
    request = XmlParseRequest(xml_content=SALES_XML)

    with pytest.raises(HTTPException) as exc_info:
        await router.parse_xml_document(
            request, parser=_SlowParser(), app_settings=_settings(parse_timeout_seconds=0.05)
        )

    assert exc_info.value.status_code == 504


@pytest.mark.asyncio
async def test_analyze_xml_structure_errors() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await router.analyze_xml_structure(
            XmlStructureRequest(xml_content="<Root/>"), parser=UniversalXmlParser()
        )
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail["code"] == "NO_REPEATING_STRUCTURE"

    with pytest.raises(HTTPException) as exc_info:
        await router.analyze_xml_structure(XmlStructureRequest(xml_content=SALES_XML), parser=_FailingParser())
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_upload_then_read_and_select_columns() -> None:
    store = InMemoryDatasetStore()
    request = XmlParseRequest(xml_content=SALES_XML, file_name="sales.xml")

    uploaded = await router.upload_xml_dataset(
        "tenant-1", "dash-1", request, parser=UniversalXmlParser(), store=store, app_settings=_settings()
    )

    assert uploaded.success is True
    assert uploaded.file_name == "sales.xml"
    assert uploaded.parse_result.summary.total_value == 3 * 1.5 + 1 * 2 + 2 * 1.5

    record = await router.get_xml_dataset("tenant-1", "dash-1", store=store)
    assert record.total_records == 3
    assert record.xml_content == SALES_XML

    updated = await router.select_dataset_columns(
        "tenant-1", "dash-1", ColumnSelectionRequest(selected_columns=["qty"]), store=store
    )
    assert updated.selected_columns == ["qty"]

    with pytest.raises(HTTPException) as exc_info:
        await router.select_dataset_columns(
            "tenant-1", "dash-1", ColumnSelectionRequest(selected_columns=["missing"]), store=store
        )
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        await router.get_xml_dataset("tenant-2", "dash-1", store=store)
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_failed_upload_stores_nothing() -> None:
    store = InMemoryDatasetStore()

    with pytest.raises(HTTPException) as exc_info:
        await router.upload_xml_dataset(
            "t", "d", XmlParseRequest(xml_content="<a><b></a>"),
            parser=UniversalXmlParser(), store=store, app_settings=_settings(),
        )

    assert exc_info.value.status_code == 422
    assert await store.get("t", "d") is None


@pytest.fixture
def client():
    xml_funnel_main.app.state.dataset_store = InMemoryDatasetStore()
    with TestClient(xml_funnel_main.app) as test_client:
        yield test_client


def test_http_parse_uses_camel_case(client) -> None:
    response = client.post("/api/v1/xml/parse", json={"xmlContent": SALES_XML, "maxRecords": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["recordElement"] == "Sale"
    assert body["totalRecords"] == 3
    assert body["availableColumns"] == ["product", "qty", "price", "date"]
    assert body["records"] == [{"product": "Apple", "qty": 3.0, "price": 1.5, "date": "2024-03-01"}]
    assert body["columns"][3] == {"name": "Date", "displayName": "Date", "type": "date", "key": "date"}


def test_http_parse_rejects_bad_input(client) -> None:
    malformed = client.post("/api/v1/xml/parse", json={"xmlContent": "<a><b></a>"})
    assert malformed.status_code == 422
    assert malformed.json()["detail"]["code"] == "XML_SYNTAX_ERROR"

    empty = client.post("/api/v1/xml/parse", json={"xmlContent": ""})
    assert empty.status_code == 422

    invalid_limit = client.post("/api/v1/xml/parse", json={"xmlContent": SALES_XML, "maxRecords": 0})
    assert invalid_limit.status_code == 422


def test_http_dataset_flow(client) -> None:
    base = "/api/v1/tenants/acme/dashboards/main"

    assert client.get(f"{base}/xml-data").status_code == 404

    uploaded = client.post(f"{base}/upload-xml", json={"xmlContent": SALES_XML, "fileName": "sales.xml"})
    assert uploaded.status_code == 200
    assert uploaded.json()["parseResult"]["totalRecords"] == 3

    stored = client.get(f"{base}/xml-data").json()
    assert stored["fileName"] == "sales.xml"
    assert len(stored["sampleRecords"]) == 3

    selected = client.put(f"{base}/columns", json={"selectedColumns": ["product", "qty"]})
    assert selected.status_code == 200
    assert selected.json()["selectedColumns"] == ["product", "qty"]

    rejected = client.put(f"{base}/columns", json={"selectedColumns": ["nope"]})
    assert rejected.status_code == 400
    assert rejected.json()["detail"]["code"] == "UNKNOWN_COLUMNS"


def test_http_structure(client) -> None:
    response = client.post("/api/v1/xml/structure", json={"xmlContent": SALES_XML})

    assert response.status_code == 200
    body = response.json()
    assert body["recordElement"] == "Sale"
    assert body["detectedStructure"] == "Date,Price,Product,Qty"
