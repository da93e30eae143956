from __future__ import annotations

from datetime import datetime, timezone

import pytest

from funnel_shared.exceptions import DatasetNotFoundError, UnknownColumnsError
from xml_funnel.services.dataset_store import (
    DEFAULT_FILE_NAME,
    InMemoryDatasetStore,
    build_upload_record,
    content_placeholder,
)
from xml_funnel.services.xml_parser import UniversalXmlParser

XML = "<Orders>" + "".join(
    f"<Order><Id>{i}</Id><Amount>{i * 10}</Amount></Order>" for i in range(1, 8)
) + "</Orders>"


@pytest.fixture
def result():
    return UniversalXmlParser().parse(XML)


def test_build_upload_record_inlines_small_documents(result) -> None:
    uploaded_at = datetime(2024, 1, 15, tzinfo=timezone.utc)

    record = build_upload_record(result, XML, "orders.xml", uploaded_at=uploaded_at)

    assert record.file_name == "orders.xml"
    assert record.file_size == len(XML.encode("utf-8"))
    assert record.xml_content == XML
    assert record.uploaded_at == uploaded_at
    assert record.total_records == 7
    assert record.available_columns == ["id", "amount"]
    assert len(record.sample_records) == 5
    assert record.selected_columns == []


def test_build_upload_record_replaces_large_documents(result) -> None:
    size = len(XML.encode("utf-8"))

    record = build_upload_record(result, XML, inline_max_bytes=size, sample_limit=2)

    assert record.file_name == DEFAULT_FILE_NAME
    assert record.xml_content == content_placeholder(size)
    assert record.xml_content == f"[XML content too large to store inline: {size} bytes]"
    assert len(record.sample_records) == 2


def test_file_size_counts_utf8_bytes(result) -> None:
    text = XML.replace("<Orders>", "<Orders><!-- 한글 -->")

    record = build_upload_record(result, text)

    assert record.file_size == len(text.encode("utf-8"))
    assert record.file_size > len(text)


@pytest.mark.asyncio
async def test_store_is_keyed_by_tenant_and_dashboard(result) -> None:
    store = InMemoryDatasetStore()
    record = build_upload_record(result, XML)

    await store.save("tenant-a", "dash-1", record)

    assert await store.get("tenant-a", "dash-1") == record
    assert await store.get("tenant-b", "dash-1") is None
    assert await store.get("tenant-a", "dash-2") is None


@pytest.mark.asyncio
async def test_update_selected_columns(result) -> None:
    store = InMemoryDatasetStore()
    await store.save("t", "d", build_upload_record(result, XML))

    updated = await store.update_selected_columns("t", "d", ["amount", "id", "amount"])

    assert updated.selected_columns == ["amount", "id"]
    assert (await store.get("t", "d")).selected_columns == ["amount", "id"]


@pytest.mark.asyncio
async def test_update_selected_columns_errors(result) -> None:
    store = InMemoryDatasetStore()

    with pytest.raises(DatasetNotFoundError):
        await store.update_selected_columns("t", "d", ["id"])

    await store.save("t", "d", build_upload_record(result, XML))
    with pytest.raises(UnknownColumnsError) as exc_info:
        await store.update_selected_columns("t", "d", ["id", "nope"])
    assert exc_info.value.details == {"columns": ["nope"]}

    store.clear()
    assert await store.get("t", "d") is None
