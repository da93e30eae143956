"""
In-memory dataset store and upload-record builder.

The store is owned by the application instance (app.state), never by module
globals. In production, back DatasetStoreInterface with Firestore/DB.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from funnel_shared.exceptions import DatasetNotFoundError, UnknownColumnsError
from funnel_shared.interfaces.dataset_store import DatasetStoreInterface
from funnel_shared.models.xml_dataset import DatasetUploadRecord, ParseResult

from xml_funnel.services.xml_parser import UniversalXmlParser

DEFAULT_FILE_NAME = "uploaded_data.xml"


def content_placeholder(size: int) -> str:
    return f"[XML content too large to store inline: {size} bytes]"


def build_upload_record(
    result: ParseResult,
    xml_text: str,
    file_name: Optional[str] = None,
    *,
    sample_limit: int = 5,
    inline_max_bytes: int = 1024 * 1024,
    uploaded_at: Optional[datetime] = None,
) -> DatasetUploadRecord:
    """
    Build what the dataset store persists for one upload.

    Documents at or above `inline_max_bytes` (UTF-8) are replaced by a size
    placeholder; sample records are capped at `sample_limit`.
    """
    file_size = len(xml_text.encode("utf-8"))
    stored_content = xml_text if file_size < inline_max_bytes else content_placeholder(file_size)

    return DatasetUploadRecord(
        file_name=file_name or DEFAULT_FILE_NAME,
        uploaded_at=uploaded_at or datetime.now(timezone.utc),
        file_size=file_size,
        detected_structure=result.detected_structure,
        root_element=result.root_element,
        record_element=result.record_element,
        total_records=result.total_records,
        available_columns=result.available_columns,
        sample_records=UniversalXmlParser.get_sample_data(result, sample_limit),
        xml_content=stored_content,
    )


class InMemoryDatasetStore(DatasetStoreInterface):
    """Dataset store keyed by (tenant_id, dashboard_id)."""

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], DatasetUploadRecord] = {}

    async def save(
        self, tenant_id: str, dashboard_id: str, record: DatasetUploadRecord
    ) -> DatasetUploadRecord:
        self._records[(tenant_id, dashboard_id)] = record
        return record

    async def get(self, tenant_id: str, dashboard_id: str) -> Optional[DatasetUploadRecord]:
        return self._records.get((tenant_id, dashboard_id))

    async def update_selected_columns(
        self, tenant_id: str, dashboard_id: str, columns: List[str]
    ) -> DatasetUploadRecord:
        record = self._records.get((tenant_id, dashboard_id))
        if record is None:
            raise DatasetNotFoundError(tenant_id, dashboard_id)

        unknown = [c for c in columns if c not in record.available_columns]
        if unknown:
            raise UnknownColumnsError(unknown)

        updated = record.model_copy(update={"selected_columns": list(dict.fromkeys(columns))})
        self._records[(tenant_id, dashboard_id)] = updated
        return updated

    def clear(self) -> None:
        self._records.clear()
