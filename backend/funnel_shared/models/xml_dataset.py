"""
XML dataset models

Engine result fields cannot be reassigned (row lists are still plain lists,
built fresh per call). Results serialize with camelCase aliases, the shape the
dashboard widgets consume.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .common import ColumnType, DataRow


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ColumnDefinition(_FrozenCamelModel):
    """One inferred table field, derived from one record child tag"""

    name: str = Field(..., description="Original child tag name")
    display_name: str = Field(..., description="Human-formatted label")
    type: ColumnType = Field(..., description="Type fixed for the whole dataset")
    key: str = Field(..., description="Key used for this column inside rows")


class SummaryStats(_FrozenCamelModel):
    """Dataset-level KPIs derived from heuristic column roles"""

    total_rows: int = Field(default=0, ge=0)
    date_range_from: str = Field(default="")
    date_range_to: str = Field(default="")
    unique_entity_count: int = Field(default=0, ge=0)
    total_quantity: float = Field(default=0.0)
    total_value: float = Field(default=0.0)


class ParseResult(_FrozenCamelModel):
    """Typed tabular dataset produced from one XML document"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "columns": [
                    {"name": "UnitCost", "displayName": "Unit Cost", "type": "number", "key": "unit_cost"}
                ],
                "rows": [{"unit_cost": 2.5}],
                "detectedStructure": "ProductName,Quantity,UnitCost",
                "rootElement": "Inventory",
                "recordElement": "Item",
                "totalRecords": 1,
                "summary": {
                    "totalRows": 1,
                    "dateRangeFrom": "",
                    "dateRangeTo": "",
                    "uniqueEntityCount": 1,
                    "totalQuantity": 4.0,
                    "totalValue": 10.0,
                },
            }
        },
    )

    columns: List[ColumnDefinition]
    rows: List[DataRow]
    detected_structure: str = Field(..., description="Signature of the winning record group")
    root_element: str
    record_element: str
    total_records: int = Field(..., ge=0, description="Full match count before truncation")
    summary: SummaryStats

    @property
    def available_columns(self) -> List[str]:
        """Row keys in column order"""
        return [column.key for column in self.columns]


class StructureCandidate(_FrozenCamelModel):
    """A group of elements sharing one child-tag signature"""

    signature: str
    element_names: List[str] = Field(default_factory=list, description="Distinct member tags")
    count: int = Field(..., ge=1)


class StructureAnalysis(_FrozenCamelModel):
    """Structure-only view of a document (no rows, no types)"""

    root_element: str
    record_element: str
    detected_structure: str
    total_records: int = Field(..., ge=0)
    candidates: List[StructureCandidate] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# HTTP boundary models
# ---------------------------------------------------------------------------


class XmlParseRequest(_CamelModel):
    """Request for parsing an uploaded XML document"""

    xml_content: str = Field(..., min_length=1, description="Raw XML text")
    file_name: Optional[str] = Field(default=None, description="Original file name")
    max_records: Optional[int] = Field(default=None, ge=1, description="Row cap for this call")
    skip_empty_fields: Optional[bool] = None
    normalize_field_names: Optional[bool] = None


class XmlParseResponse(_CamelModel):
    """Parse response as consumed by the dashboard builder"""

    detected_structure: str
    root_element: str
    record_element: str
    total_records: int
    available_columns: List[str]
    records: List[DataRow]
    columns: List[ColumnDefinition] = Field(default_factory=list)
    summary: Optional[SummaryStats] = None

    @classmethod
    def from_result(cls, result: ParseResult) -> "XmlParseResponse":
        return cls(
            detected_structure=result.detected_structure,
            root_element=result.root_element,
            record_element=result.record_element,
            total_records=result.total_records,
            available_columns=result.available_columns,
            records=result.rows,
            columns=result.columns,
            summary=result.summary,
        )


class XmlStructureRequest(_CamelModel):
    """Request for structure-only analysis"""

    xml_content: str = Field(..., min_length=1)


class DatasetUploadRecord(_CamelModel):
    """What the dataset store keeps per tenant + dashboard"""

    file_name: str
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    file_size: int = Field(..., ge=0, description="UTF-8 size of the document in bytes")
    detected_structure: str
    root_element: str
    record_element: str
    total_records: int
    available_columns: List[str]
    sample_records: List[DataRow] = Field(default_factory=list)
    xml_content: str = Field(..., description="Verbatim document or a size placeholder")
    selected_columns: List[str] = Field(default_factory=list)


class XmlUploadResponse(_CamelModel):
    """Response for a persisted upload"""

    success: bool = True
    message: str = "XML file uploaded and parsed successfully"
    tenant_id: str
    dashboard_id: str
    file_name: str
    file_size: int
    uploaded_at: datetime
    parse_result: XmlParseResponse


class ColumnSelectionRequest(_CamelModel):
    """User-chosen subset of availableColumns"""

    selected_columns: List[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error body for engine failures"""

    message: str
    code: str
    details: Dict[str, Any] = Field(default_factory=dict)
