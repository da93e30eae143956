"""
Shared model definitions for XML Funnel
"""

from .common import CellValue, ColumnType, DataRow
from .responses import ApiResponse
from .xml_dataset import (
    ColumnDefinition,
    ColumnSelectionRequest,
    DatasetUploadRecord,
    ErrorDetail,
    ParseResult,
    StructureAnalysis,
    StructureCandidate,
    SummaryStats,
    XmlParseRequest,
    XmlParseResponse,
    XmlStructureRequest,
    XmlUploadResponse,
)

__all__ = [
    # common
    "CellValue",
    "ColumnType",
    "DataRow",
    # responses
    "ApiResponse",
    # xml dataset
    "ColumnDefinition",
    "ColumnSelectionRequest",
    "DatasetUploadRecord",
    "ErrorDetail",
    "ParseResult",
    "StructureAnalysis",
    "StructureCandidate",
    "SummaryStats",
    "XmlParseRequest",
    "XmlParseResponse",
    "XmlStructureRequest",
    "XmlUploadResponse",
]
