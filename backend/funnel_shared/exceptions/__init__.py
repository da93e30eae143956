"""
도메인 예외 정의
도메인별로 구체적인 예외를 정의하여 명확한 에러 처리
"""

from .base import DomainException
from .xml_ingest import NoRepeatingStructureError, XmlIngestError, XmlSyntaxError


class DatasetNotFoundError(DomainException):
    """저장된 데이터셋을 찾을 수 없을 때 발생하는 예외"""

    def __init__(self, tenant_id: str, dashboard_id: str):
        super().__init__(
            message=f"No XML dataset stored for tenant '{tenant_id}', dashboard '{dashboard_id}'",
            code="DATASET_NOT_FOUND",
            details={"tenant_id": tenant_id, "dashboard_id": dashboard_id},
        )


class UnknownColumnsError(DomainException):
    """선택한 컬럼이 데이터셋에 없을 때 발생하는 예외"""

    def __init__(self, columns: list):
        super().__init__(
            message=f"Unknown columns: {', '.join(columns)}",
            code="UNKNOWN_COLUMNS",
            details={"columns": columns},
        )


__all__ = [
    # Base
    "DomainException",

    # XML ingest
    "XmlIngestError",
    "XmlSyntaxError",
    "NoRepeatingStructureError",

    # Dataset store
    "DatasetNotFoundError",
    "UnknownColumnsError",
]
