"""
XML 수집(ingest) 관련 예외

Every engine failure is terminal: the input text is immutable per call, so
retrying the same document reproduces the same error.
"""

from typing import Optional

from .base import DomainException


class XmlIngestError(DomainException):
    """XML 파싱 엔진 기본 예외"""

    def __init__(self, message: str, code: str = "XML_INGEST_ERROR", details: dict = None):
        super().__init__(message=message, code=code, details=details)


class XmlSyntaxError(XmlIngestError):
    """Malformed markup anywhere in the source text"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        details = {}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        super().__init__(
            message=f"Invalid XML: {message}",
            code="XML_SYNTAX_ERROR",
            details=details,
        )
        self.line = line
        self.column = column


class NoRepeatingStructureError(XmlIngestError):
    """Well-formed document without any element that owns child elements"""

    def __init__(self, root_element: Optional[str] = None):
        super().__init__(
            message="No repeating record structure found in XML document",
            code="NO_REPEATING_STRUCTURE",
            details={"root_element": root_element} if root_element else {},
        )
