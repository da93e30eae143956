from __future__ import annotations

from funnel_shared.exceptions import (
    DatasetNotFoundError,
    DomainException,
    NoRepeatingStructureError,
    UnknownColumnsError,
    XmlIngestError,
    XmlSyntaxError,
)


def test_xml_syntax_error_payload() -> None:
    error = XmlSyntaxError("mismatched tag", line=1, column=9)

    assert isinstance(error, XmlIngestError)
    assert isinstance(error, DomainException)
    assert str(error) == "Invalid XML: mismatched tag"
    assert (error.line, error.column) == (1, 9)
    assert error.to_dict() == {
        "message": "Invalid XML: mismatched tag",
        "code": "XML_SYNTAX_ERROR",
        "details": {"line": 1, "column": 9},
    }


def test_xml_syntax_error_without_position() -> None:
    assert XmlSyntaxError("document is empty").details == {}


def test_no_repeating_structure_error() -> None:
    error = NoRepeatingStructureError("Root")

    assert isinstance(error, XmlIngestError)
    assert error.code == "NO_REPEATING_STRUCTURE"
    assert error.details == {"root_element": "Root"}
    assert NoRepeatingStructureError().details == {}


def test_dataset_store_errors_are_not_ingest_errors() -> None:
    missing = DatasetNotFoundError("t1", "d1")
    unknown = UnknownColumnsError(["a", "b"])

    assert not isinstance(missing, XmlIngestError)
    assert missing.details == {"tenant_id": "t1", "dashboard_id": "d1"}
    assert unknown.code == "UNKNOWN_COLUMNS"
    assert unknown.message == "Unknown columns: a, b"
