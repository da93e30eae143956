"""
행 추출 테스트
"""

from __future__ import annotations

import pytest

from funnel_shared.models.common import ColumnType
from funnel_shared.models.xml_dataset import ColumnDefinition
from xml_funnel.models import ParseOptions
from xml_funnel.services.document_loader import load_document
from xml_funnel.services.row_extraction import RowExtractor

COLUMNS = [
    ColumnDefinition(name="Name", display_name="Name", type=ColumnType.STRING, key="name"),
    ColumnDefinition(name="Qty", display_name="Qty", type=ColumnType.NUMBER, key="qty"),
]

DOC = """
<Orders>
  <Order><Name>A</Name><Qty>5</Qty></Order>
  <Order><Name></Name><Qty>abc</Qty></Order>
  <Order><Name>C</Name><Qty>0</Qty></Order>
  <Order><Name>D <b>bold</b></Name></Order>
</Orders>
"""


@pytest.fixture
def members():
    return load_document(DOC).children


def test_skip_empty_fields_drops_empty_strings_but_keeps_zero(members) -> None:
    extracted = RowExtractor.extract(members, COLUMNS, ParseOptions(skip_empty_fields=True))

    assert list(extracted.rows) == [
        {"name": "A", "qty": 5.0},
        {"qty": 0.0},
        {"name": "C", "qty": 0.0},
        {"name": "D bold", "qty": 0.0},
    ]


def test_keep_empty_fields_emits_every_column(members) -> None:
    extracted = RowExtractor.extract(members, COLUMNS, ParseOptions(skip_empty_fields=False))

    assert extracted.rows[1] == {"name": "", "qty": 0.0}
    assert all(set(row) == {"name", "qty"} for row in extracted.rows)


def test_unparsable_and_missing_numbers_default_to_zero(members) -> None:
    extracted = RowExtractor.extract(members, COLUMNS, ParseOptions())

    # "abc" and the missing <Qty> of the last order
    assert extracted.coercion_defaults == 2
    assert all(isinstance(row["qty"], float) for row in extracted.rows)


def test_max_records_truncates_rows_but_not_total(members) -> None:
    extracted = RowExtractor.extract(members, COLUMNS, ParseOptions(max_records=2))

    assert len(extracted.rows) == 2
    assert extracted.total_records == 4


def test_read_cell_uses_direct_child_only() -> None:
    member = load_document("<Order><Meta><Name>nested</Name></Meta></Order>")

    assert RowExtractor.read_cell(member, "Name") == ""


@pytest.mark.parametrize("value", [0, -1, "10", True, 2.5])
def test_parse_options_reject_invalid_max_records(value) -> None:
    with pytest.raises(ValueError):
        ParseOptions(max_records=value)
