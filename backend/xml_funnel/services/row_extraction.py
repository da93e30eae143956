"""
Row extraction & normalization

Maps record elements into flat rows keyed by column key. Numeric coercion
failures are not errors: the cell becomes 0 and the parse continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from funnel_shared.models.common import CellValue, ColumnType, DataRow
from funnel_shared.models.xml_dataset import ColumnDefinition
from funnel_shared.utils.app_logger import get_logger

from xml_funnel.models import ParseOptions
from xml_funnel.services.document_loader import XmlNode
from xml_funnel.services.schema_inference import ColumnSchemaInferer

logger = get_logger(__name__)

NUMBER_DEFAULT = 0.0


@dataclass(frozen=True)
class ExtractedRows:
    rows: Tuple[DataRow, ...]
    total_records: int
    coercion_defaults: int = 0


class RowExtractor:
    """Turns matched record elements into rows under ParseOptions limits."""

    @staticmethod
    def read_cell(member: XmlNode, tag: str) -> str:
        """Text of the first direct child with `tag`, or "" if absent."""
        child = member.find_child(tag)
        if child is None:
            return ""
        return child.text_content().strip()

    @staticmethod
    def coerce_number(text: str) -> Tuple[float, bool]:
        """(value, defaulted) for a number column cell."""
        number = ColumnSchemaInferer.parse_number(text)
        if number is None:
            return NUMBER_DEFAULT, True
        return number, False

    @classmethod
    def build_row(
        cls,
        member: XmlNode,
        columns: Sequence[ColumnDefinition],
        skip_empty_fields: bool,
    ) -> Tuple[DataRow, int]:
        row: DataRow = {}
        defaults = 0
        for column in columns:
            text = cls.read_cell(member, column.name)
            value: CellValue
            if column.type == ColumnType.NUMBER:
                value, defaulted = cls.coerce_number(text)
                defaults += int(defaulted)
            else:
                value = text

            # numeric 0 is a value, only empty strings are skipped
            if skip_empty_fields and value == "":
                continue
            row[column.key] = value
        return row, defaults

    @classmethod
    def extract(
        cls,
        members: Sequence[XmlNode],
        columns: Sequence[ColumnDefinition],
        options: ParseOptions,
    ) -> ExtractedRows:
        """
        Extract up to `options.max_records` rows.

        `total_records` is the full member count, taken before truncation, so
        callers can re-run with a larger limit and trust it as the dataset size.
        """
        total_records = len(members)
        rows: List[DataRow] = []
        coercion_defaults = 0

        for member in members[: options.max_records]:
            row, defaults = cls.build_row(member, columns, options.skip_empty_fields)
            rows.append(row)
            coercion_defaults += defaults

        if coercion_defaults:
            logger.debug(f"{coercion_defaults} numeric cells defaulted to {NUMBER_DEFAULT}")

        return ExtractedRows(
            rows=tuple(rows),
            total_records=total_records,
            coercion_defaults=coercion_defaults,
        )
