"""
Universal XML Parser

Turns an arbitrary, schema-less XML document into a typed tabular dataset:

    text -> load_document -> RecordStructureDiscovery -> ColumnSchemaInferer
         -> RowExtractor -> SummaryAggregator -> ParseResult

Each call is single-pass and self-contained. A parser instance only holds
immutable configuration, so one instance can serve concurrent calls for
different tenants without locking.
"""

from __future__ import annotations

import time
from typing import List, Mapping, Optional, Union

from funnel_shared.models.common import DataRow
from funnel_shared.models.xml_dataset import ParseResult, StructureAnalysis
from funnel_shared.utils.app_logger import get_logger

from xml_funnel.models import InferenceConfig, ParseOptions
from xml_funnel.services.document_loader import load_document
from xml_funnel.services.row_extraction import RowExtractor
from xml_funnel.services.schema_inference import ColumnSchemaInferer
from xml_funnel.services.schema_utils import assign_field_keys
from xml_funnel.services.structure_discovery import RecordStructureDiscovery
from xml_funnel.services.summary_aggregator import ColumnRoleRule, SummaryAggregator

logger = get_logger(__name__)


class UniversalXmlParser:
    """XML → typed dataset engine."""

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        inference: Optional[InferenceConfig] = None,
        role_rules: Optional[Mapping[str, ColumnRoleRule]] = None,
    ):
        self.options = options or ParseOptions()
        self.inference = inference or InferenceConfig()
        self.aggregator = SummaryAggregator(role_rules)

    def parse(
        self, xml_text: Union[str, bytes], options: Optional[ParseOptions] = None
    ) -> ParseResult:
        """
        Parse a document into columns, rows and summary KPIs.

        Args:
            xml_text: Raw document text
            options: Per-call options (defaults to the instance options)

        Returns:
            A new ParseResult (fields are frozen; rows and columns are fresh
            lists owned by the caller)

        Raises:
            XmlSyntaxError: malformed markup anywhere in the document
            NoRepeatingStructureError: no element has a child element
        """
        opts = options or self.options
        started = time.perf_counter()

        root = load_document(xml_text)
        structure = RecordStructureDiscovery.discover(root)

        tags = ColumnSchemaInferer.column_tags(structure.members[0])
        keys = assign_field_keys(tags, opts.normalize_field_names)
        columns = ColumnSchemaInferer.infer_columns(structure.members, tags, keys, self.inference)

        extracted = RowExtractor.extract(structure.members, columns, opts)
        rows = list(extracted.rows)
        summary = self.aggregator.summarize(rows, columns)

        result = ParseResult(
            columns=columns,
            rows=rows,
            detected_structure=structure.signature,
            root_element=structure.root_element,
            record_element=structure.record_element,
            total_records=extracted.total_records,
            summary=summary,
        )

        logger.info(
            f"Parsed XML <{result.root_element}>: structure '{result.detected_structure}', "
            f"{len(rows)}/{result.total_records} records, {len(columns)} columns "
            f"in {time.perf_counter() - started:.4f}s"
        )
        return result

    def analyze_structure(self, xml_text: Union[str, bytes]) -> StructureAnalysis:
        """
        Structure-only analysis: every signature group plus the winner.

        Raises the same errors as `parse`.
        """
        root = load_document(xml_text)
        structure = RecordStructureDiscovery.discover(root)
        return StructureAnalysis(
            root_element=structure.root_element,
            record_element=structure.record_element,
            detected_structure=structure.signature,
            total_records=structure.total_records,
            candidates=list(structure.candidates),
        )

    @staticmethod
    def get_sample_data(result: ParseResult, sample_size: int = 5) -> List[DataRow]:
        """First `sample_size` rows of a result, copied."""
        return [dict(row) for row in result.rows[: max(sample_size, 0)]]


def parse_xml(xml_text: Union[str, bytes], options: Optional[ParseOptions] = None) -> ParseResult:
    """Parse with default inference rules."""
    return UniversalXmlParser().parse(xml_text, options)
