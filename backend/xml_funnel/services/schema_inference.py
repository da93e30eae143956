"""
Column Schema Inference
Classifies every record field as date, number or string from sampled values
"""

import math
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import List, Optional, Sequence

from funnel_shared.models.common import ColumnType
from funnel_shared.models.xml_dataset import ColumnDefinition
from funnel_shared.utils.app_logger import get_logger

from xml_funnel.models import InferenceConfig
from xml_funnel.services.document_loader import XmlNode
from xml_funnel.services.schema_utils import format_display_name

logger = get_logger(__name__)


class ColumnSchemaInferer:
    """
    Sample-based column typing.

    Precedence (first match wins):
    1. date   - share of samples matching a fixed date pattern or a generic date parse
    2. number - share of samples parsing as a finite float
    3. string

    Date is checked before number on purpose: an all-digit value such as
    `20240115` parses both ways and is classified as a date.
    """

    # Fixed patterns, matched on shape only
    DATE_PATTERNS = [
        (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "YYYY-MM-DD"),
        (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "DD/MM/YYYY"),
        (re.compile(r"^\d{4}/\d{2}/\d{2}$"), "YYYY/MM/DD"),
        (re.compile(r"^\d{2}-\d{2}-\d{4}$"), "DD-MM-YYYY"),
    ]

    # Generic date parse: ISO 8601 first, then these layouts
    GENERIC_DATE_FORMATS = [
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%dT%H:%M",
        "%Y-%m-%d %H:%M",
        "%Y/%m/%d %H:%M:%S",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y",
        "%Y-%m",
        "%b %d, %Y",
        "%B %d, %Y",
        "%b %d %Y",
        "%B %d %Y",
        "%d %b %Y",
        "%d %B %Y",
        "%a, %d %b %Y",
    ]

    _BASIC_ISO_DATE = re.compile(r"^\d{8}$")
    _ISO_PREFIX = re.compile(r"^\d{4}-?\d{2}")

    @classmethod
    def column_tags(cls, first_member: XmlNode) -> List[str]:
        """Distinct immediate child tags of the first record, in document order."""
        return list(dict.fromkeys(first_member.child_tags()))

    @classmethod
    def collect_samples(
        cls, members: Sequence[XmlNode], tag: str, sample_size: int
    ) -> List[str]:
        """Up to `sample_size` non-empty direct-child texts for a tag."""
        samples: List[str] = []
        for member in members:
            child = member.find_child(tag)
            if child is None:
                continue
            value = child.text_content().strip()
            if value:
                samples.append(value)
                if len(samples) >= sample_size:
                    break
        return samples

    @classmethod
    def parse_generic_date(cls, value: str) -> Optional[datetime]:
        """Lenient date parse used after the fixed patterns."""
        value = value.strip()
        if not value:
            return None

        if cls._BASIC_ISO_DATE.match(value):
            try:
                return datetime.strptime(value, "%Y%m%d")
            except ValueError:
                return None

        if cls._ISO_PREFIX.match(value):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                pass

        for fmt in cls.GENERIC_DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue

        # RFC 2822, e.g. "Mon, 15 Jan 2024 10:30:00 +0000"
        if "," in value or ":" in value:
            try:
                return parsedate_to_datetime(value)
            except (TypeError, ValueError, IndexError):
                return None
        return None

    @classmethod
    def is_date_like(cls, value: str) -> bool:
        stripped = value.strip()
        if any(pattern.match(stripped) for pattern, _ in cls.DATE_PATTERNS):
            return True
        return cls.parse_generic_date(stripped) is not None

    @staticmethod
    def parse_number(value: str) -> Optional[float]:
        """Finite float value of a string, or None."""
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return number

    @classmethod
    def is_number_like(cls, value: str) -> bool:
        return cls.parse_number(value) is not None

    @classmethod
    def classify(cls, samples: Sequence[str], config: Optional[InferenceConfig] = None) -> ColumnType:
        """Column type for a list of non-empty samples."""
        config = config or InferenceConfig()
        if not samples:
            return ColumnType.STRING

        # ratio comparison: 10 * 0.7 is not exactly 7.0 in floating point
        total = len(samples)

        date_count = sum(1 for s in samples if cls.is_date_like(s))
        if date_count / total >= config.type_threshold:
            return ColumnType.DATE

        number_count = sum(1 for s in samples if cls.is_number_like(s))
        if number_count / total >= config.type_threshold:
            return ColumnType.NUMBER

        return ColumnType.STRING

    @classmethod
    def infer_columns(
        cls,
        members: Sequence[XmlNode],
        tags: Sequence[str],
        keys: Sequence[str],
        config: Optional[InferenceConfig] = None,
    ) -> List[ColumnDefinition]:
        """
        Build the column schema for the winning record group.

        Args:
            members: Record elements sharing the winning signature
            tags: Column tags (from the first member)
            keys: Row keys aligned with `tags`
            config: Sampling rules

        Returns:
            ColumnDefinition list in tag order
        """
        config = config or InferenceConfig()
        columns: List[ColumnDefinition] = []
        for tag, key in zip(tags, keys):
            samples = cls.collect_samples(members, tag, config.sample_size)
            column_type = cls.classify(samples, config)
            logger.debug(f"Column '{tag}': {len(samples)} samples -> {column_type.value}")
            columns.append(
                ColumnDefinition(
                    name=tag,
                    display_name=format_display_name(tag),
                    type=column_type,
                    key=key,
                )
            )
        return columns
