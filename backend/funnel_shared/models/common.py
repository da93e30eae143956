"""
Common data types and enums for XML Funnel
"""

from enum import Enum
from typing import Dict, Union


class ColumnType(str, Enum):
    """Column type inferred from sampled record values"""

    NUMBER = "number"
    DATE = "date"
    STRING = "string"


# A single cell of an extracted row: coerced number or raw text
CellValue = Union[float, str]

# One extracted record; key order follows the inferred column order
DataRow = Dict[str, CellValue]
