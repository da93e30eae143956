"""
Summary Aggregator

Derives dataset-level KPIs from an unknown schema by guessing column roles
from column names. The guesses live in a rule table; for each role the first
qualifying column in schema order is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from funnel_shared.models.common import ColumnType, DataRow
from funnel_shared.models.xml_dataset import ColumnDefinition, SummaryStats


@dataclass(frozen=True)
class ColumnRoleRule:
    """Case-insensitive substring match of a column name against keywords."""

    role: str
    keywords: Tuple[str, ...]
    numeric_only: bool = False

    def matches(self, column: ColumnDefinition) -> bool:
        if self.numeric_only and column.type != ColumnType.NUMBER:
            return False
        name = column.name.lower()
        return any(keyword in name for keyword in self.keywords)


ENTITY = "entity"
QUANTITY = "quantity"
LINE_QUANTITY = "line_quantity"
UNIT_COST = "unit_cost"
TOTAL = "total"

DEFAULT_ROLE_RULES: Dict[str, ColumnRoleRule] = {
    ENTITY: ColumnRoleRule(ENTITY, ("prod", "item", "name", "title")),
    QUANTITY: ColumnRoleRule(QUANTITY, ("qty", "quantity", "amount", "count"), numeric_only=True),
    LINE_QUANTITY: ColumnRoleRule(LINE_QUANTITY, ("qty", "quantity"), numeric_only=True),
    UNIT_COST: ColumnRoleRule(UNIT_COST, ("cost", "price", "value"), numeric_only=True),
    TOTAL: ColumnRoleRule(TOTAL, ("total", "amount", "revenue"), numeric_only=True),
}


def find_column(
    columns: Sequence[ColumnDefinition], rule: ColumnRoleRule
) -> Optional[ColumnDefinition]:
    """First column in schema order satisfying the rule."""
    for column in columns:
        if rule.matches(column):
            return column
    return None


def _number(row: DataRow, key: str) -> float:
    value = row.get(key, 0.0)
    return value if isinstance(value, (int, float)) else 0.0


class SummaryAggregator:
    """Pure, deterministic KPI computation over extracted rows."""

    def __init__(self, rules: Optional[Mapping[str, ColumnRoleRule]] = None):
        merged = dict(DEFAULT_ROLE_RULES)
        if rules:
            merged.update(rules)
        self.rules: Mapping[str, ColumnRoleRule] = merged

    def date_range(
        self, rows: Sequence[DataRow], columns: Sequence[ColumnDefinition]
    ) -> Tuple[str, str]:
        date_keys = [c.key for c in columns if c.type == ColumnType.DATE]
        if not date_keys:
            return "", ""

        pooled: List[str] = []
        for row in rows:
            for key in date_keys:
                value = row.get(key)
                if isinstance(value, str) and value:
                    pooled.append(value)
        if not pooled:
            return "", ""
        pooled.sort()
        return pooled[0], pooled[-1]

    def unique_entity_count(
        self, rows: Sequence[DataRow], columns: Sequence[ColumnDefinition]
    ) -> int:
        column = find_column(columns, self.rules[ENTITY])
        if column is None:
            return 0
        distinct = set()
        for row in rows:
            value = row.get(column.key)
            if value is None or value == "":
                continue
            distinct.add(value)
        return len(distinct)

    def total_quantity(
        self, rows: Sequence[DataRow], columns: Sequence[ColumnDefinition]
    ) -> float:
        column = find_column(columns, self.rules[QUANTITY])
        if column is None:
            return 0.0
        return sum(_number(row, column.key) for row in rows)

    def total_value(
        self, rows: Sequence[DataRow], columns: Sequence[ColumnDefinition]
    ) -> float:
        quantity = find_column(columns, self.rules[LINE_QUANTITY])
        cost = find_column(columns, self.rules[UNIT_COST])
        if quantity is not None and cost is not None:
            return sum(_number(row, quantity.key) * _number(row, cost.key) for row in rows)

        total = find_column(columns, self.rules[TOTAL])
        if total is not None:
            return sum(_number(row, total.key) for row in rows)
        return 0.0

    def summarize(
        self, rows: Sequence[DataRow], columns: Sequence[ColumnDefinition]
    ) -> SummaryStats:
        date_from, date_to = self.date_range(rows, columns)
        return SummaryStats(
            total_rows=len(rows),
            date_range_from=date_from,
            date_range_to=date_to,
            unique_entity_count=self.unique_entity_count(rows, columns),
            total_quantity=self.total_quantity(rows, columns),
            total_value=self.total_value(rows, columns),
        )
