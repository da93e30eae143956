"""
Helpers for column naming: display labels and row-key normalization.
"""

from __future__ import annotations

import re
from typing import List, Sequence

_INTERNAL_CAPITAL = re.compile(r"(?<!^)([A-Z])")
_SEPARATORS = re.compile(r"[@\-\s]")
_CAPITAL = re.compile(r"[A-Z]")
_UNDERSCORE_RUN = re.compile(r"_+")


def format_display_name(tag_name: str) -> str:
    """`UnitCost` -> `Unit Cost`, `productName` -> `Product Name`."""
    spaced = _INTERNAL_CAPITAL.sub(r" \1", tag_name)
    if not spaced:
        return spaced
    return (spaced[0].upper() + spaced[1:]).strip()


def normalize_field_name(tag_name: str) -> str:
    """Normalize a raw tag name into a snake_case row key."""
    normalized = _SEPARATORS.sub("_", tag_name)
    normalized = _CAPITAL.sub(
        lambda m: ("_" if m.start() > 0 else "") + m.group(0).lower(), normalized
    )
    normalized = "".join(ch for ch in normalized if ch.isalnum() or ch == "_")
    normalized = _UNDERSCORE_RUN.sub("_", normalized).strip("_")
    if normalized and normalized[0].isdigit():
        normalized = "col_" + normalized
    if not normalized:
        normalized = "column"
    return normalized


def assign_field_keys(tag_names: Sequence[str], normalize: bool) -> List[str]:
    """
    Row keys for the given column tags, in the same order.

    Normalized keys that collide get `_2`, `_3`, ... suffixes in schema order,
    so the same tag list always yields the same keys.
    """
    if not normalize:
        return list(tag_names)

    keys: List[str] = []
    seen = set()
    for tag_name in tag_names:
        key = normalize_field_name(tag_name)
        if key in seen:
            suffix = 2
            while f"{key}_{suffix}" in seen:
                suffix += 1
            key = f"{key}_{suffix}"
        seen.add(key)
        keys.append(key)
    return keys
