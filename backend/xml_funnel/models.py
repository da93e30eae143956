"""
XML Funnel engine options

Both option objects are immutable and handed to every call; the engine keeps
no configuration of its own between calls.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParseOptions:
    """Options controlling row extraction."""

    max_records: int = 1000
    skip_empty_fields: bool = True
    normalize_field_names: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_records, bool) or not isinstance(self.max_records, int):
            raise ValueError("max_records must be an integer")
        if self.max_records <= 0:
            raise ValueError("max_records must be a positive integer")


@dataclass(frozen=True)
class InferenceConfig:
    """Sampling rules for column type inference."""

    # Non-empty values collected per column
    sample_size: int = 10
    # Share of samples that must match a type (checked date first, then number)
    type_threshold: float = 0.7

    def __post_init__(self) -> None:
        if self.sample_size <= 0:
            raise ValueError("sample_size must be a positive integer")
        if not 0.0 < self.type_threshold <= 1.0:
            raise ValueError("type_threshold must be in (0, 1]")
