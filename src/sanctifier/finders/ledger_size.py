"""Persisted layout types that approach the entry size limit.

Scope: top-level structs and enums carrying ``#[contracttype]``.
Struct size is the sum of field sizes; enum size is the discriminant
plus the largest variant.
"""

from __future__ import annotations

from typing import Optional

from ..cost_model import ENUM_DISCRIMINANT_SIZE, classify_size, estimate_type_size
from ..models import SizeWarning
from ..scanning.syntax import Enum, SourceFile, Struct, has_attribute

LAYOUT_MARKER = "contracttype"


def struct_size(item: Struct) -> int:
    return sum(estimate_type_size(ty) for ty in item.fields)


def enum_size(item: Enum) -> int:
    largest = max(
        (sum(estimate_type_size(ty) for ty in variant.fields) for variant in item.variants),
        default=0,
    )
    return ENUM_DISCRIMINANT_SIZE + largest


class LedgerSizeFinder:
    """Sizes ``#[contracttype]`` items and classifies them against the limit.

    Args:
        limit: Ledger entry size limit in bytes
        approaching_threshold: Fraction of the limit that triggers a warning
        strict_mode: Treat anything at half the limit as exceeding it
    """

    name = "ledger_size"

    def __init__(self, limit: int, approaching_threshold: float, strict_mode: bool = False) -> None:
        self.limit = limit
        self.approaching_threshold = approaching_threshold
        self.strict_mode = strict_mode

    def find(self, source: SourceFile) -> list[SizeWarning]:
        warnings: list[SizeWarning] = []
        for item in source.items:
            size: Optional[int] = None
            if isinstance(item, Struct) and has_attribute(item.attributes, LAYOUT_MARKER):
                size = struct_size(item)
            elif isinstance(item, Enum) and has_attribute(item.attributes, LAYOUT_MARKER):
                size = enum_size(item)
            if size is None:
                continue

            level = classify_size(size, self.limit, self.approaching_threshold, self.strict_mode)
            if level is not None:
                warnings.append(
                    SizeWarning(
                        struct_name=item.name,
                        estimated_size=size,
                        limit=self.limit,
                        level=level,
                    )
                )
        return warnings
