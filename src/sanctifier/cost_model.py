"""Fixed cost tables shared by the ledger-size and gas estimators.

Type sizes approximate the serialized byte width of a value in contract
storage. Instruction costs are synthetic units; they rank functions
against each other and are not a model of any real VM.
"""

from __future__ import annotations

from typing import Optional

from .models import SizeWarningLevel
from .scanning.syntax import ArrayType, PathType, TypeNode

# === Type sizes (bytes) ===
PRIMITIVE_SIZES: dict[str, int] = {
    "u32": 4,
    "i32": 4,
    "bool": 4,
    "u64": 8,
    "i64": 8,
    "u128": 16,
    "i128": 16,
    "I128": 16,
    "U128": 16,
    "Address": 32,
    "Bytes": 64,
    "BytesN": 64,
    "String": 64,
    "Symbol": 64,
}

VEC_HEADER_SIZE = 8
VEC_UNKNOWN_SIZE = 128
MAP_HEADER_SIZE = 16
MAP_UNKNOWN_SIZE = 128
OPTION_TAG_SIZE = 1
OPTION_UNKNOWN_SIZE = 32
NAMED_TYPE_SIZE = 32
ARRAY_UNKNOWN_SIZE = 64
OTHER_TYPE_SIZE = 8
ENUM_DISCRIMINANT_SIZE = 4

# Strict mode flags anything at half the limit or above
STRICT_FRACTION = 0.5

# === Gas model (synthetic instructions / stack bytes) ===
BASE_INSTRUCTIONS = 50
BASE_MEMORY = 32
BINARY_OP_COST = 5
CALL_COST = 20
STORAGE_METHOD_COST = 1000
AUTH_METHOD_COST = 500
METHOD_COST = 25
LET_COST = 2
LET_UNTYPED_MEMORY = 8
LOOP_OVERHEAD = 50
# Stand-in for ~10 iterations; trip counts are never inferred
LOOP_ITERATION_FACTOR = 10

STORAGE_METHODS = frozenset({"get", "set", "has", "update", "remove"})
AUTH_METHODS = frozenset({"require_auth", "require_auth_for_args"})

# name -> (instructions, memory)
COLLECTION_MACROS = frozenset({"vec", "map"})
COLLECTION_MACRO_COST = (50, 128)
SYMBOL_MACROS = frozenset({"symbol_short", "String"})
SYMBOL_MACRO_COST = (10, 32)
OTHER_MACRO_COST = (10, 0)


def estimate_type_size(ty: Optional[TypeNode]) -> int:
    """Estimate the serialized size of a type in bytes.

    Recurses through generic arguments and array elements. Unknown named
    types cost a flat 32 bytes; other type forms (references, tuples,
    slices) cost 8.
    """
    if isinstance(ty, PathType):
        name = ty.name
        if name in PRIMITIVE_SIZES:
            return PRIMITIVE_SIZES[name]
        if name == "Vec":
            if ty.args:
                return VEC_HEADER_SIZE + estimate_type_size(ty.args[0])
            return VEC_UNKNOWN_SIZE
        if name == "Map":
            inner = sum(estimate_type_size(arg) for arg in ty.args)
            if inner > 0:
                return MAP_HEADER_SIZE + 2 * inner
            return MAP_UNKNOWN_SIZE
        if name == "Option":
            if ty.args:
                return OPTION_TAG_SIZE + estimate_type_size(ty.args[0])
            return OPTION_UNKNOWN_SIZE
        return NAMED_TYPE_SIZE
    if isinstance(ty, ArrayType):
        if ty.length is not None:
            return ty.length * estimate_type_size(ty.element)
        return ARRAY_UNKNOWN_SIZE
    return OTHER_TYPE_SIZE


def classify_size(
    size: int,
    limit: int,
    approaching_threshold: float,
    strict_mode: bool = False,
) -> Optional[SizeWarningLevel]:
    """Classify an estimated size against the ledger entry limit.

    Returns:
        ``EXCEEDS_LIMIT``, ``APPROACHING_LIMIT`` or None when the size is
        comfortably below the threshold.
    """
    if size >= limit or (strict_mode and size >= limit * STRICT_FRACTION):
        return SizeWarningLevel.EXCEEDS_LIMIT
    if size >= limit * approaching_threshold:
        return SizeWarningLevel.APPROACHING_LIMIT
    return None
