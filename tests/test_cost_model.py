"""Tests for type-size estimation and size classification."""

from sanctifier.cost_model import classify_size, estimate_type_size
from sanctifier.models import SizeWarningLevel
from sanctifier.scanning.syntax import ArrayType, OtherType, PathType


class TestEstimateTypeSize:
    def test_primitives(self):
        assert estimate_type_size(PathType("u32")) == 4
        assert estimate_type_size(PathType("bool")) == 4
        assert estimate_type_size(PathType("i64")) == 8
        assert estimate_type_size(PathType("u128")) == 16
        assert estimate_type_size(PathType("Address")) == 32
        assert estimate_type_size(PathType("Bytes")) == 64
        assert estimate_type_size(PathType("Symbol")) == 64

    def test_vec(self):
        assert estimate_type_size(PathType("Vec", (PathType("u32"),))) == 12
        assert estimate_type_size(PathType("Vec")) == 128

    def test_map(self):
        ty = PathType("Map", (PathType("Address"), PathType("i128")))
        assert estimate_type_size(ty) == 16 + 2 * (32 + 16)
        assert estimate_type_size(PathType("Map")) == 128

    def test_option(self):
        assert estimate_type_size(PathType("Option", (PathType("u64"),))) == 9
        assert estimate_type_size(PathType("Option")) == 32

    def test_nested_generics(self):
        ty = PathType("Vec", (PathType("Option", (PathType("u32"),)),))
        assert estimate_type_size(ty) == 8 + 1 + 4

    def test_arrays(self):
        assert estimate_type_size(ArrayType(PathType("u32"), 4)) == 16
        assert estimate_type_size(ArrayType(PathType("u32"), None)) == 64

    def test_fallbacks(self):
        assert estimate_type_size(PathType("MyStruct")) == 32
        assert estimate_type_size(OtherType("&str")) == 8
        assert estimate_type_size(None) == 8


class TestClassifySize:
    def test_exceeds(self):
        assert classify_size(64, 50, 0.8) is SizeWarningLevel.EXCEEDS_LIMIT
        assert classify_size(50, 50, 0.8) is SizeWarningLevel.EXCEEDS_LIMIT

    def test_approaching(self):
        assert classify_size(40, 50, 0.8) is SizeWarningLevel.APPROACHING_LIMIT

    def test_below_threshold(self):
        assert classify_size(39, 50, 0.8) is None

    def test_strict_mode(self):
        assert classify_size(25, 50, 0.8, strict_mode=True) is SizeWarningLevel.EXCEEDS_LIMIT
        assert classify_size(24, 50, 0.8, strict_mode=True) is None
