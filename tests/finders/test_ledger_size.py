"""Tests for LedgerSizeFinder."""

from sanctifier.finders import LedgerSizeFinder
from sanctifier.finders.ledger_size import enum_size, struct_size
from sanctifier.models import SizeWarningLevel


class TestLayoutSizes:
    def test_struct_size_sums_fields(self, parse):
        struct = parse("struct S {\n    a: u32,\n    b: Address,\n    c: Option<u64>,\n}\n").items[0]
        assert struct_size(struct) == 4 + 32 + 9

    def test_enum_size_uses_largest_variant(self, parse):
        enum = parse("enum E {\n    A,\n    B(u64),\n    C(Address, u32),\n}\n").items[0]
        assert enum_size(enum) == 4 + 36

    def test_empty_enum(self, parse):
        assert enum_size(parse("enum E {}\n").items[0]) == 4


class TestLedgerSizeFinder:
    def test_bytes_field_exceeds_small_limit(self, parse):
        source = "#[contracttype]\npub struct Blob {\n    data: Bytes,\n}\n"
        warnings = LedgerSizeFinder(limit=50, approaching_threshold=0.8).find(parse(source))
        assert len(warnings) == 1
        assert warnings[0].struct_name == "Blob"
        assert warnings[0].estimated_size == 64
        assert warnings[0].limit == 50
        assert warnings[0].level is SizeWarningLevel.EXCEEDS_LIMIT

    def test_unmarked_types_ignored(self, parse):
        source = "pub struct Blob {\n    data: Bytes,\n}\n"
        assert LedgerSizeFinder(limit=50, approaching_threshold=0.8).find(parse(source)) == []

    def test_approaching_limit(self, parse):
        source = "#[contracttype]\nenum Key {\n    Owner(Address),\n}\n"
        # 4 + 32 = 36 >= 40 * 0.8
        warnings = LedgerSizeFinder(limit=40, approaching_threshold=0.8).find(parse(source))
        assert [w.level for w in warnings] == [SizeWarningLevel.APPROACHING_LIMIT]

    def test_strict_mode_halves_limit(self, parse):
        source = "#[contracttype]\nstruct Small {\n    a: u128,\n    b: u128,\n}\n"
        relaxed = LedgerSizeFinder(limit=60, approaching_threshold=0.9).find(parse(source))
        strict = LedgerSizeFinder(limit=60, approaching_threshold=0.9, strict_mode=True).find(parse(source))
        assert relaxed == []
        assert [w.level for w in strict] == [SizeWarningLevel.EXCEEDS_LIMIT]

    def test_small_types_produce_nothing(self, token_contract, parse):
        assert LedgerSizeFinder(limit=64000, approaching_threshold=0.8).find(parse(token_contract)) == []
