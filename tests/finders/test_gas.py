"""Tests for GasFinder."""

from sanctifier import cost_model as cm
from sanctifier.finders import GasFinder


def _estimate(parse, body: str):
    source = "impl C {\n    pub fn target(env: Env, user: Address) {\n" + body + "\n    }\n}\n"
    (report,) = GasFinder().find(parse(source))
    return report.estimated_instructions, report.estimated_memory_bytes


class TestGasFinder:
    def test_empty_body_is_base_cost(self, parse):
        assert _estimate(parse, "") == (cm.BASE_INSTRUCTIONS, cm.BASE_MEMORY)

    def test_auth_method(self, parse):
        assert _estimate(parse, "        user.require_auth();") == (50 + cm.AUTH_METHOD_COST, 32)

    def test_storage_chain(self, parse):
        # set (1000) + instance (25) + storage (25)
        instructions, _ = _estimate(parse, "        env.storage().instance().set(&user, &1u32);")
        assert instructions == 50 + 1000 + 25 + 25

    def test_typed_and_untyped_let(self, parse):
        assert _estimate(parse, "        let x: u64 = 1;") == (52, 32 + 8)
        assert _estimate(parse, "        let y = 1;") == (52, 32 + cm.LET_UNTYPED_MEMORY)

    def test_binary_and_call(self, parse):
        instructions, _ = _estimate(parse, "        helper(1 + 2);")
        assert instructions == 50 + cm.CALL_COST + cm.BINARY_OP_COST

    def test_macros(self, parse):
        assert _estimate(parse, "        let v = vec![&env, 1];") == (50 + 2 + 50, 32 + 8 + 128)
        assert _estimate(parse, '        let s = symbol_short!("a");') == (50 + 2 + 10, 32 + 8 + 32)

    def test_loop_multiplies_body(self, parse):
        # body alone: 50 + 2 instructions, 32 + 8 memory
        instructions, memory = _estimate(parse, "        for i in 0..3 {\n            let y = i;\n        }")
        assert instructions == 50 + cm.LOOP_OVERHEAD + 52 * cm.LOOP_ITERATION_FACTOR
        assert memory == 32 + 40 * cm.LOOP_ITERATION_FACTOR

    def test_while_condition_charged_once(self, parse):
        # `i < 3` is costed outside the multiplied body
        instructions, memory = _estimate(parse, "        while i < 3 {\n            let y = i;\n        }")
        assert instructions == 50 + cm.LOOP_OVERHEAD + 52 * cm.LOOP_ITERATION_FACTOR + cm.BINARY_OP_COST
        assert memory == 32 + 40 * cm.LOOP_ITERATION_FACTOR

    def test_bare_loop(self, parse):
        instructions, memory = _estimate(parse, "        loop {\n            let y = 1;\n            break;\n        }")
        assert instructions == 50 + cm.LOOP_OVERHEAD + 52 * cm.LOOP_ITERATION_FACTOR
        assert memory == 32 + 40 * cm.LOOP_ITERATION_FACTOR

    def test_only_public_methods(self, parse):
        source = "impl C {\n    pub fn a() {}\n    fn b() {}\n}\npub fn free() {}\n"
        assert [r.function_name for r in GasFinder().find(parse(source))] == ["a"]

    def test_storage_heavier_than_plain_method(self, parse):
        heavy, _ = _estimate(parse, "        env.storage().persistent().get(&user);")
        light, _ = _estimate(parse, "        user.clone();")
        assert heavy > light
