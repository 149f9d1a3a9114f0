"""Tests for AuthGapFinder."""

from sanctifier.finders import AuthGapFinder


def _impl(body: str) -> str:
    return "impl C {\n" + body + "}\n"


class TestAuthGapFinder:
    def test_token_contract(self, token_contract, parse):
        # clear() mutates without auth but is not public
        assert AuthGapFinder().find(parse(token_contract)) == ["set_admin"]

    def test_gap_reported_once(self, parse):
        source = _impl(
            "    pub fn wipe(env: Env) {\n"
            "        env.storage().persistent().remove(&1);\n"
            "        env.storage().temporary().remove(&2);\n"
            "    }\n"
        )
        assert AuthGapFinder().find(parse(source)) == ["wipe"]

    def test_auth_anywhere_suppresses(self, parse):
        source = _impl(
            "    pub fn guarded(env: Env, admin: Address, flag: bool) {\n"
            "        if flag {\n"
            "            admin.require_auth();\n"
            "        }\n"
            "        env.storage().instance().set(&1, &2);\n"
            "    }\n"
        )
        assert AuthGapFinder().find(parse(source)) == []

    def test_auth_for_args_counts(self, parse):
        source = _impl(
            "    pub fn guarded(env: Env, admin: Address) {\n"
            "        admin.require_auth_for_args((1,).into_val(&env));\n"
            "        env.storage().instance().update(&1, |v| v);\n"
            "    }\n"
        )
        assert AuthGapFinder().find(parse(source)) == []

    def test_free_call_auth_counts(self, parse):
        source = _impl(
            "    pub fn guarded(env: Env, admin: Address) {\n"
            "        Address::require_auth(&admin);\n"
            "        env.storage().instance().set(&1, &2);\n"
            "    }\n"
        )
        assert AuthGapFinder().find(parse(source)) == []

    def test_non_storage_receiver_is_not_mutation(self, parse):
        source = _impl(
            "    pub fn local(cache: Map<u32, u32>) {\n"
            "        cache.set(1, 2);\n"
            "    }\n"
        )
        assert AuthGapFinder().find(parse(source)) == []

    def test_free_functions_are_out_of_scope(self, parse):
        source = "pub fn free(env: Env) {\n    env.storage().instance().set(&1, &2);\n}\n"
        assert AuthGapFinder().find(parse(source)) == []

    def test_read_only_method(self, parse):
        source = _impl("    pub fn read(env: Env) -> u32 {\n        env.storage().instance().get(&1).unwrap()\n    }\n")
        assert AuthGapFinder().find(parse(source)) == []
