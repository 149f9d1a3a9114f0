"""Shared fixtures for Sanctifier tests: small Soroban contracts."""

import pytest

from sanctifier.analyzer import Analyzer
from sanctifier.config import SanctifyConfig
from sanctifier.scanning import parse_source

TOKEN_CONTRACT = """\
use soroban_sdk::{contract, contractimpl, contracttype, Address, Env};

#[contracttype]
pub enum DataKey {
    Admin,
    Balance(Address),
}

#[contract]
pub struct Token;

#[contractimpl]
impl Token {
    pub fn set_admin(env: Env, admin: Address) {
        env.storage().instance().set(&DataKey::Admin, &admin);
    }

    pub fn transfer(env: Env, from: Address, amount: i128) {
        from.require_auth();
        let balance: i128 = env.storage().persistent().get(&from).unwrap();
        env.storage().persistent().set(&from, &(balance - amount));
    }

    pub fn balance(env: Env, id: Address) -> i128 {
        env.storage().persistent().get(&id).unwrap_or(0)
    }

    fn clear(env: Env) {
        env.storage().instance().remove(&DataKey::Admin);
    }
}
"""

ADD_CONTRACT = """\
pub struct Calc;

impl Calc {
    pub fn add(a: u64, b: u64) -> u64 {
        a + b
    }
}
"""

PANIC_CONTRACT = """\
fn explode() {
    panic!("x");
}

fn unwrapper(v: Option<u32>) -> u32 {
    v.unwrap()
}

fn expecter(v: Option<u32>) -> u32 {
    v.expect("x")
}
"""

BROKEN_SOURCE = "pub fn broken( {\n"


@pytest.fixture
def parse():
    """Parse Rust text, failing the test if it does not parse."""

    def _parse(source: str):
        syntax = parse_source(source)
        assert syntax is not None, "fixture source should parse"
        return syntax

    return _parse


@pytest.fixture
def token_contract():
    return TOKEN_CONTRACT


@pytest.fixture
def add_contract():
    return ADD_CONTRACT


@pytest.fixture
def panic_contract():
    return PANIC_CONTRACT


@pytest.fixture
def broken_source():
    return BROKEN_SOURCE


@pytest.fixture
def all_rules_analyzer():
    """Analyzer with every detector enabled."""
    from sanctifier.finders import RULE_NAMES

    return Analyzer(SanctifyConfig(enabled_rules=RULE_NAMES))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate config loading from the caller's cwd and SANCTIFY_* variables."""
    for key in ("SANCTIFY_LEDGER_LIMIT", "SANCTIFY_APPROACHING_THRESHOLD", "SANCTIFY_STRICT_MODE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
