"""Tests for EventFinder."""

from sanctifier.finders import EventFinder
from sanctifier.models import EventIssueKind

INCONSISTENT = """\
impl Token {
    pub fn transfer(env: Env, from: Address, to: Address, amount: i128) {
        env.events().publish((symbol_short!("transfer"), from, to), amount);
    }

    pub fn burn(env: Env, from: Address, amount: i128) {
        env.events().publish((symbol_short!("transfer"), from), amount);
    }
}
"""


class TestEventFinder:
    def test_inconsistent_topic_counts(self, parse):
        issues = EventFinder().find(parse(INCONSISTENT))
        assert len(issues) == 1
        issue = issues[0]
        assert issue.issue_type is EventIssueKind.INCONSISTENT_TOPICS
        assert issue.function_name == "burn"
        assert issue.event_name == 'symbol_short!("transfer")'
        assert issue.location == "burn:7"
        assert "2 topics here but 3 topics elsewhere" in issue.message

    def test_consistent_events(self, parse):
        source = (
            "fn a(env: Env, x: u32) {\n"
            '    env.events().publish((symbol_short!("mint"), x), 1);\n'
            '    env.events().publish((symbol_short!("mint"), x), 2);\n'
            "}\n"
        )
        assert EventFinder().find(parse(source)) == []

    def test_short_symbol_suggestion(self, parse):
        source = (
            "fn mint(env: Env, to: Address) {\n"
            '    env.events().publish((Symbol::new(&env, "mint"), to), 1);\n'
            "}\n"
        )
        issues = EventFinder().find(parse(source))
        assert [i.issue_type for i in issues] == [EventIssueKind.SYMBOL_SHORT_OPTIMIZATION]
        assert 'symbol_short!("mint")' in issues[0].message

    def test_long_symbol_not_suggested(self, parse):
        source = (
            "fn f(env: Env) {\n"
            '    env.events().publish((Symbol::new(&env, "very_long_name"),), 1);\n'
            "}\n"
        )
        assert EventFinder().find(parse(source)) == []

    def test_non_event_publish_ignored(self, parse):
        source = "fn f(bus: Bus) {\n    bus.publish((1, 2), 3);\n    bus.publish((1,), 3);\n}\n"
        assert EventFinder().find(parse(source)) == []
