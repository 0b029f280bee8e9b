# tests/test_unchecked_math.py
"""
Tests for the opt-in unchecked-math rule.
"""

from solgas.analyzer import GasAnalyzer
from solgas.issues import Severity
from tests.conftest import (
    issues_of,
    make_binary,
    make_counting_loop,
    make_for,
    make_function,
    make_local_decl,
    make_state_var,
    make_tree,
    make_unary,
    make_unchecked,
)

RULE = "unchecked-math"


def _run(tree):
    return GasAnalyzer(rules=[RULE]).analyze(tree, "Vault.sol").issues


def _function(*body, state=()):
    return make_tree(list(state) + [
        make_function("run", visibility="internal", body=list(body)),
    ])


def _loop_without_step(body):
    return make_for(
        init=make_local_decl("i", "uint256", 0),
        condition=make_binary("<", "i", 10),
        body=body,
    )


class TestUncheckedMath:

    def test_disabled_by_default(self):
        result = GasAnalyzer().analyze(_function(make_counting_loop(3)), "Vault.sol")
        assert issues_of(result, RULE) == []
        assert RULE not in GasAnalyzer().rule_names

    def test_loop_increment(self):
        [issue] = _run(_function(make_counting_loop(3)))
        assert issue.severity is Severity.LOW
        assert issue.message == "Counter update 'i++' can use an unchecked block"
        assert issue.suggestion == "Wrap in unchecked block: 'unchecked { ++i; }'"
        assert issue.gas_impact == "~50 gas per operation"

    def test_compound_increment_by_one(self):
        [issue] = _run(_function(_loop_without_step([make_binary("+=", "i", 1)])))
        assert issue.message == "Counter update 'i += 1' can use an unchecked block"

    def test_decrement(self):
        [issue] = _run(_function(_loop_without_step([make_binary("-=", "i", 1)])))
        assert issue.suggestion == "Wrap in unchecked block: 'unchecked { --i; }'"

    def test_increment_by_more_than_one(self):
        assert _run(_function(_loop_without_step([make_binary("+=", "i", 2)]))) == []

    def test_already_unchecked(self):
        body = [make_unchecked([make_unary("++", "i", prefix=True)])]
        assert _run(_function(_loop_without_step(body))) == []

    def test_outside_loop(self):
        assert _run(_function(
            make_local_decl("n", "uint256", 0),
            make_unary("++", "n"),
        )) == []

    def test_after_loop(self):
        issues = _run(_function(
            make_local_decl("n", "uint256", 0),
            make_counting_loop(3),
            make_unary("++", "n"),
        ))
        assert [i.message for i in issues] == [
            "Counter update 'i++' can use an unchecked block",
        ]

    def test_state_variable_not_flagged(self):
        tree = _function(
            _loop_without_step([make_unary("++", "nonce")]),
            state=[make_state_var("nonce")],
        )
        assert _run(tree) == []
