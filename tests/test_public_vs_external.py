# tests/test_public_vs_external.py
"""
Tests for the public-vs-external visibility rule.
"""

import pytest

from solgas.analyzer import GasAnalyzer
from solgas.issues import Severity
from tests.conftest import (
    make_binary,
    make_call,
    make_function,
    make_member,
    make_tree,
)

RULE = "public-vs-external"


def _run(*members):
    return GasAnalyzer(rules=[RULE]).analyze(make_tree(list(members)), "Vault.sol").issues


def _statements(n):
    return [make_binary("=", f"v{k}", k) for k in range(n)]


class TestSeverity:

    @pytest.mark.parametrize("mutability", ["view", "pure"])
    def test_read_only_is_low(self, mutability):
        [issue] = _run(make_function("balanceOf", mutability=mutability))
        assert issue.severity is Severity.LOW
        assert issue.gas_impact == "Minimal gas savings, but better practice"

    def test_large_mutating_function_is_high(self):
        [issue] = _run(make_function("rebalance", body=_statements(15)))
        assert issue.severity is Severity.HIGH
        assert issue.gas_impact == "Significant savings for complex functions"

    def test_ten_statements_is_still_medium(self):
        [issue] = _run(make_function("settle", body=_statements(10)))
        assert issue.severity is Severity.MEDIUM
        assert issue.gas_impact == "~2100 gas per external call"

    def test_large_view_function_is_low(self):
        [issue] = _run(make_function("report", mutability="view", body=_statements(15)))
        assert issue.severity is Severity.LOW

    def test_message_and_suggestion(self):
        [issue] = _run(make_function("deposit", at=(14, 4)))
        assert issue.message == (
            "Function 'deposit' is declared as 'public' but never called internally"
        )
        assert issue.suggestion == (
            "Change visibility from 'public' to 'external' to save gas on function calls"
        )
        assert (issue.line, issue.column) == (14, 4)

    def test_abstract_function_without_body(self):
        [issue] = _run(make_function("hook", body=None))
        assert issue.severity is Severity.MEDIUM


class TestSkipped:

    def test_called_internally(self):
        assert _run(
            make_function("helper"),
            make_function("main", visibility="external", body=[make_call("helper")]),
        ) == []

    def test_called_through_this(self):
        assert _run(
            make_function("helper"),
            make_function("main", visibility="external", body=[
                make_call(make_member("this", "helper")),
            ]),
        ) == []

    @pytest.mark.parametrize("visibility", ["external", "internal", "private", "default"])
    def test_non_public(self, visibility):
        assert _run(make_function("f", visibility=visibility)) == []

    @pytest.mark.parametrize("kwargs", [
        {"constructor": True},
        {"fallback": True},
        {"receive": True},
    ])
    def test_special_functions(self, kwargs):
        assert _run(make_function(None, **kwargs)) == []
