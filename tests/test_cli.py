# tests/test_cli.py
"""
End-to-end tests for the solgas command line.
"""

import json
import logging

import pytest

from solgas.cli import main
from solgas.errors import EXIT_FINDINGS, EXIT_INFRA, EXIT_OK
from solgas.reporter import NO_ISSUES_MESSAGE
from tests.conftest import write_tree


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("solgas")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def loop_file(tmp_path, loop_tree):
    return write_tree(tmp_path / "Vault.json", loop_tree)


@pytest.fixture
def clean_file(tmp_path, clean_tree):
    return write_tree(tmp_path / "Clean.json", clean_tree)


class TestAnalyze:

    def test_clean_file(self, clean_file, capsys):
        assert main(["analyze", clean_file, "--no-color"]) == EXIT_OK
        assert capsys.readouterr().out == NO_ISSUES_MESSAGE + "\n"

    def test_high_severity_sets_exit_code(self, loop_file, capsys):
        assert main(["analyze", loop_file, "--no-color"]) == EXIT_FINDINGS
        out = capsys.readouterr().out
        assert "high[storage-read-in-loop]" in out
        assert "medium[public-vs-external]" in out
        assert "Summary Report" in out

    def test_report_names_solidity_file(self, tmp_path, loop_file, capsys):
        main(["analyze", loop_file, "--no-color"])
        assert f"--> {tmp_path / 'Vault.sol'}:" in capsys.readouterr().out

    def test_explicit_source(self, tmp_path, loop_file, capsys):
        main(["analyze", loop_file, "--no-color", "--source", "contracts/Vault.sol"])
        assert "--> contracts/Vault.sol:" in capsys.readouterr().out

    def test_rule_selection(self, loop_file, capsys):
        code = main(["analyze", loop_file, "-f", "gcc", "-r", "public-vs-external"])
        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert out.count("\n") == 1
        assert out.rstrip().endswith("[public-vs-external]")

    def test_min_severity(self, loop_file, capsys):
        main(["analyze", loop_file, "-f", "gcc", "--min-severity", "high"])
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert all(": high: " in line for line in lines)

    def test_json_to_file(self, tmp_path, loop_file):
        dest = tmp_path / "reports" / "vault.json"
        assert main(["analyze", loop_file, "-f", "json", "-o", str(dest)]) == EXIT_FINDINGS
        data = json.loads(dest.read_text(encoding="utf-8"))
        assert data["summary"]["totalIssues"] == len(data["issues"]) == 3

    def test_several_trees(self, loop_file, clean_file, capsys):
        code = main(["analyze", clean_file, loop_file, "-f", "gcc"])
        assert code == EXIT_FINDINGS
        assert "Vault.sol" in capsys.readouterr().out

    def test_analyse_alias(self, clean_file):
        assert main(["analyse", clean_file, "--no-color"]) == EXIT_OK


class TestFailures:

    def test_missing_file(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "Nope.json")]) == EXIT_INFRA
        assert "File not found" in capsys.readouterr().err

    def test_bad_tree(self, tmp_path):
        path = tmp_path / "Broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main(["analyze", str(path)]) == EXIT_INFRA

    def test_unknown_rule(self, loop_file, capsys):
        assert main(["analyze", loop_file, "-r", "gas-golf"]) == EXIT_INFRA
        assert "Unknown rule 'gas-golf'" in capsys.readouterr().err

    def test_no_trees(self):
        assert main(["analyze"]) == EXIT_INFRA

    def test_no_command(self, capsys):
        assert main([]) == EXIT_INFRA
        assert "usage: solgas" in capsys.readouterr().err


class TestRules:

    def test_rules_command(self, capsys):
        assert main(["rules", "--no-color"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "  • storage-read-in-loop (enabled)" in out
        assert "  • unchecked-math (disabled)" in out
        assert "Suggests using custom errors" in out

    def test_list_rules_flag(self, capsys):
        assert main(["analyze", "--list-rules", "--no-color"]) == EXIT_OK
        assert "Available rules:" in capsys.readouterr().out
