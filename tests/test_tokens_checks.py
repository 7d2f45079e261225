# tests/test_tokens_checks.py
"""Tests for the naming and ordering conventions of tokens{} blocks."""

import pytest

from grammar_conventions.checks import TokensNamingCheck, TokensOrderCheck

from tests.helpers import lines_of


def tokens_block(*entries):
    return ["grammar test;", "tokens{", *entries, "}"]


class TestTokensNamingCheck:

    def test_upper_case_names(self, run_check):
        assert run_check(TokensNamingCheck, tokens_block(
            "    BLOCK;", "    METHOD_CALL;", "    A1;",
        )) == []

    def test_mixed_case_name(self, run_check):
        diagnostics = run_check(TokensNamingCheck, tokens_block(
            "    BLOCK;", "    Aa;", "    METHOD_CALL;",
        ))
        assert lines_of(diagnostics) == [4]
        assert diagnostics[0].message == "imaginary tokens have to be in upper case."

    def test_every_offender_is_reported(self, run_check):
        diagnostics = run_check(TokensNamingCheck, tokens_block(
            "    BLOCK;", "    Aa;", "    B_a;", "    METHOD_CALL;", "    A_a_As;",
        ))
        assert lines_of(diagnostics) == [4, 5, 7]

    def test_pairs_are_not_checked(self, run_check):
        assert run_check(TokensNamingCheck, tokens_block("    Plus = '+';")) == []


class TestTokensOrderCheck:

    @pytest.mark.parametrize("entries", [
        ["    A = 'a';"],
        ["    A = 'a';", "    B = 'b';", "    C = 'c';"],
        ["    BLOCK;", "    CALL;"],
        ["    A = 'a';", "    B = 'b';", "    BLOCK;", "    CALL;"],
        ["    Z = 'z';", "    A;"],
    ])
    def test_ordered(self, run_check, entries):
        assert run_check(TokensOrderCheck, tokens_block(*entries)) == []

    def test_pairs_out_of_order(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    A = 'a';", "    C = 'c';", "    B = 'b';",
        ))
        assert lines_of(diagnostics) == [5]
        assert diagnostics[0].message == (
            "tokens are not in alphabetical order, spotted first occurrence. "
            "C and B have to be switched at least (maybe there are more errors)."
        )

    def test_only_first_pair_violation(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    A = 'a';", "    C = 'c';", "    B = 'b';",
            "    D = 'd';", "    E = 'e';", "    A1 = 'a1';",
        ))
        assert lines_of(diagnostics) == [5]

    def test_imaginary_out_of_order(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    A;", "    C;", "    B;",
        ))
        assert lines_of(diagnostics) == [5]
        assert "C and B have to be switched" in diagnostics[0].message

    def test_mixed(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    B = 'b';", "    C;", "    A = 'a';",
        ))
        assert lines_of(diagnostics) == [5]
        assert diagnostics[0].message.startswith(
            "imaginary tokens and non-imaginary tokens should not be mixed"
        )

    def test_mixed_reported_once(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    B = 'b';", "    C;", "    A = 'a';", "    B = 'b';", "    A;",
        ))
        assert lines_of(diagnostics) == [5]

    def test_independent_latches(self, run_check):
        diagnostics = run_check(TokensOrderCheck, tokens_block(
            "    B = 'b';", "    A = 'a';", "    D;", "    C;",
        ))
        assert lines_of(diagnostics) == [4, 6]

    def test_latches_reset_per_block(self, run_check):
        diagnostics = run_check(TokensOrderCheck, [
            "grammar test;",
            "tokens{", "    B;", "    A;", "}",
            "tokens{", "    B;", "    A;", "}",
        ])
        assert lines_of(diagnostics) == [4, 8]
