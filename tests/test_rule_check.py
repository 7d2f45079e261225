# tests/test_rule_check.py
"""Tests for RuleColonSemicolonCheck."""

from grammar_conventions.checks import RuleColonSemicolonCheck

from tests.helpers import lines_of


class TestRuleColonSemicolonCheck:

    def test_conventional_layout(self, run_check):
        assert run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA",
            "    : ruleB",
            "    ;",
            "ruleB",
            "    : EOF",
            "    ;",
        ]) == []

    def test_colon_on_rule_name_line(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA : ruleB",
            "    ;",
            "ruleB",
            "    : EOF",
            "    ;",
        ])
        assert lines_of(diagnostics) == [2]
        assert diagnostics[0].message == ": of a rule needs to be on its own line."

    def test_colon_not_indented(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA",
            ": ruleB",
            "    ;",
        ])
        assert lines_of(diagnostics) == [3]
        assert diagnostics[0].message == (
            ": of a rule should be indented by 4 spaces but was indented by 0"
        )

    def test_semicolon_after_alternative(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA",
            "    : ruleB ;",
        ])
        assert lines_of(diagnostics) == [3]
        assert diagnostics[0].message == "; of a rule needs to be on its own line."

    def test_semicolon_not_indented(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA",
            "    : ruleB",
            ";",
        ])
        assert lines_of(diagnostics) == [4]
        assert diagnostics[0].message == (
            "; of a rule should be indented by 4 spaces but was indented by 0"
        )

    def test_one_line_rule(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA : ruleB ;",
        ])
        assert lines_of(diagnostics) == [2, 2]

    def test_rule_with_prequels_and_catch(self, run_check):
        assert run_check(RuleColonSemicolonCheck, [
            "grammar test;",
            "ruleA returns [int x]",
            "@init{ x = 0; }",
            "    : ruleB",
            "    ;",
            "catch [RecognitionException e] { throw e; }",
        ]) == []

    def test_lexer_rules(self, run_check):
        diagnostics = run_check(RuleColonSemicolonCheck, [
            "lexer grammar L;",
            "fragment DIGIT",
            "    : '0'..'9'",
            "    ;",
            "INT : DIGIT+ ;",
        ])
        assert lines_of(diagnostics) == [5, 5]
