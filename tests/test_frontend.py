# tests/test_frontend.py
"""
Tests for the ANTLR v3 front end: the PEG grammar itself and the shape of
the syntax trees built from it.
"""

import pytest
from parsimonious.grammar import Grammar

from grammar_conventions.errors import GrammarConventionError, GrammarSyntaxError
from grammar_conventions.frontend import ANTLR3_GRAMMAR, parse_grammar
from grammar_conventions.node_kinds import NodeKind

from tests.helpers import grammar_text


@pytest.fixture(scope="module")
def grammar():
    """Compile the grammar once per module."""
    return Grammar(ANTLR3_GRAMMAR)


def kinds(node):
    return [child.kind for child in node.children]


class TestGrammarWellFormed:

    def test_grammar_compiles(self, grammar):
        for rule in ("grammar_file", "rule_spec", "tokens_spec",
                     "options_spec", "action_spec", "alt_list"):
            assert rule in grammar, f"Rule {rule!r} missing"

    def test_identifiers(self, grammar):
        for name in ("x", "ruleA", "METHOD_CALL", "_priv"):
            assert grammar["IDENT"].parse(name).text == name

    def test_literals(self, grammar):
        for lit in ("'a'", r"'\''", "'abc'"):
            grammar["STRING_LITERAL"].parse(lit)

    def test_nested_action(self, grammar):
        grammar["ACTION_BLOCK"].parse("{ if (a) { b(\"}\"); } // }\n}")

    def test_keyword_needs_word_boundary(self, grammar):
        grammar["OPTIONS_KW"].parse("options")
        with pytest.raises(Exception):
            grammar["OPTIONS_KW"].parse("optionsX")


class TestGrammarHead:

    @pytest.mark.parametrize("head, kind", [
        ("grammar test;", NodeKind.COMBINED_GRAMMAR),
        ("lexer grammar test;", NodeKind.LEXER_GRAMMAR),
        ("parser grammar test;", NodeKind.PARSER_GRAMMAR),
        ("tree grammar test;", NodeKind.TREE_GRAMMAR),
    ])
    def test_root_kind(self, head, kind):
        root = parse_grammar(grammar_text(head)).root
        assert root.kind is kind
        assert root.parent is None
        assert root.children[0].kind is NodeKind.ID
        assert root.children[0].text == "test"

    def test_comments_are_not_tokens(self):
        contents = parse_grammar(grammar_text(
            "// leading comment",
            "/* block",
            "   comment */ grammar test;",
        ))
        assert [t.type for t in contents.tokens] == ["GRAMMAR_KW", "IDENT", "SEMI"]
        assert (contents.tokens[0].line, contents.tokens[0].column) == (3, 14)


class TestPrequels:

    def test_options(self):
        root = parse_grammar(grammar_text(
            "grammar test;",
            "options{",
            "    language=Java;",
            "    k = 2;",
            "}",
        )).root
        options = root.children[1]
        assert options.kind is NodeKind.OPTIONS
        assert (options.line, options.column) == (2, 0)
        pair = options.children[0]
        assert pair.kind is NodeKind.ASSIGN
        assert (pair.line, pair.column) == (3, 12)
        key, value = pair.children
        assert (key.kind, key.text, key.column) == (NodeKind.ID, "language", 4)
        assert (value.kind, value.text, value.column) == (NodeKind.ID, "Java", 13)
        assert options.children[1].children[1].kind is NodeKind.INT

    def test_tokens(self):
        root = parse_grammar(grammar_text(
            "grammar test;",
            "tokens{",
            "    A='a';",
            "    PLUS = '+=';",
            "    BLOCK;",
            "}",
        )).root
        tokens = root.children[1]
        assert tokens.kind is NodeKind.TOKENS
        assert kinds(tokens) == [NodeKind.ASSIGN, NodeKind.ASSIGN, NodeKind.TOKEN_REF]
        first = tokens.children[0]
        assert kinds(first) == [NodeKind.TOKEN_REF, NodeKind.CHAR_LITERAL]
        assert tokens.children[1].children[1].kind is NodeKind.STRING_LITERAL
        imaginary = tokens.children[2]
        assert (imaginary.text, imaginary.line, imaginary.child_count) == ("BLOCK", 5, 0)

    def test_header_action(self):
        root = parse_grammar(grammar_text(
            "grammar test;",
            "@header{",
            "/*",
            " */",
            "}",
        )).root
        section = root.children[1]
        assert section.kind is NodeKind.AMPERSAND
        assert (section.line, section.column) == (2, 0)
        name, action = section.children
        assert name.text == "header"
        assert action.kind is NodeKind.ACTION
        assert action.text == "\n/*\n */\n"
        assert (action.line, action.column) == (2, 7)

    def test_scoped_action(self):
        root = parse_grammar(grammar_text(
            "grammar test;",
            "@parser::header {}",
        )).root
        section = root.children[1]
        assert [c.text for c in section.children] == ["parser", "header", ""]

    def test_import_and_scope(self):
        root = parse_grammar(grammar_text(
            "grammar test;",
            "import Base, L=Lexer;",
            "scope Symbols { int level; }",
        )).root
        assert kinds(root)[1:] == [NodeKind.IMPORT, NodeKind.SCOPE]
        assert kinds(root.children[1]) == [NodeKind.ID, NodeKind.ASSIGN]


class TestRules:

    def test_rule_delimiters(self):
        contents = parse_grammar(grammar_text(
            "grammar test;",
            "rule",
            "    : A",
            "    | b",
            "    ;",
        ))
        rule = contents.root.children[1]
        assert rule.kind is NodeKind.RULE
        assert kinds(rule) == [NodeKind.ID, NodeKind.BLOCK, NodeKind.EOR]
        block, end = rule.children[1], rule.children[2]
        assert (block.line, block.column) == (3, 4)
        assert (end.line, end.column) == (5, 4)
        assert [alt.children[0].kind for alt in block.children] == [
            NodeKind.TOKEN_REF, NodeKind.RULE_REF,
        ]
        assert contents.token_before(block).text == "rule"
        assert contents.token_before(end).text == "b"

    def test_rule_prequels(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "rule[int a] returns [int x]",
            "options{",
            "    k=1;",
            "}",
            "@init{ x = 0; }",
            "    : A",
            "    ;",
        )).root.children[1]
        assert kinds(rule) == [
            NodeKind.ID, NodeKind.ARG_ACTION, NodeKind.RET, NodeKind.OPTIONS,
            NodeKind.AMPERSAND, NodeKind.BLOCK, NodeKind.EOR,
        ]
        assert rule.children[3].parent is rule

    def test_catch_before_end_of_rule(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "rule : A ;",
            "catch [RecognitionException e] { throw e; }",
            "finally { cleanup(); }",
        )).root.children[1]
        assert kinds(rule) == [
            NodeKind.ID, NodeKind.BLOCK, NodeKind.CATCH, NodeKind.FINALLY,
            NodeKind.EOR,
        ]

    def test_lexer_rule(self):
        rule = parse_grammar(grammar_text(
            "lexer grammar L;",
            "fragment DIGIT : '0'..'9' ;",
        )).root.children[1]
        assert kinds(rule)[:2] == [NodeKind.ID, NodeKind.FRAGMENT]
        alt = rule.children[2].children[0]
        assert kinds(alt) == [
            NodeKind.CHAR_LITERAL, NodeKind.RANGE, NodeKind.CHAR_LITERAL,
        ]

    def test_subrules_and_rewrites(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "list : (item ','?)* -> ^(LIST item*) ;",
        )).root.children[1]
        alt = rule.children[1].children[0]
        assert kinds(alt) == [
            NodeKind.BLOCK, NodeKind.CLOSURE, NodeKind.REWRITE, NodeKind.TREE_BEGIN,
        ]
        assert kinds(alt.children[0].children[0]) == [
            NodeKind.RULE_REF, NodeKind.CHAR_LITERAL, NodeKind.OPTIONAL,
        ]

    def test_subrule_options(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "r : ( options{greedy=false;} : . )* ;",
        )).root.children[1]
        subrule = rule.children[1].children[0].children[0]
        assert subrule.kind is NodeKind.BLOCK
        assert subrule.children[0].kind is NodeKind.OPTIONS
        assert subrule.children[0].parent is subrule

    def test_actions_and_predicates(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "r : {ok()}?=> A { if (x) { y(\"}\"); } } ;",
        )).root.children[1]
        alt = rule.children[1].children[0]
        assert kinds(alt) == [
            NodeKind.ACTION, NodeKind.OPTIONAL, NodeKind.IMPLIES,
            NodeKind.TOKEN_REF, NodeKind.ACTION,
        ]
        assert alt.children[-1].text == ' if (x) { y("}"); } '

    def test_empty_alternative_gets_block_position(self):
        rule = parse_grammar(grammar_text(
            "grammar test;",
            "r",
            "    : A",
            "    |",
            "    ;",
        )).root.children[1]
        block = rule.children[1]
        empty = block.children[1]
        assert empty.child_count == 0
        assert (empty.line, empty.column) == (block.line, block.column)


class TestErrors:

    def test_missing_name(self):
        with pytest.raises(GrammarSyntaxError) as info:
            parse_grammar("grammar ;\n", file_name="bad.g")
        assert info.value.file == "bad.g"
        assert info.value.line == 1

    def test_unterminated_rule(self):
        with pytest.raises(GrammarConventionError):
            parse_grammar(grammar_text("grammar test;", "rule : A"))

    def test_empty_input(self):
        with pytest.raises(GrammarSyntaxError):
            parse_grammar("")
