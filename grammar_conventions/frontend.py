"""
frontend.py — ANTLR v3 grammar front end
========================================

Parses ANTLR v3 grammar files (``*.g``) into the ``SyntaxNode`` tree the
convention checks walk, together with the file's significant-token list.

Usage::

    from grammar_conventions.frontend import parse_grammar

    contents = parse_grammar(source_text, file_name="TSPHP.g")
    print(contents.root.pretty())

The tree follows the shape of the ANTLR v3 grammar AST:

    COMBINED_GRAMMAR | LEXER_GRAMMAR | PARSER_GRAMMAR | TREE_GRAMMAR
    ├── ID                                  grammar name
    ├── OPTIONS ── ASSIGN ── ID, value      at the position of '='
    ├── IMPORT
    ├── TOKENS ─┬─ ASSIGN ── TOKEN_REF, STRING_LITERAL | CHAR_LITERAL
    │           └─ TOKEN_REF                imaginary token
    ├── SCOPE
    ├── AMPERSAND ── [ID scope], ID, ACTION  at '@'; ACTION text has no braces
    └── RULE ── ID, [modifiers, ARG_ACTION, RET, THROWS, OPTIONS, SCOPE,
                AMPERSAND], BLOCK (at ':'), [CATCH, FINALLY], EOR (at ';')

Rule bodies are parsed permissively: alternatives are split on ``|``,
parenthesised subrules become nested ``BLOCK`` (or ``TREE_BEGIN`` for
``^(``) nodes, and everything else, rewrites included, is a flat
element stream.

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from parsimonious.exceptions import IncompleteParseError, ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from grammar_conventions.errors import GrammarSyntaxError
from grammar_conventions.node_kinds import NodeKind
from grammar_conventions.syntax_tree import SyntaxNode, Token

logger = logging.getLogger(__name__)


ANTLR3_GRAMMAR = r'''
    # ─────────────────────────────────────────────────────────────
    # File structure
    # ─────────────────────────────────────────────────────────────

    grammar_file    = _ grammar_head prequel* rule_spec*
    grammar_head    = grammar_type? GRAMMAR_KW _ IDENT _ SEMI _
    grammar_type    = (LEXER_KW / PARSER_KW / TREE_KW) _

    prequel         = options_spec / import_spec / tokens_spec
                    / grammar_scope / action_spec

    options_spec    = OPTIONS_KW _ LBRACE _ option* RBRACE _
    option          = IDENT _ ASSIGN _ option_value _ SEMI _
    option_value    = QUALIFIED_ID / STRING_LITERAL / INT / STAR

    import_spec     = IMPORT_KW _ delegate (COMMA _ delegate)* SEMI _
    delegate        = IDENT _ (ASSIGN _ IDENT _)?

    tokens_spec     = TOKENS_KW _ LBRACE _ token_spec* RBRACE _
    token_spec      = IDENT _ (ASSIGN _ STRING_LITERAL _)? SEMI _

    grammar_scope   = SCOPE_KW _ IDENT _ ACTION_BLOCK _
    action_spec     = AT _ (IDENT _ COLONCOLON _)? IDENT _ ACTION_BLOCK _

    # ─────────────────────────────────────────────────────────────
    # Rules
    # ─────────────────────────────────────────────────────────────

    rule_spec       = rule_modifier? IDENT _ rule_bang? rule_args?
                      returns_spec? throws_spec? options_spec? rule_scope?
                      action_spec* COLON _ alt_list SEMI _ exception_group?
    rule_modifier   = (FRAGMENT_KW / PROTECTED_KW / PUBLIC_KW / PRIVATE_KW) _
    rule_bang       = BANG _
    rule_args       = ARG_BLOCK _
    returns_spec    = RETURNS_KW _ ARG_BLOCK _
    throws_spec     = THROWS_KW _ QUALIFIED_ID _ (COMMA _ QUALIFIED_ID _)*
    rule_scope      = SCOPE_KW _ (ACTION_BLOCK _)? (IDENT _ (COMMA _ IDENT _)* SEMI _)?

    exception_group = (catch_clause+ finally_clause?) / finally_clause
    catch_clause    = CATCH_KW _ ARG_BLOCK _ ACTION_BLOCK _
    finally_clause  = FINALLY_KW _ ACTION_BLOCK _

    alt_list        = alternative (BAR _ alternative)*
    alternative     = element*
    element         = subrule / atom
    subrule         = (TREE_BEGIN / LPAREN) _ subrule_options? alt_list RPAREN _
    subrule_options = options_spec COLON _
    atom            = (ACTION_BLOCK / ARG_BLOCK / STRING_LITERAL / DQ_STRING
                      / INT / IDENT / operator) _
    operator        = REWRITE / RANGE / PLUS_ASSIGN / IMPLIES / ASSIGN
                    / QUESTION / STAR / PLUS / BANG / ROOT_OP / TILDE / DOT
                    / LT / GT / COMMA / DOLLAR

    # ─────────────────────────────────────────────────────────────
    # Embedded actions: {...} and [...], nested, string/comment aware
    # ─────────────────────────────────────────────────────────────

    ACTION_BLOCK    = "{" action_chunk* "}"
    action_chunk    = action_nested / action_string / action_comment
                    / action_text / action_quote
    action_nested   = "{" action_chunk* "}"
    action_string   = ~r'"(?:[^"\\\n]|\\.)*"' / ~r"'(?:[^'\\\n]|\\.)*'"
    action_comment  = ~r"//[^\n]*" / ~r"/\*[\s\S]*?\*/"
    action_text     = ~r"[^{}\"'/]+" / "/"
    action_quote    = ~r"[\"']"

    ARG_BLOCK       = "[" arg_chunk* "]"
    arg_chunk       = arg_nested / action_string / arg_text / action_quote
    arg_nested      = "[" arg_chunk* "]"
    arg_text        = ~r"[^\[\]\"']+"

    # ─────────────────────────────────────────────────────────────
    # Keywords
    # ─────────────────────────────────────────────────────────────

    GRAMMAR_KW      = ~r"grammar\b"
    LEXER_KW        = ~r"lexer\b"
    PARSER_KW       = ~r"parser\b"
    TREE_KW         = ~r"tree\b"
    OPTIONS_KW      = ~r"options\b"
    IMPORT_KW       = ~r"import\b"
    TOKENS_KW       = ~r"tokens\b"
    SCOPE_KW        = ~r"scope\b"
    RETURNS_KW      = ~r"returns\b"
    THROWS_KW       = ~r"throws\b"
    FRAGMENT_KW     = ~r"fragment\b"
    PROTECTED_KW    = ~r"protected\b"
    PUBLIC_KW       = ~r"public\b"
    PRIVATE_KW      = ~r"private\b"
    CATCH_KW        = ~r"catch\b"
    FINALLY_KW      = ~r"finally\b"

    # ─────────────────────────────────────────────────────────────
    # Lexical tokens
    # ─────────────────────────────────────────────────────────────

    IDENT           = ~r"[a-zA-Z_][a-zA-Z0-9_]*"
    QUALIFIED_ID    = ~r"[a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)*"
    STRING_LITERAL  = ~r"'(?:[^'\\\n]|\\.)*'"
    DQ_STRING       = ~r'"(?:[^"\\\n]|\\.)*"'
    INT             = ~r"[0-9]+"

    SEMI            = ";"
    COLONCOLON      = "::"
    COLON           = ":"
    LBRACE          = "{"
    RBRACE          = "}"
    TREE_BEGIN      = "^("
    LPAREN          = "("
    RPAREN          = ")"
    BAR             = "|"
    AT              = "@"
    REWRITE         = "->"
    RANGE           = ".."
    PLUS_ASSIGN     = "+="
    IMPLIES         = "=>"
    ASSIGN          = "="
    QUESTION        = "?"
    STAR            = "*"
    PLUS            = "+"
    BANG            = "!"
    ROOT_OP         = "^"
    TILDE           = "~"
    DOT             = "."
    LT              = "<"
    GT              = ">"
    COMMA           = ","
    DOLLAR          = "$"

    _               = ~r"(?:\s+|//[^\n]*|/\*[\s\S]*?\*/)*"
'''

_GRAMMAR = Grammar(ANTLR3_GRAMMAR)

# Rules whose matches become entries of the significant-token list.
_TERMINALS: FrozenSet[str] = frozenset({
    "GRAMMAR_KW", "LEXER_KW", "PARSER_KW", "TREE_KW", "OPTIONS_KW",
    "IMPORT_KW", "TOKENS_KW", "SCOPE_KW", "RETURNS_KW", "THROWS_KW",
    "FRAGMENT_KW", "PROTECTED_KW", "PUBLIC_KW", "PRIVATE_KW", "CATCH_KW",
    "FINALLY_KW", "IDENT", "QUALIFIED_ID", "STRING_LITERAL", "DQ_STRING",
    "INT", "ACTION_BLOCK", "ARG_BLOCK", "SEMI", "COLONCOLON", "COLON",
    "LBRACE", "RBRACE", "TREE_BEGIN", "LPAREN", "RPAREN", "BAR", "AT",
    "REWRITE", "RANGE", "PLUS_ASSIGN", "IMPLIES", "ASSIGN", "QUESTION",
    "STAR", "PLUS", "BANG", "ROOT_OP", "TILDE", "DOT", "LT", "GT", "COMMA",
    "DOLLAR",
})

_GRAMMAR_TYPES: Dict[str, NodeKind] = {
    "GRAMMAR_KW": NodeKind.COMBINED_GRAMMAR,
    "LEXER_KW": NodeKind.LEXER_GRAMMAR,
    "PARSER_KW": NodeKind.PARSER_GRAMMAR,
    "TREE_KW": NodeKind.TREE_GRAMMAR,
}

_MODIFIERS: Dict[str, NodeKind] = {
    "FRAGMENT_KW": NodeKind.FRAGMENT,
    "PROTECTED_KW": NodeKind.PROTECTED,
    "PUBLIC_KW": NodeKind.PUBLIC,
    "PRIVATE_KW": NodeKind.PRIVATE,
}

_OPERATORS: Dict[str, NodeKind] = {
    "REWRITE": NodeKind.REWRITE,
    "RANGE": NodeKind.RANGE,
    "PLUS_ASSIGN": NodeKind.PLUS_ASSIGN,
    "IMPLIES": NodeKind.IMPLIES,
    "ASSIGN": NodeKind.ASSIGN,
    "QUESTION": NodeKind.OPTIONAL,
    "STAR": NodeKind.CLOSURE,
    "PLUS": NodeKind.POSITIVE_CLOSURE,
    "BANG": NodeKind.BANG,
    "ROOT_OP": NodeKind.ROOT,
    "TILDE": NodeKind.NOT,
    "DOT": NodeKind.WILDCARD,
    "LT": NodeKind.OPEN_ELEMENT_OPTION,
    "GT": NodeKind.CLOSE_ELEMENT_OPTION,
    "COMMA": NodeKind.COMMA,
    "DOLLAR": NodeKind.LABEL_REF,
}


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — PER-FILE CONTENTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class FileContents:
    """Everything the checks may look at for one grammar file."""
    root: SyntaxNode
    tokens: List[Token] = field(default_factory=list)
    file_name: Optional[str] = None

    def token_before(self, node: SyntaxNode) -> Optional[Token]:
        """The significant token immediately preceding *node*'s own token."""
        if node.token_index <= 0:
            return None
        return self.tokens[node.token_index - 1]


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — PARSE TREE → SYNTAX TREE
# ═════════════════════════════════════════════════════════════════════════

def _flatten(items: Any) -> List[Any]:
    """Flatten nested visitor results, dropping empty matches."""
    out: List[Any] = []
    stack = [items]
    while stack:
        item = stack.pop()
        if isinstance(item, list):
            stack.extend(reversed(item))
        elif item is not None:
            out.append(item)
    return out


def _literal_kind(text: str) -> NodeKind:
    body = text[1:-1]
    if len(body) == 1 or (len(body) == 2 and body[0] == "\\"):
        return NodeKind.CHAR_LITERAL
    return NodeKind.STRING_LITERAL


class GrammarTreeBuilder(NodeVisitor):
    """Transforms the parsimonious parse tree into ``SyntaxNode`` objects."""

    unwrapped_exceptions = (GrammarSyntaxError,)

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens: List[Token] = []
        self._line_starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        if node.expr_name in _TERMINALS:
            return self._record(node)
        return _flatten(visited_children)

    def _record(self, node: Node) -> Token:
        line = bisect.bisect_right(self._line_starts, node.start)
        column = node.start - self._line_starts[line - 1]
        token = Token(node.expr_name, node.text, line, column, len(self.tokens))
        self.tokens.append(token)
        return token

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _tokens(visited_children: List[Any], *types: str) -> List[Token]:
        return [
            item for item in _flatten(visited_children)
            if isinstance(item, Token) and (not types or item.type in types)
        ]

    @staticmethod
    def _nodes(visited_children: List[Any]) -> List[SyntaxNode]:
        return [
            item for item in _flatten(visited_children)
            if isinstance(item, SyntaxNode)
        ]

    @staticmethod
    def _action(token: Token, kind: NodeKind = NodeKind.ACTION) -> SyntaxNode:
        return SyntaxNode.from_token(kind, token, text=token.text[1:-1])

    @staticmethod
    def _place(block: SyntaxNode, token: Token) -> SyntaxNode:
        block.line, block.column, block.token_index = (
            token.line, token.column, token.index,
        )
        for alt in block.children:
            if alt.token_index < 0:
                alt.line, alt.column = token.line, token.column
        return block

    # ─────────────────────────────────────────────────────────────
    # File structure
    # ─────────────────────────────────────────────────────────────

    def visit_grammar_file(self, node, visited_children):
        items = self._nodes(visited_children)
        root = items[0]
        for item in items[1:]:
            root.add_child(item)
        return root

    def visit_grammar_head(self, node, visited_children):
        tokens = self._tokens(visited_children)
        root = SyntaxNode.from_token(_GRAMMAR_TYPES[tokens[0].type], tokens[0])
        name = next(t for t in tokens if t.type == "IDENT")
        root.add_child(SyntaxNode.from_token(NodeKind.ID, name))
        return root

    def visit_options_spec(self, node, visited_children):
        keyword = self._tokens(visited_children, "OPTIONS_KW")[0]
        options = SyntaxNode.from_token(NodeKind.OPTIONS, keyword)
        for pair in self._nodes(visited_children):
            options.add_child(pair)
        return options

    def visit_option(self, node, visited_children):
        key, assign, value = self._tokens(visited_children)[:3]
        pair = SyntaxNode.from_token(NodeKind.ASSIGN, assign)
        pair.add_child(SyntaxNode.from_token(NodeKind.ID, key))
        if value.type == "STRING_LITERAL":
            kind = _literal_kind(value.text)
        elif value.type == "INT":
            kind = NodeKind.INT
        elif value.type == "STAR":
            kind = NodeKind.STRING_LITERAL
        else:
            kind = NodeKind.ID
        pair.add_child(SyntaxNode.from_token(kind, value))
        return pair

    def visit_import_spec(self, node, visited_children):
        keyword = self._tokens(visited_children, "IMPORT_KW")[0]
        imports = SyntaxNode.from_token(NodeKind.IMPORT, keyword)
        for delegate in self._nodes(visited_children):
            imports.add_child(delegate)
        return imports

    def visit_delegate(self, node, visited_children):
        tokens = self._tokens(visited_children)
        if len(tokens) == 1:
            return SyntaxNode.from_token(NodeKind.ID, tokens[0])
        alias, assign, name = tokens
        pair = SyntaxNode.from_token(NodeKind.ASSIGN, assign)
        pair.add_child(SyntaxNode.from_token(NodeKind.ID, alias))
        pair.add_child(SyntaxNode.from_token(NodeKind.ID, name))
        return pair

    def visit_tokens_spec(self, node, visited_children):
        keyword = self._tokens(visited_children, "TOKENS_KW")[0]
        tokens = SyntaxNode.from_token(NodeKind.TOKENS, keyword)
        for entry in self._nodes(visited_children):
            tokens.add_child(entry)
        return tokens

    def visit_token_spec(self, node, visited_children):
        tokens = self._tokens(visited_children)
        name = SyntaxNode.from_token(NodeKind.TOKEN_REF, tokens[0])
        if tokens[1].type != "ASSIGN":
            return name
        pair = SyntaxNode.from_token(NodeKind.ASSIGN, tokens[1])
        pair.add_child(name)
        pair.add_child(
            SyntaxNode.from_token(_literal_kind(tokens[2].text), tokens[2])
        )
        return pair

    def visit_grammar_scope(self, node, visited_children):
        keyword, name, action = self._tokens(
            visited_children, "SCOPE_KW", "IDENT", "ACTION_BLOCK",
        )
        scope = SyntaxNode.from_token(NodeKind.SCOPE, keyword)
        scope.add_child(SyntaxNode.from_token(NodeKind.ID, name))
        scope.add_child(self._action(action))
        return scope

    def visit_action_spec(self, node, visited_children):
        at = self._tokens(visited_children, "AT")[0]
        section = SyntaxNode.from_token(NodeKind.AMPERSAND, at)
        for ident in self._tokens(visited_children, "IDENT"):
            section.add_child(SyntaxNode.from_token(NodeKind.ID, ident))
        action = self._tokens(visited_children, "ACTION_BLOCK")[0]
        section.add_child(self._action(action))
        return section

    # ─────────────────────────────────────────────────────────────
    # Rules
    # ─────────────────────────────────────────────────────────────

    def visit_rule_spec(self, node, visited_children):
        items = _flatten(visited_children)
        name = next(
            item for item in items
            if isinstance(item, Token) and item.type == "IDENT"
        )
        rule = SyntaxNode.from_token(NodeKind.RULE, name)
        rule.add_child(SyntaxNode.from_token(NodeKind.ID, name))
        colon: Optional[Token] = None
        end: Optional[SyntaxNode] = None
        for item in items:
            if isinstance(item, SyntaxNode):
                if item.kind is NodeKind.BLOCK and colon is not None:
                    self._place(item, colon)
                rule.add_child(item)
            elif item.type == "COLON":
                colon = item
            elif item.type == "SEMI":
                end = SyntaxNode.from_token(
                    NodeKind.EOR, item, text="<end-of-rule>",
                )
        if end is not None:
            rule.add_child(end)
        return rule

    def visit_rule_modifier(self, node, visited_children):
        token = self._tokens(visited_children)[0]
        return SyntaxNode.from_token(_MODIFIERS[token.type], token)

    def visit_rule_bang(self, node, visited_children):
        return SyntaxNode.from_token(
            NodeKind.BANG, self._tokens(visited_children)[0],
        )

    def visit_rule_args(self, node, visited_children):
        return self._action(
            self._tokens(visited_children)[0], NodeKind.ARG_ACTION,
        )

    def visit_returns_spec(self, node, visited_children):
        keyword, args = self._tokens(visited_children)
        returns = SyntaxNode.from_token(NodeKind.RET, keyword)
        returns.add_child(self._action(args, NodeKind.ARG_ACTION))
        return returns

    def visit_throws_spec(self, node, visited_children):
        keyword, *names = self._tokens(
            visited_children, "THROWS_KW", "QUALIFIED_ID",
        )
        throws = SyntaxNode.from_token(NodeKind.THROWS, keyword)
        for name in names:
            throws.add_child(SyntaxNode.from_token(NodeKind.ID, name))
        return throws

    def visit_rule_scope(self, node, visited_children):
        tokens = self._tokens(visited_children)
        scope = SyntaxNode.from_token(NodeKind.SCOPE, tokens[0])
        for token in tokens[1:]:
            if token.type == "ACTION_BLOCK":
                scope.add_child(self._action(token))
            elif token.type == "IDENT":
                scope.add_child(SyntaxNode.from_token(NodeKind.ID, token))
        return scope

    def visit_catch_clause(self, node, visited_children):
        keyword, args, action = self._tokens(visited_children)
        clause = SyntaxNode.from_token(NodeKind.CATCH, keyword)
        clause.add_child(self._action(args, NodeKind.ARG_ACTION))
        clause.add_child(self._action(action))
        return clause

    def visit_finally_clause(self, node, visited_children):
        keyword, action = self._tokens(visited_children)
        clause = SyntaxNode.from_token(NodeKind.FINALLY, keyword)
        clause.add_child(self._action(action))
        return clause

    # ─────────────────────────────────────────────────────────────
    # Alternatives
    # ─────────────────────────────────────────────────────────────

    def visit_alt_list(self, node, visited_children):
        block = SyntaxNode(NodeKind.BLOCK, text="BLOCK")
        for alt in self._nodes(visited_children):
            block.add_child(alt)
        return block

    def visit_alternative(self, node, visited_children):
        alt = SyntaxNode(NodeKind.ALT, text="ALT")
        elements = self._nodes(visited_children)
        if elements:
            first = elements[0]
            alt.line, alt.column, alt.token_index = (
                first.line, first.column, first.token_index,
            )
        for element in elements:
            alt.add_child(element)
        return alt

    def visit_subrule(self, node, visited_children):
        items = _flatten(visited_children)
        opening = items[0]
        kind = NodeKind.TREE_BEGIN if opening.type == "TREE_BEGIN" else NodeKind.BLOCK
        subrule = SyntaxNode.from_token(kind, opening)
        nodes = [item for item in items if isinstance(item, SyntaxNode)]
        block = nodes[-1]
        for options in nodes[:-1]:
            subrule.add_child(options)
        for alt in list(block.children):
            subrule.add_child(alt)
        return self._place(subrule, opening)

    def visit_atom(self, node, visited_children):
        token = self._tokens(visited_children)[0]
        if token.type == "IDENT":
            kind = NodeKind.TOKEN_REF if token.text[0].isupper() else NodeKind.RULE_REF
            return SyntaxNode.from_token(kind, token)
        if token.type == "ACTION_BLOCK":
            return self._action(token)
        if token.type == "ARG_BLOCK":
            return self._action(token, NodeKind.ARG_ACTION)
        if token.type == "STRING_LITERAL":
            return SyntaxNode.from_token(_literal_kind(token.text), token)
        if token.type == "DQ_STRING":
            return SyntaxNode.from_token(NodeKind.STRING_LITERAL, token)
        if token.type == "INT":
            return SyntaxNode.from_token(NodeKind.INT, token)
        return SyntaxNode.from_token(_OPERATORS[token.type], token)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — ENTRY POINT
# ═════════════════════════════════════════════════════════════════════════

def parse_grammar(text: str, file_name: Optional[str] = None) -> FileContents:
    """
    Parse ANTLR v3 grammar *text*.

    Raises ``GrammarSyntaxError`` when the text is not a grammar file the
    front end understands.
    """
    try:
        tree = _GRAMMAR.parse(text)
    except IncompleteParseError as exc:
        raise GrammarSyntaxError(
            f"unexpected input: {exc}", file_name, exc.line(), exc.column() - 1,
        ) from exc
    except ParseError as exc:
        raise GrammarSyntaxError(
            str(exc), file_name, exc.line(), exc.column() - 1,
        ) from exc

    builder = GrammarTreeBuilder(text)
    try:
        root = builder.visit(tree)
    except VisitationError as exc:
        raise GrammarSyntaxError(
            f"cannot build syntax tree: {exc}", file_name,
        ) from exc

    logger.debug(
        "parsed %s: %d tokens, %d rules",
        file_name or "<string>", len(builder.tokens),
        len(root.children_of_kind(NodeKind.RULE)),
    )
    return FileContents(
        root=root,
        tokens=builder.tokens,
        file_name=file_name,
    )


__all__ = [
    "ANTLR3_GRAMMAR",
    "FileContents",
    "GrammarTreeBuilder",
    "parse_grammar",
]
