"""Indentation of ``options{}`` and ``tokens{}`` entries."""

from __future__ import annotations

from typing import ClassVar, FrozenSet

from grammar_conventions.checks.base import INDENT, ConventionCheck
from grammar_conventions.node_kinds import GRAMMAR_KINDS, NodeKind
from grammar_conventions.syntax_tree import SyntaxNode


class OptionsIndentationCheck(ConventionCheck):
    """
    Key/value pairs of grammar and rule options.

    The key must sit at column ``INDENT``; an ``=`` or a value that was
    wrapped onto its own line must sit at ``2 * INDENT``.
    """

    name: ClassVar[str] = "OptionsIndentationCheck"
    description: ClassVar[str] = "indentation of option pairs"

    block_kind: ClassVar[NodeKind] = NodeKind.OPTIONS
    parent_kinds: ClassVar[FrozenSet[NodeKind]] = GRAMMAR_KINDS | {NodeKind.RULE}
    pair_name: ClassVar[str] = "option pair"
    pair_article: ClassVar[str] = "an"

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({self.block_kind})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def on_enter_node(self, node: SyntaxNode) -> None:
        parent = node.parent
        if parent is None or parent.kind not in self.parent_kinds:
            return
        for entry in node.children:
            self.check_entry(entry)

    def check_entry(self, entry: SyntaxNode) -> None:
        if entry.kind is NodeKind.ASSIGN and entry.child_count == 2:
            self.check_pair(entry)

    def check_pair(self, equal_sign: SyntaxNode) -> None:
        lhs, rhs = equal_sign.children
        if lhs.column != INDENT:
            self.log(
                lhs.line,
                f"{self.pair_name} should be indented by {INDENT} spaces "
                f"but was indented by {lhs.column}",
            )
        if not self.is_on_same_line(lhs, equal_sign) and equal_sign.column != 2 * INDENT:
            self.log(
                equal_sign.line,
                f"= sign of {self.pair_article} {self.pair_name} should be indented "
                f"by {2 * INDENT} spaces but was indented by {equal_sign.column}",
            )
        if not self.is_on_same_line(equal_sign, rhs) and rhs.column != 2 * INDENT:
            self.log(
                rhs.line,
                f"right hand side of {self.pair_article} {self.pair_name} should be "
                f"indented by {2 * INDENT} spaces but was indented by {rhs.column}",
            )


class TokensIndentationCheck(OptionsIndentationCheck):
    """Same rules for the ``tokens{}`` block; imaginary tokens sit at ``INDENT``."""

    name: ClassVar[str] = "TokensIndentationCheck"
    description: ClassVar[str] = "indentation of token declarations"

    block_kind: ClassVar[NodeKind] = NodeKind.TOKENS
    parent_kinds: ClassVar[FrozenSet[NodeKind]] = GRAMMAR_KINDS
    pair_name: ClassVar[str] = "token pair"
    pair_article: ClassVar[str] = "a"

    def check_entry(self, entry: SyntaxNode) -> None:
        if entry.child_count == 2:
            self.check_pair(entry)
        elif entry.column != INDENT:
            self.log(
                entry.line,
                f"imaginary token should be indented by {INDENT} spaces "
                f"but was indented by {entry.column}",
            )
