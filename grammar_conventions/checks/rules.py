"""Placement of the ``:`` and ``;`` delimiters of grammar rules."""

from __future__ import annotations

from typing import ClassVar, FrozenSet

from grammar_conventions.checks.base import INDENT, ConventionCheck
from grammar_conventions.node_kinds import NodeKind
from grammar_conventions.syntax_tree import SyntaxNode


class RuleColonSemicolonCheck(ConventionCheck):
    """
    Each rule's ``:`` and ``;`` sit on their own line, indented by ``INDENT``::

        rule
            : alternative
            ;
    """

    name: ClassVar[str] = "RuleColonSemicolonCheck"
    description: ClassVar[str] = "rule delimiters on their own line"

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({NodeKind.RULE})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def on_enter_node(self, node: SyntaxNode) -> None:
        # BLOCK is anchored at the ':' token, EOR at the ';' token
        colon = node.first_child_of_kind(NodeKind.BLOCK)
        semicolon = node.first_child_of_kind(NodeKind.EOR)
        if colon is not None:
            self._check_delimiter(colon, ":")
        if semicolon is not None:
            self._check_delimiter(semicolon, ";")

    def _check_delimiter(self, delimiter: SyntaxNode, symbol: str) -> None:
        before = self.token_before(delimiter)
        if before is None:
            raise RuntimeError(f"no token found before {symbol} at line {delimiter.line}")
        if self.is_on_same_line(before, delimiter):
            self.log(delimiter.line, f"{symbol} of a rule needs to be on its own line.")
        elif delimiter.column != INDENT:
            self.log(
                delimiter.line,
                f"{symbol} of a rule should be indented by {INDENT} spaces "
                f"but was indented by {delimiter.column}",
            )
