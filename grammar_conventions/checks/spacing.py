"""Spacing around ``=`` in ``options{}`` and ``tokens{}`` pairs."""

from __future__ import annotations

from typing import ClassVar, FrozenSet, Optional

from grammar_conventions.checks.base import ConventionCheck
from grammar_conventions.config import CheckConfig
from grammar_conventions.diagnostics import DiagnosticSink
from grammar_conventions.node_kinds import NodeKind
from grammar_conventions.syntax_tree import SyntaxNode


def has_space_between(left: SyntaxNode, right: SyntaxNode) -> bool:
    """True when at least one column separates *left*'s text from *right*."""
    return left.column + len(left.text) + 1 <= right.column


class OptionsSpaceCheck(ConventionCheck):
    """
    Enforces ``key = value`` (default) or ``key=value`` in option pairs.

    Option ``withSpacesAroundEqual`` selects the policy.  An operand that
    is on another line than the ``=`` is not checked.
    """

    name: ClassVar[str] = "OptionsSpaceCheck"
    description: ClassVar[str] = "spaces around = in option pairs"

    block_kind: ClassVar[NodeKind] = NodeKind.OPTIONS
    pair_type: ClassVar[str] = "option"

    def __init__(
        self,
        config: Optional[CheckConfig] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        super().__init__(config, sink)
        self.with_spaces_around_equal = True

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({self.block_kind})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def init(self) -> None:
        self.with_spaces_around_equal = self.config.get_bool(
            "withSpacesAroundEqual", True,
        )

    def on_enter_node(self, node: SyntaxNode) -> None:
        for entry in node.children:
            if entry.kind is NodeKind.ASSIGN and entry.child_count == 2:
                self._check_pair(entry)

    def _check_pair(self, equal_sign: SyntaxNode) -> None:
        lhs, rhs = equal_sign.children
        if self.is_on_same_line(lhs, equal_sign):
            self._check_gap(lhs, equal_sign, "before")
        if self.is_on_same_line(equal_sign, rhs):
            self._check_gap(equal_sign, rhs, "after")

    def _check_gap(self, left: SyntaxNode, right: SyntaxNode, where: str) -> None:
        spaced = has_space_between(left, right)
        if self.with_spaces_around_equal and not spaced:
            self.log(
                right.line,
                f"{self.pair_type} pair needs spaces around = and there was "
                f"no space {where} =",
            )
        elif not self.with_spaces_around_equal and spaced:
            self.log(
                right.line,
                f"{self.pair_type} pair should not have spaces around = and "
                f"space found {where} =",
            )


class TokensSpaceCheck(OptionsSpaceCheck):
    """The same policy for ``NAME = 'literal';`` entries; imaginary tokens are skipped."""

    name: ClassVar[str] = "TokensSpaceCheck"
    description: ClassVar[str] = "spaces around = in token pairs"

    block_kind: ClassVar[NodeKind] = NodeKind.TOKENS
    pair_type: ClassVar[str] = "token"
