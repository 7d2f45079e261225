"""
grammar_conventions/checks/tokens.py
════════════════════════════════════

Naming and ordering conventions of the ``tokens{}`` block.

Entries come in two flavours: pairs (``NAME='literal';``, an ``ASSIGN``
node with two children) and imaginary tokens (``NAME;``, a bare
``TOKEN_REF``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, FrozenSet

from grammar_conventions.checks.base import ConventionCheck
from grammar_conventions.node_kinds import NodeKind
from grammar_conventions.syntax_tree import SyntaxNode


def is_imaginary(entry: SyntaxNode) -> bool:
    return entry.child_count != 2


def name_node(entry: SyntaxNode) -> SyntaxNode:
    """The node carrying the token name of a ``tokens{}`` entry."""
    return entry if is_imaginary(entry) else entry.children[0]


class TokensNamingCheck(ConventionCheck):
    """Imaginary tokens are written in upper case."""

    name: ClassVar[str] = "TokensNamingCheck"
    description: ClassVar[str] = "imaginary tokens must be upper case"

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({NodeKind.TOKENS})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def on_enter_node(self, node: SyntaxNode) -> None:
        for entry in node.children:
            if entry.child_count == 0 and entry.text != entry.text.upper():
                self.log(entry.line, "imaginary tokens have to be in upper case.")


@dataclass
class _OrderState:
    """Scan state for one ``tokens{}`` block."""
    previous: str
    imaginary: bool
    mixed_reported: bool = False
    pair_order_reported: bool = False
    imaginary_order_reported: bool = False


class TokensOrderCheck(ConventionCheck):
    """
    Pairs come first, imaginary tokens after them, each group sorted by name.

    At most one diagnostic of each kind (mixing, pair order, imaginary
    order) is reported per block, for the first offending entry.
    """

    name: ClassVar[str] = "TokensOrderCheck"
    description: ClassVar[str] = "order of token declarations"

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({NodeKind.TOKENS})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def on_enter_node(self, node: SyntaxNode) -> None:
        if node.child_count < 2:
            return
        first = node.children[0]
        state = _OrderState(name_node(first).text, is_imaginary(first))
        for entry in node.children[1:]:
            if is_imaginary(entry):
                self._check_imaginary(state, entry)
            else:
                self._check_pair(state, entry)

    def _check_imaginary(self, state: _OrderState, entry: SyntaxNode) -> None:
        name = entry.text
        if not state.imaginary:
            state.imaginary = True
        elif not state.imaginary_order_reported and name < state.previous:
            state.imaginary_order_reported = True
            self._log_wrong_order(state.previous, entry)
        state.previous = name

    def _check_pair(self, state: _OrderState, entry: SyntaxNode) -> None:
        lhs = entry.children[0]
        if state.imaginary:
            state.imaginary = False
            if not state.mixed_reported:
                state.mixed_reported = True
                self.log(
                    lhs.line,
                    "imaginary tokens and non-imaginary tokens should not be mixed, "
                    "whereas non-imaginary tokens should be first followed by the "
                    "imaginary ones.",
                )
        elif not state.pair_order_reported and lhs.text < state.previous:
            state.pair_order_reported = True
            self._log_wrong_order(state.previous, lhs)
        state.previous = lhs.text

    def _log_wrong_order(self, previous: str, offender: SyntaxNode) -> None:
        self.log(
            offender.line,
            "tokens are not in alphabetical order, spotted first occurrence. "
            f"{previous} and {offender.text} have to be switched at least "
            "(maybe there are more errors).",
        )
