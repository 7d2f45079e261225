"""
grammar_conventions/node_kinds.py
═════════════════════════════════

The closed table of syntax-tree node kinds produced by the grammar front
end, and the registry that maps between symbolic names and ids.

Checks subscribe to kinds by name in their configuration (``"tokens":
["OPTIONS", "RULE"]``); the walker resolves those names once, at
registration, and afterwards dispatches on the enum members directly.
"""

from __future__ import annotations

import enum
from typing import Dict, FrozenSet, Iterable, List, Union

from grammar_conventions.errors import UnknownKind


class NodeKind(enum.IntEnum):
    """Node kinds of an ANTLR v3 grammar syntax tree."""

    # grammar roots
    COMBINED_GRAMMAR = 1
    LEXER_GRAMMAR = 2
    PARSER_GRAMMAR = 3
    TREE_GRAMMAR = 4

    # prequel sections
    OPTIONS = 10
    TOKENS = 11
    IMPORT = 12
    SCOPE = 13
    AMPERSAND = 14

    # leaves
    ID = 20
    TOKEN_REF = 21
    RULE_REF = 22
    STRING_LITERAL = 23
    CHAR_LITERAL = 24
    INT = 25
    ACTION = 26
    ARG_ACTION = 27

    # rules
    RULE = 30
    BLOCK = 31
    ALT = 32
    EOR = 33
    RET = 34
    THROWS = 35
    CATCH = 36
    FINALLY = 37
    FRAGMENT = 38
    PROTECTED = 39
    PUBLIC = 40
    PRIVATE = 41

    # element operators
    ASSIGN = 50
    PLUS_ASSIGN = 51
    BANG = 52
    ROOT = 53
    OPTIONAL = 54
    CLOSURE = 55
    POSITIVE_CLOSURE = 56
    NOT = 57
    RANGE = 58
    WILDCARD = 59
    REWRITE = 60
    IMPLIES = 61
    TREE_BEGIN = 62
    LABEL_REF = 63
    COMMA = 64
    OPEN_ELEMENT_OPTION = 65
    CLOSE_ELEMENT_OPTION = 66


GRAMMAR_KINDS: FrozenSet[NodeKind] = frozenset({
    NodeKind.COMBINED_GRAMMAR,
    NodeKind.LEXER_GRAMMAR,
    NodeKind.PARSER_GRAMMAR,
    NodeKind.TREE_GRAMMAR,
})

ALL_KINDS: FrozenSet[NodeKind] = frozenset(NodeKind)


class NodeKindRegistry:
    """
    Bidirectional mapping between node-kind names and integer ids.

    >>> registry = NodeKindRegistry()
    >>> registry.kind_id("OPTIONS")
    10
    >>> registry.kind_name(10)
    'OPTIONS'
    """

    def __init__(self, kinds: Iterable[NodeKind] = NodeKind) -> None:
        self._by_name: Dict[str, NodeKind] = {}
        self._by_id: Dict[int, NodeKind] = {}
        for kind in kinds:
            self._by_name[kind.name] = kind
            self._by_id[int(kind)] = kind

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def kind_name(self, kind_id: int) -> str:
        try:
            return self._by_id[kind_id].name
        except KeyError:
            raise UnknownKind(kind_id) from None

    def kind_id(self, name: str) -> int:
        return int(self.lookup(name))

    def lookup(self, name: Union[str, NodeKind]) -> NodeKind:
        """Resolve *name* to its ``NodeKind`` member."""
        if isinstance(name, NodeKind):
            return name
        try:
            return self._by_name[name.strip()]
        except (KeyError, AttributeError):
            raise UnknownKind(
                name,
                hint="run `grammar-conventions kinds` for the list of kinds",
            ) from None

    def names(self) -> List[str]:
        return sorted(self._by_name, key=lambda n: self._by_name[n])


DEFAULT_REGISTRY = NodeKindRegistry()


__all__ = [
    "NodeKind",
    "GRAMMAR_KINDS",
    "ALL_KINDS",
    "NodeKindRegistry",
    "DEFAULT_REGISTRY",
]
