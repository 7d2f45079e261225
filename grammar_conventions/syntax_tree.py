"""
grammar_conventions/syntax_tree.py
══════════════════════════════════

Syntax-tree data model handed to convention checks.

A ``SyntaxNode`` mirrors one production or token of a parsed grammar
file.  Children are owned by their parent and kept in source order; the
back-reference to the parent is weak.  Trees are built once by the front
end (``grammar_conventions.frontend``) and are not mutated afterwards.

``Token`` records the significant tokens of a file (whitespace and
comments excluded).  Every node built from a token remembers that
token's index, so checks can look at the token immediately preceding a
node without re-lexing the source.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

import sexpdata

from grammar_conventions.node_kinds import NodeKind


@dataclass(frozen=True)
class Token:
    """One significant token of a grammar file."""
    type: str
    text: str
    line: int
    column: int
    index: int = -1

    def __str__(self) -> str:
        return f"{self.type}({self.text!r}) at {self.line}:{self.column}"


@dataclass(eq=False)
class SyntaxNode:
    """
    A node of the grammar syntax tree.

    Attributes
    ----------
    kind        : the node's ``NodeKind``
    text        : source text of the originating token (actions without braces)
    line        : 1-based line of the originating token
    column      : 0-based column of the originating token
    token_index : index into the file's token list, -1 for imaginary nodes
    children    : ordered child nodes
    """
    kind: NodeKind
    text: str = ""
    line: int = 0
    column: int = 0
    token_index: int = -1
    children: List[SyntaxNode] = field(default_factory=list, repr=False)
    index_in_parent: int = field(default=-1, repr=False)
    _parent_ref: Optional[weakref.ReferenceType] = field(
        default=None, repr=False,
    )

    @classmethod
    def from_token(
        cls, kind: NodeKind, token: Token, text: Optional[str] = None,
    ) -> SyntaxNode:
        return cls(
            kind=kind,
            text=token.text if text is None else text,
            line=token.line,
            column=token.column,
            token_index=token.index,
        )

    # ── structure ────────────────────────────────────────────────────

    @property
    def parent(self) -> Optional[SyntaxNode]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def add_child(self, child: SyntaxNode) -> SyntaxNode:
        child._parent_ref = weakref.ref(self)
        child.index_in_parent = len(self.children)
        self.children.append(child)
        return child

    @property
    def child_count(self) -> int:
        return len(self.children)

    def child(self, index: int) -> Optional[SyntaxNode]:
        if -len(self.children) <= index < len(self.children):
            return self.children[index]
        return None

    @property
    def first_child(self) -> Optional[SyntaxNode]:
        return self.children[0] if self.children else None

    @property
    def next_sibling(self) -> Optional[SyntaxNode]:
        parent = self.parent
        if parent is None:
            return None
        return parent.child(self.index_in_parent + 1)

    def first_child_of_kind(self, kind: NodeKind) -> Optional[SyntaxNode]:
        for node in self.children:
            if node.kind is kind:
                return node
        return None

    def children_of_kind(self, kind: NodeKind) -> List[SyntaxNode]:
        return [node for node in self.children if node.kind is kind]

    def iter_preorder(self) -> Iterator[SyntaxNode]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    # ── rendering ────────────────────────────────────────────────────

    def to_sexp_data(self) -> List[Any]:
        data: List[Any] = [
            sexpdata.Symbol(self.kind.name), self.text, self.line, self.column,
        ]
        data.extend(child.to_sexp_data() for child in self.children)
        return data

    def to_sexp(self) -> str:
        """Render the subtree as an S-expression ``(KIND "text" line col ...)``."""
        return sexpdata.dumps(self.to_sexp_data())

    def pretty(self, indent: int = 0) -> str:
        pad = "  " * indent
        lines = [f"{pad}{self.kind.name} {self.text!r} @{self.line}:{self.column}"]
        lines.extend(child.pretty(indent + 1) for child in self.children)
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"{self.kind.name}({self.text!r}) at {self.line}:{self.column}"


__all__ = ["Token", "SyntaxNode"]
