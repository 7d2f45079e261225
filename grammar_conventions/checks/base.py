"""
grammar_conventions/checks/base.py
══════════════════════════════════

The ``ConventionCheck`` interface every check implements.

Lifecycle
─────────
  1. ``__init__(config, sink)``   : explicit configuration and diagnostic sink
  2. ``init()``                   : validate settings; raise InvalidConfiguration
  3. per file:
       ``file_contents`` is set by the walker,
       ``on_begin_tree(root)``,
       ``on_enter_node`` / ``on_leave_node`` for each subscribed node,
       ``on_finish_tree(root)``
  4. ``destroy()``                : release resources at shutdown

Subclass Contract
─────────────────
  - Override ``name`` and ``default_kinds()``
  - Override ``acceptable_kinds()`` to restrict explicit subscriptions
  - Report violations with ``self.log(line, message)``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, FrozenSet, Optional

from grammar_conventions.config import CheckConfig
from grammar_conventions.diagnostics import DiagnosticSink
from grammar_conventions.frontend import FileContents
from grammar_conventions.node_kinds import ALL_KINDS, NodeKind
from grammar_conventions.syntax_tree import SyntaxNode, Token

# Indentation, in spaces, expected for block entries and rule delimiters.
INDENT = 4


class ConventionCheck(ABC):
    """Abstract base class for all convention checks."""

    name: ClassVar[str] = "ConventionCheck"
    description: ClassVar[str] = ""

    def __init__(
        self,
        config: Optional[CheckConfig] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.config = config if config is not None else CheckConfig(self.name)
        self.sink = sink
        self.file_contents: Optional[FileContents] = None

    # ── subscription ─────────────────────────────────────────────────

    @abstractmethod
    def default_kinds(self) -> FrozenSet[NodeKind]:
        """Kinds observed when no explicit kind list is configured."""
        ...

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return ALL_KINDS

    def required_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset()

    # ── lifecycle ────────────────────────────────────────────────────

    def init(self) -> None:
        pass

    def destroy(self) -> None:
        pass

    def on_begin_tree(self, root: SyntaxNode) -> None:
        pass

    def on_enter_node(self, node: SyntaxNode) -> None:
        pass

    def on_leave_node(self, node: SyntaxNode) -> None:
        pass

    def on_finish_tree(self, root: SyntaxNode) -> None:
        pass

    # ── helpers ──────────────────────────────────────────────────────

    def option(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def log(self, line: int, message: str) -> None:
        if self.sink is None:
            raise RuntimeError(f"{self.name} has no diagnostic sink")
        self.sink.add(line, message, self.name, self.config.severity)

    @staticmethod
    def is_on_same_line(first: Any, second: Any) -> bool:
        return first.line == second.line

    def token_before(self, node: SyntaxNode) -> Optional[Token]:
        if self.file_contents is None:
            return None
        return self.file_contents.token_before(node)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


__all__ = ["INDENT", "ConventionCheck"]
