"""
grammar_conventions/checks/header.py
════════════════════════════════════

License-header check.

The reference notice is read once, in ``init()``, from the file named by
the ``headerFile`` option.  Every ``@header{...}`` section placed
directly under the grammar root (``@parser::header`` and
``@lexer::header`` included) must start with that notice, line for line.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, ClassVar, FrozenSet, List, Optional

from grammar_conventions.checks.base import ConventionCheck
from grammar_conventions.config import CheckConfig
from grammar_conventions.diagnostics import DiagnosticSink
from grammar_conventions.errors import InvalidConfiguration
from grammar_conventions.node_kinds import GRAMMAR_KINDS, NodeKind
from grammar_conventions.syntax_tree import SyntaxNode

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def load_header_reference(path: Any) -> List[str]:
    """
    Read the expected license notice from *path*.

    Trailing blank lines are dropped.  Raises ``InvalidConfiguration``
    when *path* is unset, cannot be read, or holds no text.
    """
    if path is None or not str(path).strip():
        raise InvalidConfiguration(
            "property headerFile has not been set",
            hint="point headerFile at a file containing the license notice",
        )
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidConfiguration(
            f"unable to load header file {path}: {exc}"
        ) from exc

    # split like the @header action text so both sides line up
    lines = _LINE_BREAK.split(text)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise InvalidConfiguration(f"header file {path} is empty")
    logger.debug("loaded %d header line(s) from %s", len(lines), path)
    return lines


class HeaderCheck(ConventionCheck):
    """Checks that every grammar starts its @header section with the license notice."""

    name: ClassVar[str] = "HeaderCheck"
    description: ClassVar[str] = "@header sections must start with the license notice"

    SECTION = "header"

    def __init__(
        self,
        config: Optional[CheckConfig] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        super().__init__(config, sink)
        self.header_lines: List[str] = []

    def default_kinds(self) -> FrozenSet[NodeKind]:
        return frozenset({NodeKind.AMPERSAND})

    def acceptable_kinds(self) -> FrozenSet[NodeKind]:
        return self.default_kinds()

    def init(self) -> None:
        self.header_lines = load_header_reference(self.option("headerFile"))

    def on_enter_node(self, node: SyntaxNode) -> None:
        parent = node.parent
        if parent is None or parent.kind not in GRAMMAR_KINDS:
            return
        # @name{...} or @scope::name{...}
        if node.child_count == 2:
            section, action = node.children
        elif node.child_count == 3:
            _, section, action = node.children
        else:
            return
        if section.text == self.SECTION:
            self._compare(node, action)

    def _compare(self, section: SyntaxNode, action: SyntaxNode) -> None:
        lines = _LINE_BREAK.split(action.text)
        while lines and not lines[-1]:
            lines.pop()
        # content conventionally starts on the line after '{'
        start = 1 if lines and not lines[0] else 0
        if start >= len(lines):
            self.log(section.line, "License notice is missing.")
            return

        for offset, expected in enumerate(self.header_lines):
            index = start + offset
            found = lines[index] if index < len(lines) else None
            if found != expected:
                self.log(
                    action.line + index,
                    "License missing or wrong. Mismatch found!\n"
                    f"expected: {expected}\nfound: {found or ''}",
                )
                return
