# grammar_conventions/errors.py
"""
Error types raised by the grammar convention checker.

Hierarchy
─────────

    GrammarConventionError (base)
    ├── InvalidConfiguration   - setup-time contract violations
    │   └── UnknownKind        - node-kind name/id absent from the kind table
    └── GrammarSyntaxError     - the grammar front end could not parse a file

Configuration errors are raised eagerly, while checks are built and
registered, never while a tree is being walked.  A ``GrammarSyntaxError``
raised during ``GrammarWalker.process`` is recovered at the file boundary
and reported as a single diagnostic.
"""

from __future__ import annotations

from typing import Optional


class GrammarConventionError(Exception):
    """
    Base exception for all grammar-conventions errors.

    Carries the human readable ``message`` and an optional ``hint`` that
    the CLI prints below it.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def format(self) -> str:
        if self.hint:
            return f"{self.message}\n  hint: {self.hint}"
        return self.message


class InvalidConfiguration(GrammarConventionError):
    """A check was configured with missing, unreadable or illegal settings."""


class UnknownKind(InvalidConfiguration):
    """A node-kind name (or numeric id) is not part of the kind table."""

    def __init__(self, kind: object, hint: str = "") -> None:
        super().__init__(f"unknown node kind {kind!r}", hint=hint)
        self.kind = kind


class GrammarSyntaxError(GrammarConventionError):
    """The grammar front end rejected the input text."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        line: int = 0,
        column: int = 0,
        hint: str = "",
    ) -> None:
        location = f"{file or '<string>'}:{line}:{column}"
        super().__init__(f"{location}: {message}", hint=hint)
        self.file = file
        self.line = line
        self.column = column


__all__ = [
    "GrammarConventionError",
    "InvalidConfiguration",
    "UnknownKind",
    "GrammarSyntaxError",
]
