# tests/helpers.py
"""Grammar-snippet builders shared by the test modules."""

from typing import List

from grammar_conventions import Diagnostic


def grammar_text(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def lines_of(diagnostics: List[Diagnostic]) -> List[int]:
    return [d.line for d in diagnostics]
