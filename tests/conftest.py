# tests/conftest.py
"""Fixtures for running single checks over small grammar snippets."""

from typing import List

import pytest

from grammar_conventions import CheckConfig, Diagnostic, GrammarWalker
from tests.helpers import grammar_text


@pytest.fixture
def run_check():
    """Run one check class (with options) over the given source lines."""

    def _run(check_cls, lines, **options) -> List[Diagnostic]:
        walker = GrammarWalker()
        walker.add_check(check_cls(CheckConfig(check_cls.name, options)))
        return walker.process("test.g", grammar_text(*lines))

    return _run
