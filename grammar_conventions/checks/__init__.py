"""
Built-in convention checks and the registry used to look them up by name.

Usage
-----
>>> registry = default_registry()
>>> registry.get_by_name("TokensOrderCheck")
<class 'grammar_conventions.checks.tokens.TokensOrderCheck'>
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from grammar_conventions.checks.base import INDENT, ConventionCheck
from grammar_conventions.checks.header import HeaderCheck, load_header_reference
from grammar_conventions.checks.indentation import (
    OptionsIndentationCheck,
    TokensIndentationCheck,
)
from grammar_conventions.checks.rules import RuleColonSemicolonCheck
from grammar_conventions.checks.spacing import OptionsSpaceCheck, TokensSpaceCheck
from grammar_conventions.checks.tokens import TokensNamingCheck, TokensOrderCheck


class CheckRegistry:
    """Registry of available check classes, keyed by ``name``."""

    def __init__(self) -> None:
        self._checks: Dict[str, Type[ConventionCheck]] = {}

    def register(self, check_cls: Type[ConventionCheck]) -> None:
        self._checks[check_cls.name] = check_cls

    def get_all(self) -> List[Type[ConventionCheck]]:
        return list(self._checks.values())

    def get_by_name(self, name: str) -> Optional[Type[ConventionCheck]]:
        return self._checks.get(name)

    def names(self) -> List[str]:
        return sorted(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks


BUILTIN_CHECKS: List[Type[ConventionCheck]] = [
    HeaderCheck,
    OptionsIndentationCheck,
    OptionsSpaceCheck,
    RuleColonSemicolonCheck,
    TokensIndentationCheck,
    TokensNamingCheck,
    TokensOrderCheck,
    TokensSpaceCheck,
]

# Checks that need settings before they can run.
NEEDS_SETTINGS = frozenset({HeaderCheck.name})


def default_registry() -> CheckRegistry:
    registry = CheckRegistry()
    for check_cls in BUILTIN_CHECKS:
        registry.register(check_cls)
    return registry


__all__ = [
    "INDENT",
    "ConventionCheck",
    "CheckRegistry",
    "BUILTIN_CHECKS",
    "NEEDS_SETTINGS",
    "default_registry",
    "HeaderCheck",
    "load_header_reference",
    "OptionsIndentationCheck",
    "OptionsSpaceCheck",
    "RuleColonSemicolonCheck",
    "TokensIndentationCheck",
    "TokensNamingCheck",
    "TokensOrderCheck",
    "TokensSpaceCheck",
]
