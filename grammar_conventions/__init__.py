"""
grammar_conventions
===================

Convention checker for ANTLR v3 grammar files.

A ``GrammarWalker`` parses each ``*.g`` file, walks the syntax tree depth
first and notifies the registered checks about the node kinds they
subscribed to.  Checks report ``(line, message)`` violations through a
diagnostic sink.

Quick start::

    from grammar_conventions import CheckConfig, GrammarWalker

    walker = GrammarWalker()
    walker.setup_check(CheckConfig("TokensOrderCheck"))
    walker.setup_check(CheckConfig("OptionsSpaceCheck",
                                   {"withSpacesAroundEqual": False}))
    for diagnostic in walker.process("TSPHP.g"):
        print(diagnostic)
"""

__version__ = "0.3.0"

from grammar_conventions.checks import (
    CheckRegistry,
    ConventionCheck,
    default_registry,
)
from grammar_conventions.config import CheckConfig, load_config
from grammar_conventions.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    Severity,
)
from grammar_conventions.errors import (
    GrammarConventionError,
    GrammarSyntaxError,
    InvalidConfiguration,
    UnknownKind,
)
from grammar_conventions.frontend import FileContents, parse_grammar
from grammar_conventions.node_kinds import NodeKind, NodeKindRegistry
from grammar_conventions.syntax_tree import SyntaxNode, Token
from grammar_conventions.walker import CheckDescriptor, GrammarWalker

__all__ = [
    "__version__",
    "CheckConfig",
    "CheckDescriptor",
    "CheckRegistry",
    "ConventionCheck",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "FileContents",
    "GrammarConventionError",
    "GrammarSyntaxError",
    "GrammarWalker",
    "InvalidConfiguration",
    "NodeKind",
    "NodeKindRegistry",
    "Severity",
    "SyntaxNode",
    "Token",
    "UnknownKind",
    "default_registry",
    "load_config",
    "parse_grammar",
]
