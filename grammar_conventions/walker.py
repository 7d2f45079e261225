"""
grammar_conventions/walker.py
═════════════════════════════

``GrammarWalker`` drives the convention checks over grammar files.

Architecture
────────────

  ┌──────────────────────────────────────────────────────────┐
  │                     GrammarWalker                        │
  │                                                          │
  │   setup_check(config) ─► add_check ─► init()             │
  │                                   └─► register_check     │
  │                                          │               │
  │                     dispatch table  NodeKind → [checks]  │
  │                                          │               │
  │   process(path) ─► parse_grammar ─► walk(contents)       │
  │                                      │                   │
  │            begin ─► enter/leave (depth first) ─► finish  │
  │                                      │                   │
  │                           DiagnosticCollector            │
  └──────────────────────────────────────────────────────────┘

Traversal order: a node is entered before any of its descendants and
left after all of them; siblings are visited left to right, and a
node's leave always precedes its next sibling's enter.  ``on_begin_tree``
and ``on_finish_tree`` reach every registered check, subscribed or not.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Union

from grammar_conventions.checks import CheckRegistry, ConventionCheck, default_registry
from grammar_conventions.config import CheckConfig
from grammar_conventions.diagnostics import Diagnostic, DiagnosticCollector
from grammar_conventions.errors import InvalidConfiguration
from grammar_conventions.frontend import FileContents, parse_grammar
from grammar_conventions.node_kinds import DEFAULT_REGISTRY, NodeKind, NodeKindRegistry
from grammar_conventions.syntax_tree import SyntaxNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckDescriptor:
    """A registered check and the node kinds it is notified about."""
    check: ConventionCheck
    kinds: FrozenSet[NodeKind]


class GrammarWalker:
    """
    Registers checks, walks syntax trees and collects their diagnostics.

    Usage
    -----
    >>> walker = GrammarWalker()
    >>> check = walker.setup_check(CheckConfig("TokensOrderCheck"))
    >>> diagnostics = walker.process("Grammar.g")
    >>> walker.destroy()
    """

    name = "GrammarWalker"

    def __init__(
        self,
        kinds: NodeKindRegistry = DEFAULT_REGISTRY,
        checks: Optional[CheckRegistry] = None,
        collector: Optional[DiagnosticCollector] = None,
    ) -> None:
        self.kinds = kinds
        self.check_registry = checks if checks is not None else default_registry()
        self.collector = collector if collector is not None else DiagnosticCollector()
        self._descriptors: List[CheckDescriptor] = []
        self._registered: Set[int] = set()
        self._dispatch: Dict[NodeKind, List[ConventionCheck]] = defaultdict(list)

    # ─────────────────────────────────────────────────────────────
    # Setup
    # ─────────────────────────────────────────────────────────────

    def setup_check(self, config: CheckConfig) -> ConventionCheck:
        """Instantiate the check named by *config*, initialise and register it."""
        check_cls = self.check_registry.get_by_name(config.name)
        if check_cls is None:
            raise InvalidConfiguration(
                f"{config.name} is not allowed as a child in {self.name}",
                hint=f"known checks: {', '.join(self.check_registry.names())}",
            )
        check = check_cls(config, sink=self.collector)
        self.add_check(check)
        return check

    def setup_checks(self, configs: Iterable[CheckConfig]) -> List[ConventionCheck]:
        return [self.setup_check(config) for config in configs]

    def add_check(self, check: ConventionCheck) -> CheckDescriptor:
        """Bind *check* to the collector, run its ``init()`` and register it."""
        if not isinstance(check, ConventionCheck):
            raise InvalidConfiguration(
                f"{type(check).__name__} is not allowed as a child in {self.name}"
            )
        if id(check) in self._registered:
            return self._descriptor_of(check)
        if check.sink is None:
            check.sink = self.collector
        check.init()
        try:
            return self.register_check(check)
        except InvalidConfiguration:
            check.destroy()
            raise

    def register_check(self, check: ConventionCheck) -> CheckDescriptor:
        """Resolve *check*'s subscriptions and add it to the dispatch table."""
        if id(check) in self._registered:
            return self._descriptor_of(check)

        descriptor = CheckDescriptor(check, self._resolve_kinds(check))
        self._descriptors.append(descriptor)
        self._registered.add(id(check))
        for kind in sorted(descriptor.kinds):
            self._dispatch[kind].append(check)
        logger.debug(
            "registered %s for %s", check.name,
            ", ".join(kind.name for kind in sorted(descriptor.kinds)) or "no kinds",
        )
        return descriptor

    def _descriptor_of(self, check: ConventionCheck) -> CheckDescriptor:
        return next(d for d in self._descriptors if d.check is check)

    def _resolve_kinds(self, check: ConventionCheck) -> FrozenSet[NodeKind]:
        configured = check.config.kinds
        if not configured:
            return frozenset(check.default_kinds())

        acceptable = check.acceptable_kinds()
        kinds = set(check.required_kinds())
        for name in configured:
            kind = self.kinds.lookup(name)
            if kind not in acceptable:
                raise InvalidConfiguration(
                    f'illegal token "{name}" in check {check.name}',
                    hint="acceptable tokens: "
                    + ", ".join(k.name for k in sorted(acceptable)),
                )
            kinds.add(kind)
        return frozenset(kinds)

    @property
    def checks(self) -> List[ConventionCheck]:
        return [descriptor.check for descriptor in self._descriptors]

    @property
    def descriptors(self) -> List[CheckDescriptor]:
        return list(self._descriptors)

    def subscribers(self, kind: NodeKind) -> Sequence[ConventionCheck]:
        return tuple(self._dispatch.get(kind, ()))

    # ─────────────────────────────────────────────────────────────
    # Traversal
    # ─────────────────────────────────────────────────────────────

    def walk(self, contents: FileContents) -> None:
        """Run every registered check over one parsed file."""
        root = contents.root
        checks = self.checks
        for check in checks:
            check.file_contents = contents
        for check in checks:
            check.on_begin_tree(root)
        self._traverse(root)
        for check in checks:
            check.on_finish_tree(root)

    def _traverse(self, root: SyntaxNode) -> None:
        stack = [(root, False)]
        while stack:
            node, leaving = stack.pop()
            subscribers = self._dispatch.get(node.kind, ())
            if leaving:
                for check in subscribers:
                    check.on_leave_node(node)
                continue
            for check in subscribers:
                check.on_enter_node(node)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    # ─────────────────────────────────────────────────────────────
    # Files
    # ─────────────────────────────────────────────────────────────

    def process(
        self,
        path: Union[str, Path],
        text: Optional[str] = None,
    ) -> List[Diagnostic]:
        """
        Check one grammar file and return its diagnostics.

        Any exception raised while reading, parsing or walking the file
        is reported as a single diagnostic at line 0; diagnostics already
        emitted for the file are kept.
        """
        file_name = str(path)
        self.collector.reset()
        self.collector.begin_file(file_name)
        logger.debug("processing %s", file_name)
        try:
            if text is None:
                text = Path(path).read_text(encoding="utf-8-sig")
            self.walk(parse_grammar(text, file_name))
        except Exception as exc:
            logger.debug("exception while processing %s", file_name, exc_info=True)
            self.collector.add(0, f"Got an exception - {exc}", self.name)
        return self.collector.diagnostics

    def process_files(self, paths: Iterable[Union[str, Path]]) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for path in paths:
            diagnostics.extend(self.process(path))
        return diagnostics

    def destroy(self) -> None:
        for descriptor in self._descriptors:
            descriptor.check.destroy()
