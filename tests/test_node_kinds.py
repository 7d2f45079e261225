# tests/test_node_kinds.py
"""Tests for the node-kind table and its name/id registry."""

import pytest

from grammar_conventions.errors import InvalidConfiguration, UnknownKind
from grammar_conventions.node_kinds import (
    ALL_KINDS,
    GRAMMAR_KINDS,
    NodeKind,
    NodeKindRegistry,
)


@pytest.fixture
def registry():
    return NodeKindRegistry()


class TestNodeKindRegistry:

    def test_kind_id(self, registry):
        assert registry.kind_id("OPTIONS") == int(NodeKind.OPTIONS)

    def test_kind_name(self, registry):
        assert registry.kind_name(int(NodeKind.RULE)) == "RULE"

    def test_every_kind_maps_both_ways(self, registry):
        for kind in NodeKind:
            assert registry.kind_name(registry.kind_id(kind.name)) == kind.name

    def test_unknown_name(self, registry):
        with pytest.raises(UnknownKind) as info:
            registry.kind_id("NOT_A_KIND")
        assert info.value.kind == "NOT_A_KIND"

    def test_unknown_id(self, registry):
        with pytest.raises(UnknownKind):
            registry.kind_name(9999)

    def test_unknown_kind_is_a_configuration_error(self, registry):
        with pytest.raises(InvalidConfiguration):
            registry.lookup("tokens")

    def test_lookup_accepts_members_and_padded_names(self, registry):
        assert registry.lookup(NodeKind.TOKENS) is NodeKind.TOKENS
        assert registry.lookup(" TOKENS ") is NodeKind.TOKENS

    def test_names_follow_id_order(self, registry):
        names = registry.names()
        assert names[0] == "COMBINED_GRAMMAR"
        assert len(names) == len(NodeKind) == len(registry)
        assert "AMPERSAND" in registry


class TestKindSets:

    def test_grammar_kinds(self):
        assert GRAMMAR_KINDS == {
            NodeKind.COMBINED_GRAMMAR,
            NodeKind.LEXER_GRAMMAR,
            NodeKind.PARSER_GRAMMAR,
            NodeKind.TREE_GRAMMAR,
        }

    def test_all_kinds_is_universal(self):
        assert ALL_KINDS == frozenset(NodeKind)
