"""Unit tests for transitive reduction and the common package prefix."""

import itertools

import pytest

from apiloom.core.graph.models import Edge, EdgeSet, EdgeType
from apiloom.core.graph.reduction import (
    common_package_prefix,
    is_indirectly_reachable,
    transitive_reduction,
)


# ── Fixtures ──────────────────────────────────────────────────────────────


def _make_edges(*pairs) -> EdgeSet:
    return EdgeSet(Edge(EdgeType.PACKAGE_DEPENDENCY, s, t) for s, t in pairs)


def _pairs(edges) -> list:
    return [(e.source, e.target) for e in edges]


def _closure(edges) -> set:
    graph = {}
    for e in edges:
        graph.setdefault(e.source, set()).add(e.target)

    reach = set()
    for start in graph:
        stack, seen = list(graph[start]), set()
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            reach.add((start, node))
            stack.extend(graph.get(node, ()))
    return reach


# ── Tests: Reachability ───────────────────────────────────────────────────


class TestIndirectReachability:

    def test_direct_edge_does_not_count(self):
        assert not is_indirectly_reachable({"a": {"b"}}, "a", "b")

    def test_two_hop_path(self):
        assert is_indirectly_reachable({"a": {"b", "c"}, "b": {"c"}}, "a", "c")

    def test_cycle_terminates(self):
        graph = {"a": {"b", "d"}, "b": {"c"}, "c": {"a"}}
        assert not is_indirectly_reachable(graph, "a", "d")

    def test_unknown_source(self):
        assert not is_indirectly_reachable({}, "x", "y")


# ── Tests: Reduction ──────────────────────────────────────────────────────


class TestTransitiveReduction:

    def test_shortcut_removed(self):
        reduced = transitive_reduction(_make_edges(("a", "b"), ("b", "c"), ("a", "c")))
        assert _pairs(reduced) == [("a", "b"), ("b", "c")]

    def test_long_chain_shortcuts_removed(self):
        chain = [("a", "b"), ("b", "c"), ("c", "d")]
        shortcuts = [("a", "c"), ("a", "d"), ("b", "d")]
        reduced = transitive_reduction(_make_edges(*(chain + shortcuts)))
        assert _pairs(reduced) == chain

    def test_input_untouched(self):
        edges = _make_edges(("a", "b"), ("b", "c"), ("a", "c"))
        transitive_reduction(edges)
        assert len(edges) == 3

    def test_independent_edges_kept(self):
        reduced = transitive_reduction(_make_edges(("a", "b"), ("c", "d")))
        assert len(reduced) == 2

    def test_cycle_keeps_closure(self):
        edges = _make_edges(("a", "b"), ("b", "c"), ("c", "a"), ("a", "c"))
        reduced = transitive_reduction(edges)
        assert _closure(reduced) == _closure(edges)
        assert len(reduced) == 3

    def test_deterministic(self):
        pairs = [("a", "b"), ("b", "a"), ("a", "c"), ("b", "c"), ("c", "a")]
        first = _pairs(transitive_reduction(_make_edges(*pairs)))
        second = _pairs(transitive_reduction(_make_edges(*reversed(pairs))))
        assert first == second

    @pytest.mark.parametrize("pairs", [
        [("a", "b"), ("b", "c"), ("a", "c"), ("c", "d"), ("a", "d")],
        [("a", "b"), ("b", "a"), ("b", "c"), ("a", "c")],
        [("p", "q"), ("q", "r"), ("r", "p"), ("p", "r"), ("q", "p"), ("r", "s")],
    ])
    def test_minimal_with_same_closure(self, pairs):
        edges = _make_edges(*pairs)
        reduced = transitive_reduction(edges)
        assert _closure(reduced) == _closure(edges)
        for edge in reduced:
            smaller = [e for e in reduced if e != edge]
            assert _closure(smaller) != _closure(edges)

    def test_all_small_graphs_keep_closure(self):
        nodes = "abc"
        candidates = [(s, t) for s, t in itertools.product(nodes, nodes) if s != t]
        for mask in range(1, 1 << len(candidates)):
            pairs = [p for i, p in enumerate(candidates) if mask & (1 << i)]
            edges = _make_edges(*pairs)
            assert _closure(transitive_reduction(edges)) == _closure(edges)


# ── Tests: Common Prefix ──────────────────────────────────────────────────


class TestCommonPackagePrefix:

    def test_siblings(self):
        assert common_package_prefix(["a.b", "a.c"]) == 2

    def test_parent_package_present(self):
        # "a" itself is rendered, so nothing may be stripped
        assert common_package_prefix(["a", "a.b", "a.c"]) == 0

    def test_deep_siblings(self):
        names = ["com.example.zoo", "com.example.zoo.spi", "com.example.food"]
        assert common_package_prefix(names) == len("com.example.")

    def test_prefix_never_consumes_shortest_name(self):
        names = ["org.x", "org.x.y"]
        prefix = common_package_prefix(names)
        assert all(len(n) > prefix for n in names)
        assert prefix == len("org.")

    def test_no_common_prefix(self):
        assert common_package_prefix(["com.a", "org.b"]) == 0

    def test_single_package(self):
        assert common_package_prefix(["com.example.zoo"]) == len("com.example.")

    def test_empty_input(self):
        assert common_package_prefix([]) == 0

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="Unexpected empty package name"):
            common_package_prefix(["a.b", ""])
