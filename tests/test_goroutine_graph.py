"""Tests for aggregating goroutine stacks into a call graph."""

from __future__ import annotations

import pytest

from gostack2dot.analysis.goroutine_graph import (
    EmptyStackDumpError,
    build_goroutine_graph,
    hottest_call_sites,
)
from gostack2dot.io.goroutine_dump import CallFrame


def _frame(name: str, line: int) -> CallFrame:
    return CallFrame(f"pkg.{name}", f"{name.lower()}.go", line)


def test_identical_single_frame_stacks_collapse() -> None:
    frame = CallFrame("pkg.F", "a", 1)
    graph = build_goroutine_graph([[frame], [frame]])

    assert graph.total_stacks == 2
    assert len(graph.nodes) == 1
    assert graph.nodes[0].weight == 2
    assert graph.nodes[0].label == "pkg.F"
    assert graph.edges == []


def test_shared_first_frame() -> None:
    a, b, c = _frame("A", 1), _frame("B", 2), _frame("C", 3)
    graph = build_goroutine_graph([[a, b], [a, c]])

    assert [(node.id, node.label, node.weight) for node in graph.nodes] == [
        (0, "pkg.A", 2),
        (1, "pkg.B", 1),
        (2, "pkg.C", 1),
    ]
    assert {(edge.source, edge.target): edge.weight for edge in graph.edges} == {(1, 0): 1, (2, 0): 1}


def test_same_signature_in_different_positions_shares_a_node() -> None:
    a, b = _frame("A", 1), _frame("B", 2)
    graph = build_goroutine_graph([[a, b], [b, a], [b]])

    assert len(graph.nodes) == 2
    assert graph.nodes[0].weight == 2
    assert graph.nodes[1].weight == 3
    assert sum(node.weight for node in graph.nodes) == 5
    assert graph.max_node_weight == 3


def test_empty_stacks_still_count_towards_total() -> None:
    graph = build_goroutine_graph([[], [_frame("A", 1)]])

    assert graph.total_stacks == 2
    assert len(graph.nodes) == 1


def test_no_stacks_is_rejected() -> None:
    with pytest.raises(EmptyStackDumpError):
        build_goroutine_graph([])


def test_to_networkx() -> None:
    a, b, c = _frame("A", 1), _frame("B", 2), _frame("C", 3)
    graph = build_goroutine_graph([[a, b], [a, b], [a, c]]).to_networkx()

    assert graph.graph["total_stacks"] == 3
    assert graph.number_of_nodes() == 3
    assert graph.nodes[0] == {"label": "pkg.A", "weight": 3}
    assert graph.edges[1, 0]["weight"] == 2
    assert graph.has_edge(2, 0)
    assert not graph.has_edge(0, 1)


def test_hottest_call_sites_breaks_ties_by_id() -> None:
    a, b, c = _frame("A", 1), _frame("B", 2), _frame("C", 3)
    graph = build_goroutine_graph([[c], [b], [a, b], [c]]).to_networkx()

    assert hottest_call_sites(graph, top=2) == [(0, "pkg.C", 2), (1, "pkg.B", 2)]
    assert len(hottest_call_sites(graph)) == 3
