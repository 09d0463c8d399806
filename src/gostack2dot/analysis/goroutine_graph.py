"""Aggregation of goroutine stacks into a weighted call graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import networkx as nx

from gostack2dot.analysis.call_sites import CallSite, CallSiteRegistry, FrameLike
from gostack2dot.analysis.transitions import Transition, TransitionAggregator

LOGGER = logging.getLogger(__name__)


class EmptyStackDumpError(ValueError):
    """Raised when a graph would be built or rendered from zero stacks."""


@dataclass(slots=True)
class GoroutineGraph:
    """Call sites, transitions and the number of stacks they were collected from."""

    nodes: List[CallSite]
    edges: List[Transition]
    total_stacks: int

    @property
    def max_node_weight(self) -> int:
        return max((node.weight for node in self.nodes), default=0)

    def to_networkx(self) -> nx.DiGraph:
        """Expose the aggregated graph as a networkx ``DiGraph`` keyed by node id."""

        graph = nx.DiGraph(total_stacks=self.total_stacks)
        for node in self.nodes:
            graph.add_node(node.id, label=node.label, weight=node.weight)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, weight=edge.weight)
        return graph


def build_goroutine_graph(stacks: Iterable[Sequence[FrameLike]]) -> GoroutineGraph:
    """
    Walk every stack once, interning frames and counting transitions.

    Raises :class:`EmptyStackDumpError` when ``stacks`` is empty, since every percentage in the
    rendered graph is relative to the number of stacks.
    """

    registry = CallSiteRegistry()
    transitions = TransitionAggregator()
    total = 0

    for stack in stacks:
        total += 1
        transitions.add_stack([registry.intern_frame(frame) for frame in stack])

    if total == 0:
        raise EmptyStackDumpError("No goroutine stacks to aggregate.")

    LOGGER.debug(
        "Aggregated %d stacks into %d call sites and %d transitions",
        total,
        len(registry),
        len(transitions),
    )
    return GoroutineGraph(nodes=list(registry), edges=list(transitions), total_stacks=total)


def hottest_call_sites(graph: nx.DiGraph, top: int = 10) -> list[tuple[int, str, int]]:
    """Return ``(id, label, weight)`` for the heaviest nodes, ties broken by id."""

    ranked = sorted(graph.nodes(data=True), key=lambda item: (-item[1]["weight"], item[0]))
    return [(node, data["label"], data["weight"]) for node, data in ranked[:top]]


__all__ = [
    "EmptyStackDumpError",
    "GoroutineGraph",
    "build_goroutine_graph",
    "hottest_call_sites",
]
