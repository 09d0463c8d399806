"""Serialisation of goroutine graphs to the Graphviz DOT language."""

from __future__ import annotations

import math
import re
from typing import Iterator, Sequence, TextIO, Tuple

from gostack2dot.analysis.call_sites import CallSite
from gostack2dot.analysis.goroutine_graph import EmptyStackDumpError, GoroutineGraph
from gostack2dot.config import RenderSettings

Attribute = Tuple[str, str]

PLAIN_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DotWriteError(OSError):
    """Raised when the DOT output cannot be written to its destination."""


def dot_quote(value: str) -> str:
    # Only double quotes are escaped; newlines pass through as line breaks.
    return value.replace('"', '\\"')


def graph_id(name: str) -> str:
    """Return ``name`` bare when it is a plain DOT identifier, quoted otherwise."""

    if PLAIN_ID_RE.match(name):
        return name
    return f'"{dot_quote(name)}"'


def format_attributes(attributes: Sequence[Attribute]) -> str:
    return ",".join(f'{name}="{dot_quote(value)}"' for name, value in attributes)


def node_statement(node_id: str, attributes: Sequence[Attribute] = ()) -> str:
    if attributes:
        return f"{node_id} [{format_attributes(attributes)}];\n"
    return f"{node_id};\n"


def edge_statement(source: str, target: str, attributes: Sequence[Attribute] = ()) -> str:
    if attributes:
        return f"{source} -> {target}[{format_attributes(attributes)}];\n"
    return f"{source} -> {target};\n"


def font_size(weight: int, max_weight: int, settings: RenderSettings | None = None) -> int:
    """Scale a node's font with the square root of its share of the heaviest node."""

    settings = settings or RenderSettings()
    size = settings.base_font_size
    if max_weight > 0 and 0 < weight <= max_weight:
        size += math.ceil(settings.max_font_growth * math.sqrt(weight / max_weight))
    return size


def node_label(node: CallSite, total_stacks: int) -> str:
    percentage = node.weight / total_stacks * 100
    return f"{node.label}\n{node.weight} of {total_stacks} ({percentage:.2f}%)"


def edge_attributes(weight: int, total_stacks: int) -> list[Attribute]:
    """Label every edge with its count; heavy edges also pull harder and draw thicker."""

    attributes: list[Attribute] = [("label", str(weight))]
    pull = 1 + weight * 100 // total_stacks
    if pull > 1:
        attributes.append(("weight", str(pull)))
    width = 1 + weight * 10 // total_stacks
    if width > 1:
        attributes.append(("penwidth", str(width)))
    return attributes


def _dot_id(node_id: int) -> str:
    return f"N{node_id}"


def render_dot(graph: GoroutineGraph, settings: RenderSettings | None = None) -> Iterator[str]:
    """
    Yield the DOT description of ``graph`` statement by statement.

    The header comes first, then one statement per call site in id order, then one per
    transition, then the closing brace.
    """

    if graph.total_stacks <= 0:
        raise EmptyStackDumpError("Cannot render a graph built from zero stacks.")

    settings = settings or RenderSettings()
    total = graph.total_stacks
    max_weight = graph.max_node_weight

    yield f"digraph {graph_id(settings.graph_name)} {{\n"
    yield f'node [style=filled fillcolor="{dot_quote(settings.fill_color)}"];\n'

    for node in graph.nodes:
        yield node_statement(
            _dot_id(node.id),
            [
                ("fontsize", str(font_size(node.weight, max_weight, settings))),
                ("label", node_label(node, total)),
                ("shape", settings.node_shape),
            ],
        )

    for edge in graph.edges:
        yield edge_statement(
            _dot_id(edge.source),
            _dot_id(edge.target),
            edge_attributes(edge.weight, total),
        )

    yield "}\n"


def write_dot(graph: GoroutineGraph, sink: TextIO, settings: RenderSettings | None = None) -> int:
    """Write the DOT description to ``sink`` and return the number of statements written."""

    written = 0
    for fragment in render_dot(graph, settings):
        try:
            sink.write(fragment)
        except OSError as exc:
            raise DotWriteError(f"Failed to write DOT output: {exc}") from exc
        written += 1
    return written


__all__ = [
    "DotWriteError",
    "graph_id",
    "dot_quote",
    "edge_attributes",
    "edge_statement",
    "font_size",
    "node_label",
    "node_statement",
    "render_dot",
    "write_dot",
]
