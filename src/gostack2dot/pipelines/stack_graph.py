"""High-level orchestration from a goroutine dump to a DOT graph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from gostack2dot.analysis.goroutine_graph import GoroutineGraph, build_goroutine_graph
from gostack2dot.config import RenderSettings
from gostack2dot.io.dot_writer import write_dot
from gostack2dot.io.goroutine_dump import read_goroutine_dump

LOGGER = logging.getLogger(__name__)


def load_goroutine_graph(source: Path | str | TextIO) -> GoroutineGraph:
    """Parse a dump and aggregate its stacks."""

    goroutines = read_goroutine_dump(source)
    return build_goroutine_graph(goroutine.frames for goroutine in goroutines)


def render_dump(
    source: Path | str | TextIO,
    destination: Path | str | TextIO,
    *,
    settings: RenderSettings | None = None,
) -> GoroutineGraph:
    """
    Read a goroutine dump from ``source`` and write its call graph to ``destination``.

    A destination path is only opened once the dump has been parsed and aggregated, so an empty
    or malformed dump leaves an existing file untouched. Errors are not retried; a failed write
    leaves the destination partially written.
    """

    graph = load_goroutine_graph(source)
    LOGGER.info(
        "Rendering %d goroutines as %d call sites and %d transitions",
        graph.total_stacks,
        len(graph.nodes),
        len(graph.edges),
    )

    if hasattr(destination, "write"):
        write_dot(graph, destination, settings)
        return graph

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8") as handle:
        write_dot(graph, handle, settings)
    return graph
