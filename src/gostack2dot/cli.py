"""Command line entry points for the project."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, TextIO

import typer

from gostack2dot import __version__
from gostack2dot.analysis.goroutine_graph import EmptyStackDumpError, GoroutineGraph, hottest_call_sites
from gostack2dot.io.goroutine_dump import StackDumpParseError
from gostack2dot.pipelines.stack_graph import load_goroutine_graph, render_dump

STDIN_MARKER = Path("-")

app = typer.Typer(help="Turn Go goroutine dumps into weighted Graphviz call graphs.")


def _resolve_source(source: Path) -> Path | TextIO:
    if source == STDIN_MARKER:
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            return sys.stdin
        # Same decoding read_goroutine_dump applies to files.
        return io.TextIOWrapper(buffer, encoding="utf-8", errors="replace")
    candidate = source.expanduser().resolve()
    if not candidate.is_file():
        raise typer.BadParameter(f"Input not found: {candidate}")
    return candidate


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load_graph(source: Path) -> GoroutineGraph:
    try:
        return load_goroutine_graph(_resolve_source(source))
    except StackDumpParseError as exc:
        _fail(f"Malformed goroutine dump: {exc}")
    except EmptyStackDumpError:
        _fail("No goroutines found in the input.")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    display_version: bool = typer.Option(False, "--version", "-V", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
) -> None:
    """Print the package version when requested and configure logging."""

    if display_version:
        typer.echo(__version__)
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command("render")
def render(
    source: Path = typer.Argument(STDIN_MARKER, help="Goroutine dump to read ('-' for stdin)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write DOT here instead of stdout."),
) -> None:
    """Render a goroutine dump as a DOT call graph."""

    resolved = _resolve_source(source)
    try:
        render_dump(resolved, sys.stdout if output is None else output.expanduser())
    except StackDumpParseError as exc:
        _fail(f"Malformed goroutine dump: {exc}")
    except EmptyStackDumpError:
        _fail("No goroutines found in the input.")
    except OSError as exc:
        _fail(f"Failed to write output: {exc}")


@app.command("summary")
def summary(
    source: Path = typer.Argument(STDIN_MARKER, help="Goroutine dump to read ('-' for stdin)."),
    top: int = typer.Option(10, "--top", "-n", min=1, help="Number of call sites to list."),
) -> None:
    """Print aggregate counts and the heaviest call sites of a goroutine dump."""

    graph = _load_graph(source).to_networkx()
    total = graph.graph["total_stacks"]

    typer.echo(f"Goroutines: {total}")
    typer.echo(f"Call sites: {graph.number_of_nodes()}")
    typer.echo(f"Transitions: {graph.number_of_edges()}")
    typer.secho("Heaviest call sites:", fg=typer.colors.GREEN)
    for node, label, weight in hottest_call_sites(graph, top):
        typer.echo(f"  N{node} {label}: {weight} of {total} ({weight / total * 100:.2f}%)")


def run() -> None:
    """Entry point used by the ``gostack2dot`` console script."""

    app()


if __name__ == "__main__":
    run()
