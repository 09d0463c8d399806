"""Reader for the textual goroutine dumps printed by the Go runtime."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO

LOGGER = logging.getLogger(__name__)

GOROUTINE_RE = re.compile(r"^goroutine (?P<id>\d+)(?: [^\[]*)? \[(?P<state>[^\]]*)\]:$")
FUNCTION_RE = re.compile(r"^(?P<function>\S+)\((?P<args>[^()]*)\)$")
CREATED_BY_RE = re.compile(r"^created by (?P<function>\S+?)(?: in goroutine \d+)?$")
LOCATION_RE = re.compile(r"^\t(?P<path>.+?):(?P<line>\d+)(?:\s.*)?$")
ELIDED_MARKER = "...additional frames elided..."


class StackDumpParseError(ValueError):
    """Raised when a goroutine dump contains a malformed frame."""

    def __init__(self, lineno: int, message: str) -> None:
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno


@dataclass(frozen=True, slots=True)
class CallFrame:
    """One call site inside a goroutine stack."""

    function: str
    source_path: str
    line: int

    @property
    def package(self) -> str:
        """Package name of the function, without its import path."""

        _, _, last = self.function.rpartition("/")
        package, _, _ = last.partition(".")
        return package.replace("%2e", ".")

    @property
    def label(self) -> str:
        """Short ``pkg.Func`` name shown in the rendered graph."""

        _, _, last = self.function.rpartition("/")
        _, dot, name = last.partition(".")
        if not dot:
            return last
        return f"{self.package}.{name}"

    @property
    def signature(self) -> str:
        """Source location that uniquely identifies the call site."""

        return f"{self.source_path}:{self.line}"


@dataclass(slots=True)
class Goroutine:
    id: int
    state: str
    frames: List[CallFrame] = field(default_factory=list)
    created_by: Optional[CallFrame] = None


def _location(lines: Iterator[tuple[int, str]], function: str, lineno: int) -> tuple[str, int]:
    try:
        next_lineno, text = next(lines)
    except StopIteration:
        raise StackDumpParseError(lineno, f"missing source location for {function}") from None
    match = LOCATION_RE.match(text)
    if match is None:
        raise StackDumpParseError(next_lineno, f"expected source location for {function}, got {text!r}")
    return match.group("path"), int(match.group("line"))


def parse_goroutine_dump(lines: Iterable[str]) -> list[Goroutine]:
    """
    Parse a goroutine dump into :class:`Goroutine` records.

    Anything before the first ``goroutine N [state]:`` header, such as a panic message, is
    skipped. ``created by`` frames are kept apart from the stack frames.
    """

    goroutines: list[Goroutine] = []
    current: Goroutine | None = None
    numbered = ((lineno, text.rstrip("\r\n")) for lineno, text in enumerate(lines, start=1))

    for lineno, text in numbered:
        header = GOROUTINE_RE.match(text)
        if header:
            current = Goroutine(id=int(header.group("id")), state=header.group("state"))
            goroutines.append(current)
            continue
        if current is None or not text.strip() or text.strip() == ELIDED_MARKER:
            continue

        created = CREATED_BY_RE.match(text)
        if created:
            function = created.group("function")
            path, line = _location(numbered, function, lineno)
            current.created_by = CallFrame(function=function, source_path=path, line=line)
            continue

        call = FUNCTION_RE.match(text)
        if call is None:
            LOGGER.debug("Ignoring unrecognised line %d: %r", lineno, text)
            continue
        function = call.group("function")
        path, line = _location(numbered, function, lineno)
        current.frames.append(CallFrame(function=function, source_path=path, line=line))

    LOGGER.info("Parsed %d goroutines", len(goroutines))
    return goroutines


def read_goroutine_dump(source: Path | str | TextIO) -> list[Goroutine]:
    """Read and parse a dump from a path or an already opened text stream."""

    if hasattr(source, "read"):
        return parse_goroutine_dump(source)

    with Path(source).open("r", encoding="utf-8", errors="replace") as handle:
        return parse_goroutine_dump(handle)


__all__ = [
    "CallFrame",
    "Goroutine",
    "StackDumpParseError",
    "parse_goroutine_dump",
    "read_goroutine_dump",
]
