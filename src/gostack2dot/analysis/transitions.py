"""Counting of directed transitions between consecutive frames."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, NamedTuple, Tuple


class Transition(NamedTuple):
    source: int
    target: int
    weight: int


class TransitionAggregator:
    """
    Accumulate edge counts over many stacks.

    For consecutive node ids ``prev`` then ``curr`` of one stack the edge ``(curr, prev)`` is
    counted, so arrows point from the later visited frame back to the earlier one.
    """

    def __init__(self) -> None:
        self._counts: Dict[Tuple[int, int], int] = {}

    def add_stack(self, node_ids: Iterable[int]) -> None:
        previous: int | None = None
        for current in node_ids:
            if previous is not None:
                key = (current, previous)
                self._counts[key] = self._counts.get(key, 0) + 1
            previous = current

    def __len__(self) -> int:
        return len(self._counts)

    def __iter__(self) -> Iterator[Transition]:
        for (source, target), weight in self._counts.items():
            yield Transition(source, target, weight)


__all__ = ["Transition", "TransitionAggregator"]
