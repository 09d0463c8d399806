"""Deduplication of call frames into weighted call-site nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Protocol


class FrameLike(Protocol):
    """Anything exposing a display label and a source-location signature."""

    @property
    def label(self) -> str:
        ...

    @property
    def signature(self) -> str:
        ...


@dataclass(slots=True)
class CallSite:
    id: int
    label: str
    weight: int = 1


class CallSiteRegistry:
    """
    Assign dense node identifiers to distinct source-location signatures.

    Identifiers follow first-seen order. Every repeated signature bumps the weight of the node
    it maps to; the label recorded on first sight is kept.
    """

    def __init__(self) -> None:
        self._by_signature: Dict[str, int] = {}
        self._sites: List[CallSite] = []

    def intern(self, signature: str, label: str) -> int:
        node_id = self._by_signature.get(signature)
        if node_id is None:
            node_id = len(self._sites)
            self._by_signature[signature] = node_id
            self._sites.append(CallSite(id=node_id, label=label))
        else:
            self._sites[node_id].weight += 1
        return node_id

    def intern_frame(self, frame: FrameLike) -> int:
        return self.intern(frame.signature, frame.label)

    def __len__(self) -> int:
        return len(self._sites)

    def __iter__(self) -> Iterator[CallSite]:
        return iter(self._sites)


__all__ = ["CallSite", "CallSiteRegistry", "FrameLike"]
