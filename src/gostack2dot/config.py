"""Configuration primitives for the project."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RenderSettings:
    """Visual settings used when serialising a goroutine graph to DOT."""

    graph_name: str = "goroutines"
    fill_color: str = "#f8f8f8"
    node_shape: str = "box"
    base_font_size: int = 8
    max_font_growth: float = 16.0
