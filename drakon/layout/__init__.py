"""Geometry sizing and layered placement of diagram nodes."""

from .engine import (
    ColumnLayout, LayoutConfig, LayoutResult, Point,
    build_layout, compute_depths, prepare_nodes,
)
from .shapes import NODE_LIBRARY, NodeSpec, get_node_spec
from .text import measure_text_width, wrap_label_text

__all__ = [
    "ColumnLayout",
    "LayoutConfig",
    "LayoutResult",
    "Point",
    "build_layout",
    "compute_depths",
    "prepare_nodes",
    "NODE_LIBRARY",
    "NodeSpec",
    "get_node_spec",
    "measure_text_width",
    "wrap_label_text",
]
