"""Backend exporters for diagrams."""

from drakon.backend.graphviz import GraphvizExporter
from drakon.backend.svg import SvgExporter

__all__ = [
    "GraphvizExporter",
    "SvgExporter",
]
