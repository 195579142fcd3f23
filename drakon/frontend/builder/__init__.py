"""Diagram construction from parsed statements."""

from .diagram_builder import DiagramBuilder, build_diagram

__all__ = [
    "DiagramBuilder",
    "build_diagram",
]
