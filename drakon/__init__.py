"""
Drakon - compile HCL-style DRAKON flowchart sources into positioned diagrams.

Pipeline:
- tokenize: source text -> tokens
- parse: tokens -> statements
- build_diagram: statements -> Diagram
- prepare_nodes / build_layout: Diagram -> LayoutResult
- compile_diagram: all of the above in one call

Backends:
- JsonSerializer: JSON with optional layout
- GraphvizExporter: Graphviz DOT format with pinned positions
- SvgExporter: SVG preview (requires Graphviz)
"""

from drakon.core.ir import Diagram, DiagramNode, DiagramEdge, DiagramAttachment, DiagramNote
from drakon.core.serialization import JsonSerializer
from drakon.frontend import tokenize, parse, build_diagram, DiagramBuilder
from drakon.layout import LayoutConfig, LayoutResult, prepare_nodes, build_layout
from drakon.pipeline import CompileResult, compile_diagram
from drakon.backend import GraphvizExporter, SvgExporter

__all__ = [
    # Core IR
    "Diagram",
    "DiagramNode",
    "DiagramEdge",
    "DiagramAttachment",
    "DiagramNote",
    # Serialization
    "JsonSerializer",
    # Frontend
    "tokenize",
    "parse",
    "build_diagram",
    "DiagramBuilder",
    # Layout
    "LayoutConfig",
    "LayoutResult",
    "prepare_nodes",
    "build_layout",
    # Pipeline
    "CompileResult",
    "compile_diagram",
    # Backends
    "GraphvizExporter",
    "SvgExporter",
]
