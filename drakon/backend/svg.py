"""SVG preview backend using Graphviz.

The preview draws generic Graphviz shapes at the positions computed by the
layout engine. It is meant for inspecting a diagram, not as a DRAKON icon
renderer.

Requirements:
    Graphviz must be installed on your system:
    - macOS: brew install graphviz
    - Ubuntu/Debian: sudo apt-get install graphviz
    - Windows: Download from https://graphviz.org/download/

Example:
    >>> from drakon import compile_diagram, SvgExporter
    >>>
    >>> result = compile_diagram('drakon "demo" { action "a" { text = "Step" } }')
    >>> svg_string = SvgExporter.to_svg(result.diagram, result.layout)
    >>> with open("demo.svg", "w") as f:
    ...     f.write(svg_string)
"""

import graphviz

from drakon.backend.graphviz import GraphvizExporter


__all__ = ["SvgExporter"]


class SvgExporter:
    """Exports a Diagram to SVG format using Graphviz."""

    @staticmethod
    def to_svg(diagram, layout=None) -> str:
        """
        Convert a diagram to an SVG string using Graphviz.

        Args:
            diagram: The diagram to convert
            layout: Optional layout result pinning node positions

        Returns:
            SVG document as a string

        Raises:
            RuntimeError: If Graphviz executable is not available
        """
        digraph = GraphvizExporter.to_digraph(diagram, layout)
        try:
            svg_bytes = digraph.pipe(format='svg')
        except graphviz.ExecutableNotFound as e:
            raise RuntimeError(
                "Graphviz executable not found. "
                "Please install Graphviz: https://graphviz.org/download/"
            ) from e
        return svg_bytes.decode('utf-8')
