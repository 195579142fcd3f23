import graphviz
from typing import Optional

from drakon import config
from drakon.core.ir import Diagram, DiagramNode
from drakon.layout.engine import LayoutResult

# Layout coordinates are CSS pixels; Graphviz positions are points.
POINTS_PER_PIXEL = 72 / 96
PIXELS_PER_INCH = 96


class GraphvizExporter:
    """Exports a Diagram to Graphviz/Dot format or renders it."""

    # Node type to (shape, style) mapping
    _SHAPES = {
        "start": ("box", "rounded"),
        "end": ("box", "rounded"),
        "action": ("box", ""),
        "question": ("diamond", ""),
        "choice": ("hexagon", ""),
        "choice_case": ("box", ""),
        "choice_else": ("box", ""),
        "for_each": ("trapezium", ""),
        "loop_end": ("invtrapezium", ""),
        "parameters": ("note", ""),
        "comment": ("note", "dashed"),
        "insertion": ("box", "diagonals"),
        "parallel": ("box", "bold"),
        "input": ("parallelogram", ""),
        "output": ("parallelogram", ""),
        "simple_input": ("cds", ""),
        "simple_output": ("cds", ""),
        "shelf": ("box", ""),
        "process": ("component", ""),
        "ctrl_period_start": ("house", ""),
        "ctrl_period_end": ("invhouse", ""),
        "duration": ("octagon", ""),
        "pause": ("octagon", ""),
        "timer": ("doubleoctagon", ""),
        "group_duration": ("box", "rounded"),
    }
    _DEFAULT_SHAPE = ("box", "")

    @staticmethod
    def _escape_html(text: str) -> str:
        """Escape HTML special characters for Graphviz."""
        return (
            text.replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
        )

    @staticmethod
    def _html_label(node: DiagramNode) -> str:
        """HTML-like label keeping the wrapped lines computed by the layout."""
        if node.geometry is not None:
            lines = node.geometry.wrapped_lines
        else:
            lines = node.label.split("\n")
        body = '<BR/>'.join(GraphvizExporter._escape_html(line) for line in lines)
        return f'<{body}>'

    @staticmethod
    def _pinned_attributes(node: DiagramNode, layout: LayoutResult) -> dict:
        point = layout.positions.get(node.id)
        if point is None:
            return {}
        x = point.x * POINTS_PER_PIXEL
        y = (layout.height - point.y) * POINTS_PER_PIXEL
        attributes = {"pos": f"{x:.2f},{y:.2f}!"}
        if node.geometry is not None:
            attributes["width"] = f"{node.geometry.width / PIXELS_PER_INCH:.3f}"
            attributes["height"] = f"{node.geometry.height / PIXELS_PER_INCH:.3f}"
            attributes["fixedsize"] = "true"
        return attributes

    @staticmethod
    def to_digraph(diagram: Diagram, layout: Optional[LayoutResult] = None) -> graphviz.Digraph:
        """
        Converts a Diagram to a graphviz.Digraph object.

        Args:
            diagram: The diagram to convert
            layout: When given, every node is pinned to its computed position
                and the configured engine (neato by default) is used
        """
        dot = graphviz.Digraph(name=diagram.title, comment=diagram.title)
        dot.attr(rankdir='TB', label=diagram.title, labelloc='t')
        if layout is not None:
            dot.engine = config.GRAPHVIZ_ENGINE
            dot.attr(splines='ortho')

        known = set()
        for node in diagram.nodes:
            shape, style = GraphvizExporter._SHAPES.get(node.type, GraphvizExporter._DEFAULT_SHAPE)
            attributes = {"shape": shape}
            if style:
                attributes["style"] = style
            if layout is not None:
                attributes.update(GraphvizExporter._pinned_attributes(node, layout))
            dot.node(node.id, label=GraphvizExporter._html_label(node), **attributes)
            known.add(node.id)

        for edge in diagram.edges:
            if edge.from_base not in known or edge.to_base not in known:
                continue
            attributes = {}
            if edge.attributes.get("rejoin"):
                attributes["style"] = "dashed"
            dot.edge(edge.from_base, edge.to_base, label=edge.label or "", **attributes)

        return dot

    @staticmethod
    def to_dot(diagram: Diagram, layout: Optional[LayoutResult] = None) -> str:
        """Returns the DOT source string for the diagram."""
        return GraphvizExporter.to_digraph(diagram, layout).source

    @staticmethod
    def render(diagram: Diagram, filename: str, layout: Optional[LayoutResult] = None,
               format: str = 'png', view: bool = False):
        """Renders the diagram to a file."""
        dot = GraphvizExporter.to_digraph(diagram, layout)
        dot.render(filename, format=format, view=view)
