"""
Layered layout for built diagrams.

Two passes, run in order:

    prepare_nodes(diagram)        size every node from its shape spec and label
    build_layout(diagram)         depth layering, column x and row y placement

Depth follows the longest-path rule over ``from_base -> to_base`` edges, so a
node always sits below every one of its predecessors. A question's lane edge
weighs 0 and keeps the branch head on the question's row.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from drakon.core.ir import Diagram, NodeGeometry, resolve_base
from drakon.layout.shapes import get_node_spec
from drakon.layout.text import Measure, wrap_label_text

logger = logging.getLogger(__name__)

FALLBACK_WIDTH = 220
FALLBACK_HEIGHT = 170


@dataclass
class LayoutConfig:
    column_gap: float = 140
    column_padding: float = 80
    top_margin: float = 140
    bottom_margin: float = 120
    left_margin: float = 160
    row_spacing: float = 90
    min_column_width: float = 260
    min_width: float = 640
    min_height: float = 600


@dataclass
class Point:
    x: float
    y: float


@dataclass
class ColumnLayout:
    index: int
    x: float
    width: float
    nodes: List[str] = field(default_factory=list)


@dataclass
class LayoutResult:
    width: float
    height: float
    positions: Dict[str, Point] = field(default_factory=dict)
    columns: List[ColumnLayout] = field(default_factory=list)
    depths: Dict[str, int] = field(default_factory=dict)


def prepare_nodes(diagram: Diagram, measure: Optional[Measure] = None) -> None:
    """Attach a :class:`NodeGeometry` to every node."""
    for node in diagram.nodes:
        spec = get_node_spec(node.type)
        width = spec.width or spec.base_width or 240
        wrapped = wrap_label_text(node.label, width, spec.padding_left, spec.padding_right, measure)
        lines = max(1, len(wrapped))
        if spec.dynamic_height:
            height = max(spec.min_height, spec.padding_top + spec.padding_bottom + lines * spec.line_height)
        else:
            height = spec.min_height
        node.geometry = NodeGeometry(
            width=width,
            height=height,
            lines=lines,
            line_height=spec.line_height,
            spec=spec,
            padding_top=spec.padding_top,
            padding_bottom=spec.padding_bottom,
            padding_left=spec.padding_left,
            padding_right=spec.padding_right,
            wrapped_lines=wrapped,
            text_y_offset=spec.text_y_offset,
        )


def compute_depths(diagram: Diagram) -> Dict[str, int]:
    """Longest-path depth of every node; nodes never reached stay at 0."""
    adjacency: Dict[str, List[tuple]] = {node.id: [] for node in diagram.nodes}
    indegree: Dict[str, int] = {node.id: 0 for node in diagram.nodes}

    for edge in diagram.edges:
        source, target = edge.from_base, edge.to_base
        if source == target or source not in adjacency or target not in adjacency:
            continue
        weight = 0 if edge.attributes.get("branch_lane") else 1
        adjacency[source].append((target, weight))
        indegree[target] += 1

    depths: Dict[str, int] = {}
    queue = deque()
    for node_id, degree in indegree.items():
        if degree == 0:
            queue.append(node_id)
            depths[node_id] = 0

    while queue:
        current = queue.popleft()
        current_depth = depths.get(current, 0)
        for neighbor, weight in adjacency[current]:
            candidate = current_depth + weight
            if neighbor not in depths or candidate > depths[neighbor]:
                depths[neighbor] = candidate
            indegree[neighbor] -= 1
            if indegree[neighbor] == 0:
                queue.append(neighbor)

    return {node.id: depths.get(node.id, 0) for node in diagram.nodes}


def build_layout(diagram: Diagram, config: Optional[LayoutConfig] = None) -> LayoutResult:
    """Place every node; call :func:`prepare_nodes` first to size them."""
    config = config or LayoutConfig()
    node_ids = {node.id for node in diagram.nodes}
    for edge in diagram.edges:
        edge.from_base = resolve_base(edge.source, node_ids)
        edge.to_base = resolve_base(edge.target, node_ids)

    depths = compute_depths(diagram)
    order = {node.id: index for index, node in enumerate(diagram.nodes)}

    def width_of(node) -> float:
        return node.geometry.width if node.geometry else FALLBACK_WIDTH

    def height_of(node) -> float:
        return node.geometry.height if node.geometry else FALLBACK_HEIGHT

    by_column: Dict[int, list] = {}
    for node in diagram.nodes:
        by_column.setdefault(node.column, []).append(node)

    columns: List[ColumnLayout] = []
    current_x = config.left_margin
    for index in sorted(by_column):
        members = sorted(by_column[index], key=lambda node: (depths[node.id], order[node.id]))
        widest = max([FALLBACK_WIDTH] + [width_of(node) for node in members])
        column_width = max(widest + config.column_padding, config.min_column_width)
        columns.append(ColumnLayout(
            index=index,
            x=current_x + column_width / 2,
            width=column_width,
            nodes=[node.id for node in members],
        ))
        current_x += column_width + config.column_gap

    level_heights: Dict[int, float] = {}
    for node in diagram.nodes:
        depth = depths[node.id]
        level_heights[depth] = max(level_heights.get(depth, 0), height_of(node))

    level_centers: Dict[int, float] = {}
    current_y = config.top_margin
    for depth in sorted(level_heights):
        level_centers[depth] = current_y + level_heights[depth] / 2
        current_y += level_heights[depth] + config.row_spacing

    column_x = {column.index: column.x for column in columns}
    positions = {
        node.id: Point(column_x[node.column], level_centers[depths[node.id]]) for node in diagram.nodes
    }

    starts = diagram.nodes_of_type("start")
    if starts:
        for node in diagram.nodes_of_type("parameters"):
            positions[node.id].y = positions[starts[0].id].y

    width = max(current_x - config.column_gap + config.left_margin, config.min_width)
    height = max(current_y + config.bottom_margin, config.min_height)

    logger.debug(
        "Layout: %d columns, %d levels, canvas %.0fx%.0f",
        len(columns), len(level_heights), width, height,
    )
    return LayoutResult(width=width, height=height, positions=positions, columns=columns, depths=depths)
