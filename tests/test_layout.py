"""Tests for node sizing, wrapping and layered placement."""

import pytest

from drakon.core.ir import Diagram, DiagramEdge, DiagramNode
from drakon.layout.engine import LayoutConfig, build_layout, compute_depths, prepare_nodes
from drakon.layout.shapes import DEFAULT_SPEC, get_node_spec
from drakon.layout.text import wrap_label_text
from drakon.pipeline import compile_diagram

from diagram_helpers import char_width


def make_diagram(nodes, edges):
    diagram = Diagram(title="Test")
    for node_id, node_type, column in nodes:
        diagram.nodes.append(DiagramNode(node_id, node_type, label=node_id, column=column))
    for source, target, attributes in edges:
        diagram.edges.append(DiagramEdge(source, target, attributes=attributes))
    return diagram


class TestShapes:

    def test_action_spec(self):
        spec = get_node_spec("action")
        assert spec.width == 240
        assert spec.min_height == pytest.approx(140)
        assert spec.line_height == 22

    def test_unknown_type_uses_default(self):
        assert get_node_spec("something_new") is DEFAULT_SPEC

    def test_parameters_spec_is_left_aligned(self):
        spec = get_node_spec("parameters")
        assert spec.width == pytest.approx(300)
        assert spec.base_width == pytest.approx(300)
        assert spec.text_align == "left"


class TestWrapping:

    def test_words_wrap_to_text_area(self):
        # 240 - 2 * 28 = 184px, 23 characters at 8px
        lines = wrap_label_text("Validate the incoming order", 240, 28, 28, char_width)
        assert lines == ["Validate the incoming", "order"]

    def test_long_word_is_split(self):
        lines = wrap_label_text("x" * 50, 100, 0, 0, char_width)
        assert lines == ["x" * 12, "x" * 12, "x" * 12, "x" * 12, "xx"]

    def test_explicit_breaks_and_blank_lines(self):
        assert wrap_label_text("a\n\nb", 240, 28, 28, char_width) == ["a", "", "b"]

    def test_empty_label(self):
        assert wrap_label_text(None, 240, 28, 28, char_width) == [""]
        assert wrap_label_text("", 240, 28, 28, char_width) == [""]

    def test_available_width_floor(self):
        assert wrap_label_text("ab", 10, 28, 28, char_width) == ["a", "b"]


class TestPrepareNodes:

    def test_single_line_action_keeps_min_height(self, measure):
        diagram = make_diagram([("a", "action", 0)], [])
        prepare_nodes(diagram, measure)
        geometry = diagram.nodes[0].geometry
        assert geometry.width == 240
        assert geometry.height == pytest.approx(140)
        assert geometry.lines == 1
        assert geometry.wrapped_lines == ["a"]

    def test_many_lines_grow_height(self, measure):
        diagram = make_diagram([("a", "action", 0)], [])
        diagram.nodes[0].label = "\n".join(["line"] * 6)
        prepare_nodes(diagram, measure)
        assert diagram.nodes[0].geometry.height == pytest.approx(28 + 28 + 6 * 22)

    def test_parameters_uses_base_width(self, measure):
        diagram = make_diagram([("p", "parameters", 1)], [])
        prepare_nodes(diagram, measure)
        assert diagram.nodes[0].geometry.width == pytest.approx(300)


class TestDepths:

    def test_longest_path(self):
        diagram = make_diagram(
            [("a", "action", 0), ("b", "action", 0), ("c", "action", 1), ("d", "action", 0)],
            [("a", "b", {}), ("a", "c", {}), ("b", "d", {}), ("c", "d", {}), ("a", "d", {})],
        )
        assert compute_depths(diagram) == {"a": 0, "b": 1, "c": 1, "d": 2}

    def test_lane_edge_keeps_row(self):
        diagram = make_diagram(
            [("q", "question", 0), ("x", "action", 1), ("y", "action", 1)],
            [("q", "x", {"branch_lane": True}), ("x", "y", {})],
        )
        assert compute_depths(diagram) == {"q": 0, "x": 0, "y": 1}

    def test_unknown_and_self_edges_are_ignored(self):
        diagram = make_diagram(
            [("a", "action", 0)],
            [("a", "a", {}), ("a", "ghost", {})],
        )
        assert compute_depths(diagram) == {"a": 0}

    def test_cycle_does_not_hang(self):
        diagram = make_diagram(
            [("a", "action", 0), ("b", "action", 0)],
            [("a", "b", {}), ("b", "a", {})],
        )
        assert compute_depths(diagram) == {"a": 0, "b": 0}


class TestBuildLayout:

    def test_column_positions_and_canvas(self, measure):
        diagram = make_diagram(
            [("a", "action", 0), ("b", "action", 1)],
            [("a", "b", {})],
        )
        prepare_nodes(diagram, measure)
        layout = build_layout(diagram)

        assert [(column.index, column.x, column.width) for column in layout.columns] == [
            (0, 320, 320), (1, 780, 320),
        ]
        assert layout.width == 1100
        assert layout.positions["a"].x == 320
        assert layout.positions["b"].x == 780
        assert layout.positions["a"].y == pytest.approx(210)
        assert layout.positions["b"].y == pytest.approx(210 + 70 + 90 + 70)

    def test_minimum_canvas(self, measure):
        diagram = make_diagram([("a", "action", 0)], [])
        prepare_nodes(diagram, measure)
        layout = build_layout(diagram)
        assert (layout.width, layout.height) == (640, 600)

    def test_unprepared_nodes_use_fallback_size(self):
        diagram = make_diagram([("a", "action", 0)], [])
        layout = build_layout(diagram)
        assert layout.columns[0].width == 300

    def test_column_order_follows_depth(self, measure):
        diagram = make_diagram(
            [("b", "action", 0), ("a", "action", 0)],
            [("a", "b", {})],
        )
        prepare_nodes(diagram, measure)
        assert build_layout(diagram).columns[0].nodes == ["a", "b"]

    def test_custom_config(self, measure):
        diagram = make_diagram([("a", "action", 0)], [])
        prepare_nodes(diagram, measure)
        layout = build_layout(diagram, LayoutConfig(left_margin=0, min_width=0, min_height=0))
        assert layout.columns[0].x == 160
        assert layout.width == 320

    def test_anchored_bases_are_resolved(self, measure):
        diagram = make_diagram(
            [("d@start", "start", 0), ("a", "action", 0)],
            [("d@start", "a@left", {})],
        )
        edge = diagram.edges[0]
        assert (edge.from_base, edge.to_base) == ("d", "a")

        prepare_nodes(diagram, measure)
        layout = build_layout(diagram)
        assert (edge.from_base, edge.to_base) == ("d@start", "a")
        assert layout.depths == {"d@start": 0, "a": 1}


class TestCompiledLayout:

    def test_parameters_share_start_row(self, order_source, measure):
        result = compile_diagram(order_source, measure=measure)
        assert result.errors == []
        positions = result.layout.positions
        assert positions["parameters"].y == positions["order@start"].y
        assert positions["parameters"].x > positions["order@start"].x

    def test_branch_head_on_question_row(self, order_source, measure):
        result = compile_diagram(order_source, measure=measure)
        depths = result.layout.depths
        assert depths["backorder"] == depths["in_stock"]
        assert depths["order@end"] == depths["backorder"] + 1

    def test_every_node_positioned(self, order_source, measure):
        result = compile_diagram(order_source, measure=measure)
        assert set(result.layout.positions) == {node.id for node in result.diagram.nodes}
        assert all(node.geometry is not None for node in result.diagram.nodes)
