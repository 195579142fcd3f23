import pytest
from drakon.core.ir import (
    Diagram, DiagramEdge, DiagramNode, base_anchor, resolve_base,
)
from drakon.core.syntax import (
    ListValue, NumValue, ObjectValue, StrValue,
)

def test_node_defaults():
    node = DiagramNode("a", "action", label="Step")
    assert node.column == 0
    assert node.attributes == {}
    assert node.block.name == "action"
    assert node.block.labels == ["a"]
    assert node.geometry is None
    assert not node.implicit

def test_implicit_node():
    node = DiagramNode("d@start", "start", attributes={"implicit": True})
    assert node.implicit

def test_edge_bases_strip_anchor():
    edge = DiagramEdge("a@right", "b")
    assert edge.from_base == "a"
    assert edge.to_base == "b"
    assert edge.kind == "main"
    assert edge.key == "a>b"

def test_edge_explicit_bases():
    edge = DiagramEdge("d@start", "x@left", from_base="d@start", to_base="x")
    assert edge.key == "d@start>x"

@pytest.mark.parametrize("value,expected", [
    ("a@left", "a"),
    ("a", "a"),
    ("", ""),
    (None, ""),
])
def test_base_anchor(value, expected):
    assert base_anchor(value) == expected

@pytest.mark.parametrize("reference,expected", [
    ("main@start", "main@start"),
    ("main@start@right", "main@start"),
    ("a@left", "a"),
    ("ghost@left", "ghost"),
])
def test_resolve_base(reference, expected):
    assert resolve_base(reference, {"main@start", "a"}) == expected

def test_diagram_lookups():
    diagram = Diagram("Test")
    diagram.nodes.append(DiagramNode("a", "action"))
    diagram.nodes.append(DiagramNode("q", "question"))
    diagram.edges.append(DiagramEdge("a", "q"))

    assert diagram.get_node("q").type == "question"
    assert diagram.get_node("missing") is None
    assert [node.id for node in diagram.nodes_of_type("action")] == ["a"]
    assert len(diagram.edges_from("a")) == 1
    assert len(diagram.edges_to("q")) == 1
    assert diagram.edges_to("a") == []

def test_value_to_python():
    value = ObjectValue({"n": NumValue(1), "items": ListValue([StrValue("x")])})
    assert value.to_python() == {"n": 1, "items": ["x"]}
