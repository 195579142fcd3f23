"""Core data structures for Drakon diagrams."""

from .syntax import (
    AttributeStatement, BlockStatement, BoolValue, ListValue, NestedValue,
    NumValue, ObjectValue, StrValue,
)
from .ir import Diagram, DiagramAttachment, DiagramEdge, DiagramNode, DiagramNote, NodeGeometry
from .serialization import JsonSerializer

__all__ = [
    "AttributeStatement",
    "BlockStatement",
    "BoolValue",
    "ListValue",
    "NestedValue",
    "NumValue",
    "ObjectValue",
    "StrValue",
    "Diagram",
    "DiagramAttachment",
    "DiagramEdge",
    "DiagramNode",
    "DiagramNote",
    "NodeGeometry",
    "JsonSerializer",
]
