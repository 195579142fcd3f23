"""
JSON serialization for Diagram objects.

The serialized format supports round-trip loading of the diagram and carries
the computed layout (positions, columns, depths) for renderers that do not
run the layout engine themselves.
"""

import json
from typing import Any, Dict, Optional

from drakon.core.ir import Diagram, DiagramAttachment, DiagramEdge, DiagramNode, DiagramNote
from drakon.core.syntax import AttributeStatement, BlockStatement


def _jsonable(value: Any) -> Any:
    """Convert attribute values, including unconsumed statement lists, to JSON data."""
    if isinstance(value, BlockStatement):
        return {
            "type": "block",
            "name": value.name,
            "labels": list(value.labels),
            "body": [_jsonable(item) for item in value.body],
        }
    if isinstance(value, AttributeStatement):
        return {"type": "attribute", "key": value.key, "value": _jsonable(value.value.to_python())}
    if isinstance(value, dict):
        return {str(key): _jsonable(entry) for key, entry in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(entry) for entry in value]
    return value


class JsonSerializer:
    """
    Serializes and deserializes Diagram objects to/from JSON.

    The 'graph' field holds precomputed edge lookups (incomingEdges,
    outgoingEdges) keyed by node id. They are NOT used during deserialization
    since they can be recomputed from the edges list. The same applies to the
    optional 'layout' field.
    """

    @staticmethod
    def to_dict(diagram: Diagram, layout=None) -> Dict[str, Any]:
        nodes_data = []
        for node in diagram.nodes:
            node_data = {
                "id": node.id,
                "type": node.type,
                "label": node.label,
                "column": node.column,
                "line": node.block.line,
                "attributes": _jsonable(node.attributes),
            }
            if node.geometry is not None:
                node_data["geometry"] = {
                    "width": node.geometry.width,
                    "height": node.geometry.height,
                    "lines": node.geometry.wrapped_lines,
                    "lineHeight": node.geometry.line_height,
                    "textYOffset": node.geometry.text_y_offset,
                }
            nodes_data.append(node_data)

        edges_data = []
        incoming_edges: Dict[str, list] = {}
        outgoing_edges: Dict[str, list] = {}

        for idx, edge in enumerate(diagram.edges):
            edge_id = f"e{idx}"
            edges_data.append({
                "id": edge_id,
                "from": edge.source,
                "to": edge.target,
                "fromBase": edge.from_base,
                "toBase": edge.to_base,
                "kind": edge.kind,
                "label": edge.label,
                "note": edge.note,
                "handle": edge.handle,
                "attributes": _jsonable(edge.attributes),
            })
            incoming_edges.setdefault(edge.to_base, []).append(edge_id)
            outgoing_edges.setdefault(edge.from_base, []).append(edge_id)

        data = {
            "title": diagram.title,
            "metadata": _jsonable(diagram.metadata),
            "nodes": nodes_data,
            "edges": edges_data,
            "attachments": [
                {"type": item.type, "id": item.id, "target": item.target, "attributes": _jsonable(item.attributes)}
                for item in diagram.attachments
            ],
            "notes": [
                {"text": note.text, "placement": note.placement, "attachesTo": note.attaches_to}
                for note in diagram.notes
            ],
            "graph": {
                "incomingEdges": incoming_edges,
                "outgoingEdges": outgoing_edges,
            },
        }
        if layout is not None:
            data["layout"] = {
                "width": layout.width,
                "height": layout.height,
                "positions": {node_id: {"x": point.x, "y": point.y} for node_id, point in layout.positions.items()},
                "columns": [
                    {"index": column.index, "x": column.x, "width": column.width, "nodes": list(column.nodes)}
                    for column in layout.columns
                ],
                "depths": dict(layout.depths),
            }
        return data

    @staticmethod
    def to_json(diagram: Diagram, layout=None, indent: int = 2) -> str:
        return json.dumps(JsonSerializer.to_dict(diagram, layout), indent=indent)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Diagram:
        diagram = Diagram(title=data.get("title", "Diagram"), metadata=data.get("metadata"))

        for node_data in data.get("nodes", []):
            node_id = node_data["id"]
            node_type = node_data.get("type", "action")
            node = DiagramNode(
                node_id=node_id,
                node_type=node_type,
                label=node_data.get("label", ""),
                column=node_data.get("column", 0),
                attributes=node_data.get("attributes"),
                block=BlockStatement(name=node_type, labels=[node_id], body=[], line=node_data.get("line", 0)),
            )
            diagram.nodes.append(node)

        for edge_data in data.get("edges", []):
            diagram.edges.append(DiagramEdge(
                source=edge_data["from"],
                target=edge_data["to"],
                kind=edge_data.get("kind", "main"),
                label=edge_data.get("label", ""),
                note=edge_data.get("note", ""),
                handle=edge_data.get("handle", ""),
                attributes=edge_data.get("attributes"),
                from_base=edge_data.get("fromBase"),
                to_base=edge_data.get("toBase"),
            ))

        for item in data.get("attachments", []):
            diagram.attachments.append(
                DiagramAttachment(item.get("type", "attachment"), item["id"], item["target"], item.get("attributes"))
            )
        for note in data.get("notes", []):
            diagram.notes.append(DiagramNote(note.get("text", ""), note.get("placement", "right"), note.get("attachesTo")))

        return diagram

    @staticmethod
    def from_json(json_str: str) -> Diagram:
        data = json.loads(json_str)
        return JsonSerializer.from_dict(data)
