"""Start, end and loop-end synthesis."""

from typing import List, Optional

from drakon.core.ir import DiagramNode
from drakon.core.syntax import BlockStatement
from drakon.frontend.builder.helpers import unique_id


def _ensure_anchored_alias(builder, node: DiagramNode, fallback_anchor: Optional[str] = None) -> None:
    anchor = node.attributes.get("anchor")
    if isinstance(anchor, str) and anchor.strip():
        builder.register_alias(anchor.strip(), node.id)
        return
    if fallback_anchor:
        node.attributes["anchor"] = fallback_anchor
        builder.register_alias(fallback_anchor, node.id)


def ensure_start_node(builder, label: str) -> None:
    """Prepend ``<base>@start`` to the primary column, or relabel an existing start."""
    start_node = next((node for node in builder.diagram.nodes if node.type == "start"), None)
    anchor = f"{builder.anchor_base}@start"
    if start_node is None:
        candidate = DiagramNode(
            node_id=anchor,
            node_type="start",
            label=label,
            attributes={"implicit": True, "anchor": anchor, "text": label},
            block=BlockStatement(name="start", labels=["start"], body=[]),
        )
        if builder.register_node(builder.primary_column, candidate, prepend=True):
            builder.register_alias("start", candidate.id)
            start_node = candidate
    else:
        start_node.label = label
        start_node.attributes["text"] = label
        _ensure_anchored_alias(builder, start_node, anchor)
        builder.register_alias("start", start_node.id)
    builder.start_node = start_node


def ensure_end_nodes(builder) -> None:
    end_nodes = [node for node in builder.diagram.nodes if node.type == "end"]
    anchor = f"{builder.anchor_base}@end"
    if not end_nodes:
        candidate = DiagramNode(
            node_id=anchor,
            node_type="end",
            label="End",
            attributes={"implicit": True, "anchor": anchor},
            block=BlockStatement(name="end", labels=["end"], body=[]),
        )
        if builder.register_node(builder.primary_column, candidate):
            builder.register_alias("end", candidate.id)
        return
    for index, node in enumerate(end_nodes):
        _ensure_anchored_alias(builder, node, anchor if index == 0 else None)


def process_for_each_body(builder, column: int, node: DiagramNode, blocks: List[BlockStatement]) -> None:
    """Build the loop body in place and close it with a ``loop_end`` node."""
    if not blocks:
        return
    if not builder.build_chain(column, blocks, f'for_each "{node.id}"'):
        return

    loop_end_id = unique_id(f"{node.id}_end", builder.node_by_id)
    loop_end = DiagramNode(
        node_id=loop_end_id,
        node_type="loop_end",
        label="",
        column=column,
        attributes={"implicit": True, "loop": node.id},
        block=BlockStatement(name="loop_end", labels=[loop_end_id], body=[]),
    )
    builder.register_node(column, loop_end)
    node.attributes["loop_end"] = loop_end_id
