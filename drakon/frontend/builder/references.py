"""Root-level ``attach``, ``note`` and ``line`` blocks, resolved after all nodes exist."""

from drakon.core.ir import DiagramAttachment, DiagramEdge, DiagramNote
from drakon.core.syntax import BlockStatement
from drakon.frontend.builder.helpers import derive_label, split_statements


def _optional_string(attributes, key: str, default: str = "") -> str:
    value = attributes.get(key)
    return value if isinstance(value, str) else default


def handle_attachment(builder, block: BlockStatement) -> None:
    parts = split_statements(block.body)
    target = builder.resolve_reference(parts.values.get("target"), "Attach target", block)
    if target is None:
        return
    attributes = parts.plain_attributes()
    attributes["target"] = target.full
    attachment_type = block.labels[0] if block.labels else "attachment"
    if len(block.labels) > 1:
        attachment_id = block.labels[1]
    else:
        attachment_id = f"{attachment_type}_{len(builder.diagram.attachments) + 1}"
    builder.diagram.attachments.append(
        DiagramAttachment(attachment_type, attachment_id, target.full, attributes)
    )


def handle_note(builder, block: BlockStatement) -> None:
    parts = split_statements(block.body)
    attributes = parts.plain_attributes()
    attaches_to = None
    if isinstance(attributes.get("attaches_to"), str):
        resolved = builder.resolve_reference(attributes["attaches_to"], "Note attaches_to", block)
        if resolved is not None:
            attaches_to = resolved.full
    builder.diagram.notes.append(DiagramNote(
        text=derive_label(parts.values, "Note"),
        placement=_optional_string(attributes, "placement", "right"),
        attaches_to=attaches_to,
    ))


def handle_line(builder, block: BlockStatement) -> None:
    parts = split_statements(block.body)
    source = builder.resolve_reference(parts.values.get("from"), 'Line "from"', block)
    target = builder.resolve_reference(parts.values.get("to"), 'Line "to"', block)
    if source is None or target is None:
        return
    attributes = parts.plain_attributes()
    attributes["from"] = source.full
    attributes["to"] = target.full
    builder.add_edge(DiagramEdge(
        source=source.full,
        target=target.full,
        kind=_optional_string(attributes, "kind", "main"),
        label=_optional_string(attributes, "label"),
        note=_optional_string(attributes, "note"),
        handle=_optional_string(attributes, "handle"),
        attributes=attributes,
        from_base=source.base,
        to_base=target.base,
    ))
