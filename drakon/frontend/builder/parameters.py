"""The ``parameters`` side node hanging off the start node."""

from typing import Any, Dict, NamedTuple, Optional

from drakon.core.ir import DiagramEdge, DiagramNode
from drakon.core.syntax import (
    AttrValue, AttributeStatement, ListValue, NestedValue, ObjectValue, StrValue,
)
from drakon.frontend.builder.helpers import (
    display_value, format_parameter_scalar, normalize_multiline_text,
)

DEFAULT_ID = "parameters"
DEFAULT_LABEL = "Parameters"
NON_INFORMATIVE_KEYS = ("anchor", "tags", "data", "text", "lines", "title", "caption")


class ResolvedParameters(NamedTuple):
    id: str
    label: str
    attributes: Dict[str, Any]


def _finish_attributes(attributes: Dict[str, Any], anchor_base: str) -> Dict[str, Any]:
    result = dict(attributes)
    result["implicit"] = True
    anchor = result.get("anchor")
    if isinstance(anchor, str) and anchor.strip():
        result["anchor"] = anchor.strip()
    else:
        result["anchor"] = f"{anchor_base}@parameters"
    if isinstance(result.get("text"), str):
        result["text"] = normalize_multiline_text(result["text"])
    if isinstance(result.get("lines"), list):
        result["lines"] = [display_value(entry) for entry in result["lines"]]
    return result


def _object_entries(value: AttrValue) -> Dict[str, Any]:
    if isinstance(value, ObjectValue):
        return value.to_python()
    return {
        statement.key: statement.value.to_python()
        for statement in value.statements
        if isinstance(statement, AttributeStatement)
    }


def _resolve_object(source: Dict[str, Any], anchor_base: str) -> ResolvedParameters:
    config: Dict[str, Any] = {}
    for key, entry in source.items():
        if isinstance(entry, str) and key in ("text", "title", "caption"):
            config[key] = normalize_multiline_text(entry)
        elif isinstance(entry, list):
            config[key] = [display_value(element) for element in entry]
        else:
            config[key] = entry

    raw_id = config.pop("id", "")
    raw_id = raw_id.strip() if isinstance(raw_id, str) else ""

    label = config.get("text") if isinstance(config.get("text"), str) else ""
    if not label and isinstance(config.get("lines"), list) and config["lines"]:
        label = "\n".join(config["lines"])
    for key in ("title", "caption"):
        if not label and isinstance(config.get(key), str) and config[key].strip():
            label = config[key].strip()
    if not label:
        informative = [(key, entry) for key, entry in config.items() if key not in NON_INFORMATIVE_KEYS]
        label = "\n".join(f"{key} = {format_parameter_scalar(entry)}" for key, entry in informative)
    label = label or DEFAULT_LABEL

    attributes = _finish_attributes(config, anchor_base)
    attributes.setdefault("text", label)
    return ResolvedParameters(raw_id or DEFAULT_ID, label, attributes)


def resolve_parameters_value(value: Optional[AttrValue], anchor_base: str) -> Optional[ResolvedParameters]:
    """
    Derive id, label and attributes of the parameters node.

    Strings are normalized multiline text, lists become one line per entry and
    objects pick their label from text, lines, title, caption, then
    ``key = value`` lines of the remaining keys.
    """
    if value is None:
        return None
    if isinstance(value, StrValue):
        label = normalize_multiline_text(value.value) or DEFAULT_LABEL
        return ResolvedParameters(DEFAULT_ID, label, _finish_attributes({"text": label}, anchor_base))
    if isinstance(value, ListValue):
        lines = [display_value(entry) for entry in value.to_python()]
        label = "\n".join(lines) if lines else DEFAULT_LABEL
        return ResolvedParameters(DEFAULT_ID, label, _finish_attributes({"lines": lines}, anchor_base))
    if isinstance(value, (ObjectValue, NestedValue)):
        return _resolve_object(_object_entries(value), anchor_base)
    label = normalize_multiline_text(display_value(value.to_python())) or DEFAULT_LABEL
    return ResolvedParameters(DEFAULT_ID, label, _finish_attributes({"text": label}, anchor_base))


def add_parameters_node(builder, value: AttrValue) -> Optional[DiagramEdge]:
    """Register the parameters node in a fresh column and return its pending start edge."""
    resolved = resolve_parameters_value(value, builder.anchor_base)
    if resolved is None:
        return None
    column = builder.allocate_column()
    node = DiagramNode(
        node_id=resolved.id,
        node_type="parameters",
        label=resolved.label,
        column=column,
        attributes=resolved.attributes,
    )
    if not builder.register_node(column, node):
        return None
    builder.register_alias("parameters", node.id)
    return DiagramEdge(
        source=builder.start_node.id,
        target=node.id,
        attributes={"implicit": True, "role": "parameters"},
        from_base=builder.start_node.id,
        to_base=node.id,
    )
