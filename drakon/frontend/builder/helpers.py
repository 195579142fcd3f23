"""Small pure helpers shared by the diagram builder."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from drakon.core.syntax import (
    AttrValue, AttributeStatement, BlockStatement, ListValue, Statement, StrValue,
)


@dataclass
class SplitResult:
    """A block body separated into attribute values and child blocks."""
    values: Dict[str, AttrValue] = field(default_factory=dict)
    blocks: List[BlockStatement] = field(default_factory=list)

    def plain_attributes(self) -> Dict[str, Any]:
        return {key: value.to_python() for key, value in self.values.items()}


def split_statements(items: Iterable[Statement]) -> SplitResult:
    result = SplitResult()
    for item in items:
        if isinstance(item, AttributeStatement):
            result.values[item.key] = item.value
        elif isinstance(item, BlockStatement):
            result.blocks.append(item)
    return result


def display_value(value: Any) -> str:
    """Render a plain scalar the way it was written in the source."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return ""
    return str(value)


def string_value(values: Dict[str, AttrValue], key: str) -> str:
    """Trimmed string attribute, or '' when missing or not a string."""
    value = values.get(key)
    if isinstance(value, StrValue):
        return value.value.strip()
    return ""


def derive_label(values: Dict[str, AttrValue], fallback: str) -> str:
    text = values.get("text")
    if isinstance(text, StrValue):
        return text.value
    lines = values.get("lines")
    if isinstance(lines, ListValue) and lines.items:
        return "\n".join(display_value(item.to_python()) for item in lines.items)
    return fallback


def format_parameter_scalar(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)) or value is None:
        return display_value(value)
    if isinstance(value, list):
        return "[" + ", ".join(format_parameter_scalar(entry) for entry in value) + "]"
    if isinstance(value, dict):
        try:
            return json.dumps(value, separators=(",", ":"))
        except TypeError:
            return str(value)
    return str(value)


def normalize_multiline_text(value: str) -> str:
    """Drop CRs and blank edge lines, then remove the common indentation."""
    lines = value.replace("\r", "").split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    indent = min(indents) if indents else 0
    if indent > 0:
        lines = [line[min(indent, len(line)):] for line in lines]
    return "\n".join(lines)


def unique_id(base: str, taken: Iterable[str]) -> str:
    """``base``, or ``base_1``, ``base_2``... whichever is not taken yet."""
    taken_ids = set(taken)
    candidate = base
    counter = 1
    while candidate in taken_ids:
        candidate = f"{base}_{counter}"
        counter += 1
    return candidate


def located(message: str, block: Optional[BlockStatement]) -> str:
    """Prefix an error with the source line of ``block`` when it is known."""
    if block is not None and block.line:
        return f"Line {block.line}: {message}"
    return message
