"""
Syntax tree produced by the parser.

Attribute values are an explicit tagged variant rather than untyped Python
objects, so consumers can discriminate with ``isinstance``:

    StrValue     "text", 'text', heredocs and bare identifiers
    NumValue     -12, 3.5
    BoolValue    true / false
    ListValue    [a, b, c]
    ObjectValue  { key = value }            (no nested blocks)
    NestedValue  { action "a" { ... } }     (at least one nested block)

``to_python()`` converts any value into plain Python data.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


@dataclass(frozen=True)
class StrValue:
    value: str

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumValue:
    value: Union[int, float]

    def to_python(self) -> Union[int, float]:
        return self.value


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class ListValue:
    items: List["AttrValue"] = field(default_factory=list)

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class ObjectValue:
    entries: Dict[str, "AttrValue"] = field(default_factory=dict)

    def to_python(self) -> Dict[str, Any]:
        return {key: value.to_python() for key, value in self.entries.items()}


@dataclass(frozen=True)
class NestedValue:
    statements: List["Statement"] = field(default_factory=list)

    def to_python(self) -> List["Statement"]:
        # Statements stay structured; they are consumed by the builder.
        return list(self.statements)


AttrValue = Union[StrValue, NumValue, BoolValue, ListValue, ObjectValue, NestedValue]


@dataclass
class AttributeStatement:
    """``key = value``"""
    key: str
    value: AttrValue
    line: int = 0


@dataclass
class BlockStatement:
    """``name "label" ... { body }``"""
    name: str
    labels: List[str] = field(default_factory=list)
    body: List["Statement"] = field(default_factory=list)
    line: int = 0


Statement = Union[AttributeStatement, BlockStatement]

