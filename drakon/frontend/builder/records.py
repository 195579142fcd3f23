"""Transient records used while a diagram is being built."""

from dataclasses import dataclass
from typing import NamedTuple, Optional


class ResolvedReference(NamedTuple):
    full: str
    base: str


def opposite(kind: str) -> str:
    return "no" if kind == "yes" else "yes"


def answer_label(kind: str) -> str:
    return "Yes" if kind == "yes" else "No"


@dataclass
class QuestionBranchInfo:
    branch_kind: str
    default_kind: str
    direct: bool
    branch_start_id: Optional[str] = None
    branch_end_id: Optional[str] = None
    next_raw: Optional[str] = None
    next_resolved: Optional[ResolvedReference] = None


@dataclass
class ChoiceCaseRecord:
    choice_id: str
    id: str
    label: str
    kind: str
    direct: bool
    branch_start_id: Optional[str] = None
    branch_end_id: Optional[str] = None
    next_raw: Optional[str] = None
    next_resolved: Optional[ResolvedReference] = None
