"""Sizing specs for every DRAKON node type."""

from dataclasses import dataclass
from typing import Dict, Optional

BASE_NODE_WIDTH = 240
BASE_NODE_MIN_HEIGHT = 170
BASE_LINE_HEIGHT = 22
BASE_TEXT_PADDING = 28


@dataclass(frozen=True)
class NodeSpec:
    width: float = BASE_NODE_WIDTH
    min_height: float = BASE_NODE_MIN_HEIGHT
    line_height: float = BASE_LINE_HEIGHT
    padding_top: float = BASE_TEXT_PADDING
    padding_bottom: float = BASE_TEXT_PADDING
    padding_left: float = BASE_TEXT_PADDING
    padding_right: float = BASE_TEXT_PADDING
    text_y_offset: float = 0
    text_baseline: str = "center"
    text_align: str = "center"
    dynamic_height: bool = True
    base_width: Optional[float] = None


def _scaled(width=1.0, min_height=1.0, line_height=1.0, top=1.0, bottom=1.0, **extra) -> NodeSpec:
    return NodeSpec(
        width=BASE_NODE_WIDTH * width,
        min_height=BASE_NODE_MIN_HEIGHT * min_height,
        line_height=BASE_LINE_HEIGHT * line_height,
        padding_top=BASE_TEXT_PADDING * top,
        padding_bottom=BASE_TEXT_PADDING * bottom,
        **extra,
    )


DEFAULT_SPEC = NodeSpec()
_CHOICE_CASE = _scaled(top=10 / 9, bottom=6 / 5, text_baseline="top")
_LOOP_EDGE = _scaled(13 / 12, 9 / 17, 9 / 11, 3 / 7, 3 / 7)
_IO = _scaled(7 / 6, 18 / 17, 1, 8 / 7, 8 / 7)
_SIMPLE_IO = _scaled(1, 14 / 17, 1, 1, 6 / 7)
_CTRL_PERIOD = _scaled(13 / 12, 22 / 17, 12 / 11, 11 / 7, 9 / 7)

NODE_LIBRARY: Dict[str, NodeSpec] = {
    "default": DEFAULT_SPEC,
    "start": _scaled(5 / 6, 10 / 17, 10 / 11, 5 / 7, 5 / 7),
    "end": NodeSpec(width=240, min_height=140, line_height=22),
    "action": _scaled(min_height=14 / 17),
    "parameters": _scaled(
        5 / 4, 11 / 17, 9 / 11, 6 / 7, 5 / 7,
        padding_left=BASE_TEXT_PADDING * 8 / 7,
        padding_right=BASE_TEXT_PADDING * 6 / 7,
        base_width=BASE_NODE_WIDTH * 5 / 4,
        text_align="left",
    ),
    "comment": _scaled(
        7 / 6, 18 / 17, 1, 9 / 7, 9 / 7,
        padding_left=BASE_TEXT_PADDING * 10 / 7,
        padding_right=BASE_TEXT_PADDING * 10 / 7,
    ),
    "question": _scaled(width=4 / 3),
    "choice": NodeSpec(width=280, min_height=200, line_height=24, padding_top=36, padding_bottom=36),
    "choice_case": _CHOICE_CASE,
    "choice_else": _CHOICE_CASE,
    "insertion": _scaled(13 / 12, 20 / 17, 1, 8 / 7, 8 / 7),
    "for_each": _LOOP_EDGE,
    "loop_end": _LOOP_EDGE,
    "parallel": _scaled(13 / 12, 22 / 17, 12 / 11, 9 / 7, 9 / 7),
    "input": _IO,
    "output": _IO,
    "simple_input": _SIMPLE_IO,
    "simple_output": _SIMPLE_IO,
    "shelf": NodeSpec(width=320, min_height=190, line_height=22, padding_top=42, padding_bottom=28),
    "process": NodeSpec(width=260, min_height=260, line_height=24, padding_top=72, padding_bottom=36),
    "ctrl_period_start": _CTRL_PERIOD,
    "ctrl_period_end": _CTRL_PERIOD,
    "duration": _scaled(1, 14 / 17, 1, 13 / 14, 13 / 14),
    "pause": _scaled(1, 16 / 17, 1, 8 / 7, 8 / 7),
    "timer": _scaled(13 / 12, 26 / 17, 12 / 11, 5, 9 / 7),
    "group_duration": NodeSpec(width=120, min_height=260, line_height=22, padding_top=36, padding_bottom=36),
}


def get_node_spec(node_type: str) -> NodeSpec:
    """Spec for ``node_type``; unknown types use the default spec."""
    return NODE_LIBRARY.get(node_type, DEFAULT_SPEC)
