"""Label measurement and word wrapping."""

import re
from functools import lru_cache
from typing import Callable, List, Optional

from PIL import ImageFont

from drakon import config

Measure = Callable[[str], float]

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")


@lru_cache(maxsize=4)
def get_measure_font(size: int) -> "ImageFont.ImageFont":
    """Process-wide font used for text measurement, created on first use."""
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


def measure_text_width(text: str) -> float:
    return float(get_measure_font(config.FONT_SIZE).getlength(text))


def _split_long_segment(segment: str, max_width: float, measure: Measure) -> List[str]:
    """Cut a word that does not fit into the longest prefixes that do."""
    pieces = []
    remaining = segment
    while remaining:
        low, high, best = 1, len(remaining), 1
        while low <= high:
            mid = max(1, (low + high) // 2)
            if measure(remaining[:mid]) <= max_width:
                best = mid
                low = mid + 1
            else:
                high = mid - 1
        pieces.append(remaining[:best])
        remaining = remaining[best:]
    return pieces


def _wrap_single_line(line: str, max_width: float, measure: Measure) -> List[str]:
    words = [word for word in _WHITESPACE.split(line) if word]
    if not words:
        return [""]
    wrapped: List[str] = []
    current = ""
    for word in words:
        if current:
            candidate = f"{current} {word}"
            if measure(candidate) <= max_width:
                current = candidate
                continue
            wrapped.append(current)
            current = ""
        if measure(word) <= max_width:
            current = word
        else:
            wrapped.extend(_split_long_segment(word, max_width, measure))
    if current:
        wrapped.append(current)
    return wrapped or [""]


def wrap_label_text(
    label: Optional[str],
    width: float,
    padding_left: float,
    padding_right: float,
    measure: Optional[Measure] = None,
) -> List[str]:
    """
    Wrap ``label`` to the text area of a node.

    Explicit line breaks are kept; blank lines stay blank. The available width
    never drops below 4 pixels.
    """
    measure = measure or measure_text_width
    available = max(4, width - padding_left - padding_right)
    wrapped: List[str] = []
    for raw_line in _LINE_BREAK.split(label if label is not None else ""):
        if raw_line == "":
            wrapped.append("")
            continue
        wrapped.extend(_wrap_single_line(raw_line, available, measure))
    return wrapped or [""]
