"""One-call compilation from DSL text to a positioned diagram."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from drakon.core.ir import Diagram
from drakon.frontend.builder import build_diagram
from drakon.frontend.parser import parse
from drakon.frontend.tokenizer import tokenize
from drakon.layout.engine import LayoutConfig, LayoutResult, build_layout, prepare_nodes
from drakon.layout.text import Measure

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    diagram: Optional[Diagram] = None
    layout: Optional[LayoutResult] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.diagram is not None and not self.errors


def compile_diagram(
    text: str,
    layout: bool = True,
    measure: Optional[Measure] = None,
    config: Optional[LayoutConfig] = None,
) -> CompileResult:
    """
    Run tokenizer, parser, builder and layout over ``text``.

    Every stage runs even when an earlier one reported errors, so a diagram is
    returned whenever the ``drakon`` root block exists. The layout is skipped
    for a missing or empty diagram.
    """
    errors: List[str] = []
    tokens = tokenize(text, errors)
    statements = parse(tokens, errors)
    diagram = build_diagram(statements, errors)
    result = CompileResult(diagram=diagram, errors=errors)
    if layout and diagram is not None and diagram.nodes:
        prepare_nodes(diagram, measure)
        result.layout = build_layout(diagram, config)
    logger.debug("Compiled diagram with %d errors", len(errors))
    return result
