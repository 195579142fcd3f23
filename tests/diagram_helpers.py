"""Shared helpers for building diagrams in tests."""

from drakon.frontend.builder import build_diagram
from drakon.frontend.parser import parse
from drakon.frontend.tokenizer import tokenize


def char_width(text):
    """Deterministic stand-in for font measurement: 8px per character."""
    return 8.0 * len(text)


def build_source(text):
    """Run tokenizer, parser and builder; returns (diagram, errors)."""
    errors = []
    diagram = build_diagram(parse(tokenize(text, errors), errors), errors)
    return diagram, errors


def edge_pairs(diagram, **flags):
    """(from_base, to_base) pairs of edges carrying every given attribute flag."""
    return [
        (edge.from_base, edge.to_base)
        for edge in diagram.edges
        if all(edge.attributes.get(key) == value for key, value in flags.items())
    ]
