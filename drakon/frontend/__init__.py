"""
Drakon frontend: source text to diagram.

- tokenize: text -> tokens
- parse: tokens -> statements
- build_diagram: statements -> Diagram
"""

from .tokenizer import Token, TokenType, tokenize
from .parser import Parser, parse
from .builder import DiagramBuilder, build_diagram

__all__ = [
    "Token",
    "TokenType",
    "tokenize",
    "Parser",
    "parse",
    "DiagramBuilder",
    "build_diagram",
]
