"""Tokenizer for the HCL-style DRAKON language."""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class TokenType(str, Enum):
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    BRACE_OPEN = "brace_open"
    BRACE_CLOSE = "brace_close"
    BRACKET_OPEN = "bracket_open"
    BRACKET_CLOSE = "bracket_close"
    EQUALS = "equals"
    COMMA = "comma"
    EOF = "eof"


@dataclass
class Token:
    type: TokenType
    value: Union[str, int, float, None]
    line: int
    column: int


_PUNCTUATION = {
    "{": TokenType.BRACE_OPEN,
    "}": TokenType.BRACE_CLOSE,
    "[": TokenType.BRACKET_OPEN,
    "]": TokenType.BRACKET_CLOSE,
    "=": TokenType.EQUALS,
    ",": TokenType.COMMA,
}

_IDENT_START = re.compile(r"[A-Za-z_\-]")
_IDENT_PART = re.compile(r"[A-Za-z0-9_\-./?@]")
_NUMBER = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_HEREDOC = re.compile(r"<<([-~]?)([A-Za-z_][A-Za-z0-9_]*)")
_ESCAPES = {"n": "\n", "t": "\t"}


def strip_common_indent(lines: List[str]) -> List[str]:
    """Remove the smallest leading indentation shared by all non-blank lines."""
    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not indents:
        return lines
    indent = min(indents)
    if indent == 0:
        return lines
    return [line[min(indent, len(line)):] for line in lines]


class _Scanner:
    """Cursor over the source text that keeps line/column bookkeeping."""

    def __init__(self, text: str):
        self.text = text
        self.index = 0
        self.line = 1
        self.column = 1

    def peek(self, offset: int = 0) -> str:
        position = self.index + offset
        return self.text[position] if position < len(self.text) else ""

    def at_end(self) -> bool:
        return self.index >= len(self.text)

    def advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.at_end():
                return
            if self.text[self.index] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.index += 1

    def skip_line(self) -> None:
        while not self.at_end() and self.peek() != "\n":
            self.advance()


def tokenize(text: str, errors: Optional[List[str]] = None) -> List[Token]:
    """
    Convert source text into tokens.

    Never raises: problems are appended to ``errors`` and the offending
    characters are skipped. The result always ends with an EOF token.
    """
    if errors is None:
        errors = []
    scanner = _Scanner(text)
    tokens: List[Token] = []

    while not scanner.at_end():
        char = scanner.peek()

        if char.isspace():
            scanner.advance()
            continue

        if char == "#" or (char == "/" and scanner.peek(1) == "/"):
            scanner.skip_line()
            continue

        line, column = scanner.line, scanner.column

        if char in ('"', "'"):
            tokens.append(Token(TokenType.STRING, _read_quoted(scanner, errors), line, column))
            continue

        if char == "<" and scanner.peek(1) == "<":
            heredoc = _read_heredoc(scanner, errors)
            if heredoc is not None:
                tokens.append(Token(TokenType.STRING, heredoc, line, column))
                continue

        if char in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[char], char, line, column))
            scanner.advance()
            continue

        match = _NUMBER.match(text, scanner.index) if char == "-" or "0" <= char <= "9" else None
        if match:
            raw = match.group(0)
            value = float(raw) if "." in raw else int(raw)
            tokens.append(Token(TokenType.NUMBER, value, line, column))
            scanner.advance(len(raw))
            continue

        if _IDENT_START.match(char):
            start = scanner.index
            while not scanner.at_end() and _IDENT_PART.match(scanner.peek()):
                scanner.advance()
            tokens.append(Token(TokenType.IDENTIFIER, text[start:scanner.index], line, column))
            continue

        errors.append(f'Unexpected character "{char}" at line {line}, column {column}.')
        scanner.advance()

    tokens.append(Token(TokenType.EOF, None, scanner.line, scanner.column))
    logger.debug("Tokenized %d chars into %d tokens", len(text), len(tokens))
    return tokens


def _read_quoted(scanner: _Scanner, errors: List[str]) -> str:
    quote = scanner.peek()
    start_line = scanner.line
    scanner.advance()
    chars: List[str] = []
    while not scanner.at_end():
        current = scanner.peek()
        if current == "\\":
            scanner.advance()
            if scanner.at_end():
                errors.append(f"Unterminated escape sequence at line {scanner.line}.")
                break
            escaped = scanner.peek()
            chars.append(_ESCAPES.get(escaped, escaped))
            scanner.advance()
            continue
        if current == quote:
            scanner.advance()
            return "".join(chars)
        chars.append(current)
        scanner.advance()
    else:
        errors.append(f"Unterminated string starting at line {start_line}.")
    return "".join(chars)


def _read_heredoc(scanner: _Scanner, errors: List[str]) -> Optional[str]:
    """Read ``<<MARKER`` / ``<<-MARKER`` / ``<<~MARKER``; None if this is not a heredoc."""
    match = _HEREDOC.match(scanner.text, scanner.index)
    if match is None:
        return None
    strip = bool(match.group(1))
    marker = match.group(2)
    start_line = scanner.line

    # The header line ends the opener; anything after the marker is ignored.
    scanner.advance(len(match.group(0)))
    scanner.skip_line()
    scanner.advance()

    body, terminated = _collect_heredoc_lines(scanner, marker)
    if not terminated:
        errors.append(f'Unterminated heredoc "{marker}" starting at line {start_line}.')
        return "\n".join(body)
    if strip:
        body = strip_common_indent(body)
    return "\n".join(body)


def _collect_heredoc_lines(scanner: _Scanner, marker: str) -> Tuple[List[str], bool]:
    lines: List[str] = []
    while not scanner.at_end():
        start = scanner.index
        scanner.skip_line()
        line = scanner.text[start:scanner.index].rstrip("\r")
        scanner.advance()
        if line.strip() == marker:
            return lines, True
        lines.append(line)
    return lines, False
