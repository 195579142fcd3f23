"""Recursive-descent parser producing the statement tree."""

import logging
from typing import Dict, List, Optional

from drakon.core.syntax import (
    AttrValue, AttributeStatement, BlockStatement, BoolValue, ListValue,
    NestedValue, NumValue, ObjectValue, Statement, StrValue,
)
from drakon.frontend.tokenizer import Token, TokenType

logger = logging.getLogger(__name__)


def _describe(token: Token) -> str:
    return "EOF" if token.type == TokenType.EOF else str(token.value)


class Parser:
    """
    Parses a token stream into statements.

    Unexpected tokens are recorded in ``errors`` and skipped one at a time, so a
    single pass surfaces as many problems as possible.
    """

    def __init__(self, tokens: List[Token], errors: Optional[List[str]] = None):
        self.tokens = tokens
        self.errors = errors if errors is not None else []
        self.index = 0

    def current(self) -> Token:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        last = self.tokens[-1] if self.tokens else None
        return Token(TokenType.EOF, None, last.line if last else 0, last.column if last else 0)

    def peek(self, offset: int = 1) -> Token:
        position = self.index + offset
        if position < len(self.tokens):
            return self.tokens[position]
        return self.current() if not self.tokens else self.tokens[-1]

    def consume(self) -> Token:
        token = self.current()
        if self.index < len(self.tokens):
            self.index += 1
        return token

    def expect(self, token_type: TokenType) -> Token:
        token = self.current()
        if token.type != token_type:
            self.errors.append(
                f'Unexpected token "{_describe(token)}" at line {token.line}. Expected {token_type.value}.'
            )
        return self.consume()

    def at(self, token_type: TokenType) -> bool:
        return self.current().type == token_type

    def parse(self) -> List[Statement]:
        statements: List[Statement] = []
        while not self.at(TokenType.EOF):
            if self.at(TokenType.IDENTIFIER):
                statements.append(self._parse_statement())
            else:
                token = self.current()
                self.errors.append(f'Unexpected token "{_describe(token)}" at line {token.line}.')
                self.consume()
        logger.debug("Parsed %d top-level statements", len(statements))
        return statements

    def _parse_statement(self) -> Statement:
        if self.peek().type == TokenType.EQUALS:
            return self._parse_attribute()
        return self._parse_block()

    def _parse_block(self) -> BlockStatement:
        name_token = self.expect(TokenType.IDENTIFIER)
        name = str(name_token.value)
        labels: List[str] = []
        while self.at(TokenType.STRING):
            labels.append(str(self.consume().value))
        self.expect(TokenType.BRACE_OPEN)
        body: List[Statement] = []
        while not self.at(TokenType.BRACE_CLOSE) and not self.at(TokenType.EOF):
            if self.at(TokenType.IDENTIFIER):
                body.append(self._parse_statement())
            else:
                token = self.current()
                self.errors.append(
                    f'Unexpected token "{_describe(token)}" at line {token.line} in block "{name}".'
                )
                self.consume()
        self.expect(TokenType.BRACE_CLOSE)
        return BlockStatement(name=name, labels=labels, body=body, line=name_token.line)

    def _parse_attribute(self) -> AttributeStatement:
        key_token = self.expect(TokenType.IDENTIFIER)
        self.expect(TokenType.EQUALS)
        value = self._parse_value()
        return AttributeStatement(key=str(key_token.value), value=value, line=key_token.line)

    def _parse_value(self) -> AttrValue:
        token = self.current()
        if token.type == TokenType.STRING:
            self.consume()
            return StrValue(str(token.value))
        if token.type == TokenType.NUMBER:
            self.consume()
            return NumValue(token.value)
        if token.type == TokenType.IDENTIFIER:
            self.consume()
            if token.value == "true":
                return BoolValue(True)
            if token.value == "false":
                return BoolValue(False)
            return StrValue(str(token.value))
        if token.type == TokenType.BRACKET_OPEN:
            return self._parse_array()
        if token.type == TokenType.BRACE_OPEN:
            return self._parse_brace_value()
        self.errors.append(
            f'Unexpected value "{_describe(token)}" at line {token.line}, column {token.column}.'
        )
        self.consume()
        return StrValue("")

    def _parse_array(self) -> ListValue:
        self.expect(TokenType.BRACKET_OPEN)
        items: List[AttrValue] = []
        while not self.at(TokenType.BRACKET_CLOSE) and not self.at(TokenType.EOF):
            items.append(self._parse_value())
            if self.at(TokenType.COMMA):
                self.consume()
            else:
                break
        self.expect(TokenType.BRACKET_CLOSE)
        return ListValue(items)

    def _parse_brace_value(self) -> AttrValue:
        """Object when every entry is an attribute, statement list otherwise."""
        self.expect(TokenType.BRACE_OPEN)
        statements: List[Statement] = []
        has_block = False
        while not self.at(TokenType.BRACE_CLOSE) and not self.at(TokenType.EOF):
            if self.at(TokenType.COMMA):
                self.consume()
                continue
            if not self.at(TokenType.IDENTIFIER):
                token = self.current()
                self.errors.append(
                    f'Unexpected token "{_describe(token)}" at line {token.line}. Expected identifier.'
                )
                self.consume()
                continue
            statement = self._parse_statement()
            if isinstance(statement, BlockStatement):
                has_block = True
            statements.append(statement)
        self.expect(TokenType.BRACE_CLOSE)

        if has_block:
            return NestedValue(statements)
        entries: Dict[str, AttrValue] = {}
        for statement in statements:
            entries[statement.key] = statement.value
        return ObjectValue(entries)


def parse(tokens: List[Token], errors: Optional[List[str]] = None) -> List[Statement]:
    """Parse tokens into a list of top-level statements."""
    return Parser(tokens, errors).parse()
