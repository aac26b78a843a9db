"""Tokens and a recursive descent parser producing syntax trees."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from toycc import ast
from toycc.ast import ASTNode, NodeType

_TYPE_KEYWORDS = frozenset({"int", "float", "char", "void"})
_FOR_INIT_TYPES = frozenset({"int", "float", "char"})


class TokenType(Enum):
    """Lexical categories of tokens."""

    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()
    KEYWORD = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A token with its text and source position."""

    type: TokenType
    value: str = ""
    line: int = 0
    column: int = 0


class ParseError(Exception):
    """Raised when the token stream does not follow the grammar."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RDParser:
    """Recursive descent parser over a sequence of tokens."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        self.position = 0

    def parse(self) -> ASTNode:
        """Return the program tree: a program holding a bare ``main`` function."""
        root = ast.program()
        root.add_child(ast.function("main"))
        return root

    # ------------------------------------------------------------ navigation
    def _current(self) -> Optional[Token]:
        if not self.tokens:
            return None
        if self.position >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.position]

    def _previous(self) -> Optional[Token]:
        if not self.tokens:
            return None
        if self.position == 0:
            return self.tokens[0]
        return self.tokens[self.position - 1]

    def _at_end(self) -> bool:
        here = self._current()
        return here is None or here.type is TokenType.EOF

    def _advance(self) -> Optional[Token]:
        if not self._at_end():
            self.position += 1
        return self._previous()

    def _check(self, token_type: TokenType, *values: str) -> bool:
        if self._at_end():
            return False
        here = self._current()
        if here.type is not token_type:
            return False
        return not values or here.value in values

    def _match(self, token_type: TokenType, *values: str) -> Optional[Token]:
        if self._check(token_type, *values):
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str, *values: str) -> Token:
        matched = self._match(token_type, *values)
        if matched is None:
            raise ParseError(message)
        return matched

    def _check_punct(self, value: str) -> bool:
        return self._check(TokenType.PUNCTUATION, value)

    def _consume_punct(self, value: str, message: str) -> Token:
        return self._consume(TokenType.PUNCTUATION, message, value)

    # ---------------------------------------------------------- declarations
    def _parse_program(self) -> ASTNode:
        """Parse every function declaration, recovering at the next type keyword."""
        root = ast.program()
        last_error: Optional[ParseError] = None
        while not self._at_end():
            try:
                root.add_child(self._parse_function())
            except ParseError as exc:
                last_error = exc
                while not self._at_end() and not self._check(TokenType.KEYWORD, *_TYPE_KEYWORDS):
                    self._advance()
        if last_error is not None:
            raise last_error
        return root

    def _parse_function(self) -> ASTNode:
        if not self._check(TokenType.KEYWORD):
            raise ParseError("Expected return type for function declaration")
        self._advance()
        name = self._consume(TokenType.IDENTIFIER, "Expected function name").value
        self._consume_punct("(", "Expected '(' after function name")
        params = ASTNode(NodeType.BLOCK, "params")
        while not self._check_punct(")"):
            self._advance()
            if self._at_end():
                raise ParseError("Unterminated parameter list")
        self._consume_punct(")", "Expected ')' after parameters")
        body = self._parse_block()
        return ast.function(name, params, body)

    def _parse_block(self) -> ASTNode:
        self._consume_punct("{", "Expected '{' before block")
        node = ast.block()
        while not self._check_punct("}"):
            node.add_child(self._parse_statement())
            if self._at_end():
                raise ParseError("Unterminated block")
        self._consume_punct("}", "Expected '}' after block")
        return node

    # ------------------------------------------------------------ statements
    def _parse_statement(self) -> ASTNode:
        if self._check(TokenType.KEYWORD):
            keyword = self._current().value
            if keyword in _TYPE_KEYWORDS:
                return self._parse_var_declaration()
            self._advance()
            if keyword == "if":
                return self._parse_if()
            if keyword == "while":
                return self._parse_while()
            if keyword == "for":
                return self._parse_for()
            if keyword == "return":
                return self._parse_return()
        elif self._check_punct("{"):
            return self._parse_block()
        return self._parse_expression_statement()

    def _parse_expression_statement(self) -> ASTNode:
        expr = self._parse_expression()
        self._consume_punct(";", "Expected ';' after expression")
        return expr

    def _parse_if(self) -> ASTNode:
        self._consume_punct("(", "Expected '(' after 'if'")
        condition = self._parse_expression()
        self._consume_punct(")", "Expected ')' after if condition")
        then_branch = self._parse_statement()
        else_branch = None
        if self._match(TokenType.KEYWORD, "else"):
            else_branch = self._parse_statement()
        return ast.if_stmt(condition, then_branch, else_branch)

    def _parse_while(self) -> ASTNode:
        self._consume_punct("(", "Expected '(' after 'while'")
        condition = self._parse_expression()
        self._consume_punct(")", "Expected ')' after while condition")
        body = self._parse_statement()
        return ast.while_stmt(condition, body)

    def _parse_for(self) -> ASTNode:
        self._consume_punct("(", "Expected '(' after 'for'")
        initializer = None
        if self._match(TokenType.PUNCTUATION, ";"):
            pass
        elif self._check(TokenType.KEYWORD, *_FOR_INIT_TYPES):
            initializer = self._parse_var_declaration()
        else:
            initializer = self._parse_expression()
            self._consume_punct(";", "Expected ';' after for initializer")

        condition = None
        if not self._check_punct(";"):
            condition = self._parse_expression()
        self._consume_punct(";", "Expected ';' after for condition")

        increment = None
        if not self._check_punct(")"):
            increment = self._parse_expression()
        self._consume_punct(")", "Expected ')' after for clauses")

        body = self._parse_statement()
        return ast.for_stmt(initializer, condition, increment, body)

    def _parse_return(self) -> ASTNode:
        expr = None
        if not self._check_punct(";"):
            expr = self._parse_expression()
        self._consume_punct(";", "Expected ';' after return value")
        return ast.return_stmt(expr)

    def _parse_var_declaration(self) -> ASTNode:
        if not self._check(TokenType.KEYWORD):
            raise ParseError("Expected type name")
        type_name = self._advance().value
        name = self._consume(TokenType.IDENTIFIER, "Expected variable name").value
        initializer = None
        if self._match(TokenType.OPERATOR, "="):
            initializer = self._parse_expression()
        self._consume_punct(";", "Expected ';' after variable declaration")
        return ast.var_decl(type_name, name, initializer)

    # ----------------------------------------------------------- expressions
    def _parse_expression(self) -> ASTNode:
        return self._parse_assignment()

    def _parse_assignment(self) -> ASTNode:
        expr = self._parse_equality()
        if self._match(TokenType.OPERATOR, "="):
            value = self._parse_assignment()
            if expr.type is NodeType.IDENTIFIER:
                return ast.assignment(expr.value, value)
            raise ParseError("Invalid assignment target")
        return expr

    def _binary_level(self, operand, *operators: str) -> ASTNode:
        expr = operand()
        while (operator := self._match(TokenType.OPERATOR, *operators)) is not None:
            expr = ast.binary_op(operator.value, expr, operand())
        return expr

    def _parse_equality(self) -> ASTNode:
        return self._binary_level(self._parse_comparison, "==", "!=")

    def _parse_comparison(self) -> ASTNode:
        return self._binary_level(self._parse_term, ">", ">=", "<", "<=")

    def _parse_term(self) -> ASTNode:
        return self._binary_level(self._parse_factor, "+", "-")

    def _parse_factor(self) -> ASTNode:
        return self._binary_level(self._parse_unary, "*", "/", "%")

    def _parse_unary(self) -> ASTNode:
        operator = self._match(TokenType.OPERATOR, "!", "-")
        if operator is not None:
            return ast.unary_op(operator.value, self._parse_unary())
        return self._parse_call()

    def _parse_call(self) -> ASTNode:
        expr = self._parse_primary()
        if self._match(TokenType.PUNCTUATION, "("):
            args = ASTNode(NodeType.BLOCK, "args")
            if not self._check_punct(")"):
                args.add_child(self._parse_expression())
                while self._match(TokenType.PUNCTUATION, ","):
                    args.add_child(self._parse_expression())
            self._consume_punct(")", "Expected ')' after function arguments")
            if expr.type is not NodeType.IDENTIFIER:
                raise ParseError("Expected function name")
            return ast.call(expr.value, args)
        return expr

    def _parse_primary(self) -> ASTNode:
        if (literal := self._match(TokenType.NUMBER)) is not None:
            return ast.number(literal.value)
        if (literal := self._match(TokenType.STRING)) is not None:
            return ast.string(literal.value)
        if (name := self._match(TokenType.IDENTIFIER)) is not None:
            return ast.identifier(name.value)
        if self._match(TokenType.PUNCTUATION, "("):
            expr = self._parse_expression()
            self._consume_punct(")", "Expected ')' after expression")
            return expr
        raise ParseError("Expected expression")