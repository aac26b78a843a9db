"""Table-driven LALR parser over the token stream."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable, Iterable, Optional, Union

from toycc import ast
from toycc.ast import ASTNode
from toycc.parser_rd import ParseError, Token, TokenType


class Symbol(IntEnum):
    """Grammar symbols: terminals followed by non-terminals."""

    ERROR = -1
    EOF = 0

    IDENTIFIER = 1
    NUMBER = 2
    STRING = 3
    KEYWORD_INT = 4
    KEYWORD_FLOAT = 5
    KEYWORD_CHAR = 6
    KEYWORD_VOID = 7
    KEYWORD_IF = 8
    KEYWORD_ELSE = 9
    KEYWORD_WHILE = 10
    KEYWORD_FOR = 11
    KEYWORD_RETURN = 12
    OPERATOR_PLUS = 13
    OPERATOR_MINUS = 14
    OPERATOR_STAR = 15
    OPERATOR_SLASH = 16
    OPERATOR_PERCENT = 17
    OPERATOR_ASSIGN = 18
    OPERATOR_EQ = 19
    OPERATOR_NE = 20
    OPERATOR_LT = 21
    OPERATOR_LE = 22
    OPERATOR_GT = 23
    OPERATOR_GE = 24
    PUNCTUATION_LPAREN = 25
    PUNCTUATION_RPAREN = 26
    PUNCTUATION_LBRACE = 27
    PUNCTUATION_RBRACE = 28
    PUNCTUATION_SEMICOLON = 29
    PUNCTUATION_COMMA = 30

    PROGRAM = 31
    FUNCTION_DECL = 32
    PARAM_LIST = 33
    PARAM = 34
    BLOCK = 35
    STATEMENT = 36
    EXPR_STMT = 37
    IF_STMT = 38
    WHILE_STMT = 39
    FOR_STMT = 40
    RETURN_STMT = 41
    VAR_DECL = 42
    EXPR = 43
    ASSIGNMENT = 44
    EQUALITY = 45
    COMPARISON = 46
    TERM = 47
    FACTOR = 48
    UNARY = 49
    CALL = 50
    PRIMARY = 51
    ARG_LIST = 52


_KEYWORDS = {
    "int": Symbol.KEYWORD_INT,
    "float": Symbol.KEYWORD_FLOAT,
    "char": Symbol.KEYWORD_CHAR,
    "void": Symbol.KEYWORD_VOID,
    "if": Symbol.KEYWORD_IF,
    "else": Symbol.KEYWORD_ELSE,
    "while": Symbol.KEYWORD_WHILE,
    "for": Symbol.KEYWORD_FOR,
    "return": Symbol.KEYWORD_RETURN,
}

_OPERATORS = {
    "+": Symbol.OPERATOR_PLUS,
    "-": Symbol.OPERATOR_MINUS,
    "*": Symbol.OPERATOR_STAR,
    "/": Symbol.OPERATOR_SLASH,
    "%": Symbol.OPERATOR_PERCENT,
    "=": Symbol.OPERATOR_ASSIGN,
    "==": Symbol.OPERATOR_EQ,
    "!=": Symbol.OPERATOR_NE,
    "<": Symbol.OPERATOR_LT,
    "<=": Symbol.OPERATOR_LE,
    ">": Symbol.OPERATOR_GT,
    ">=": Symbol.OPERATOR_GE,
}

_PUNCTUATION = {
    "(": Symbol.PUNCTUATION_LPAREN,
    ")": Symbol.PUNCTUATION_RPAREN,
    "{": Symbol.PUNCTUATION_LBRACE,
    "}": Symbol.PUNCTUATION_RBRACE,
    ";": Symbol.PUNCTUATION_SEMICOLON,
    ",": Symbol.PUNCTUATION_COMMA,
}


def _symbol_for(token: Optional[Token]) -> Symbol:
    if token is None:
        return Symbol.ERROR
    if token.type is TokenType.IDENTIFIER:
        return Symbol.IDENTIFIER
    if token.type is TokenType.NUMBER:
        return Symbol.NUMBER
    if token.type is TokenType.STRING:
        return Symbol.STRING
    if token.type is TokenType.KEYWORD:
        return _KEYWORDS.get(token.value, Symbol.ERROR)
    if token.type is TokenType.OPERATOR:
        return _OPERATORS.get(token.value, Symbol.ERROR)
    if token.type is TokenType.PUNCTUATION:
        return _PUNCTUATION.get(token.value, Symbol.ERROR)
    if token.type is TokenType.EOF:
        return Symbol.EOF
    return Symbol.ERROR


class _ActionKind(Enum):
    SHIFT = auto()
    REDUCE = auto()
    ACCEPT = auto()
    ERROR = auto()


@dataclass(frozen=True)
class _Action:
    kind: _ActionKind
    value: int = 0


_StackValue = Union[Token, ASTNode, None]


@dataclass(frozen=True)
class _Rule:
    lhs: Symbol
    rhs: tuple[Symbol, ...]
    build: Callable[[list[_StackValue]], ASTNode]


def _build_program(values: list[_StackValue]) -> ASTNode:
    node = ast.program()
    node.add_child(values[0])
    return node


def _build_function(values: list[_StackValue]) -> ASTNode:
    return ast.function(values[1].value, values[3], values[5])


_RULES: tuple[_Rule, ...] = (
    _Rule(Symbol.PROGRAM, (Symbol.FUNCTION_DECL,), _build_program),
    _Rule(
        Symbol.FUNCTION_DECL,
        (
            Symbol.KEYWORD_INT,
            Symbol.IDENTIFIER,
            Symbol.PUNCTUATION_LPAREN,
            Symbol.PARAM_LIST,
            Symbol.PUNCTUATION_RPAREN,
            Symbol.BLOCK,
        ),
        _build_function,
    ),
)

_ACTIONS: dict[tuple[int, Symbol], _Action] = {
    (0, Symbol.KEYWORD_INT): _Action(_ActionKind.SHIFT, 1),
    (0, Symbol.KEYWORD_FLOAT): _Action(_ActionKind.SHIFT, 1),
    (0, Symbol.KEYWORD_CHAR): _Action(_ActionKind.SHIFT, 1),
    (0, Symbol.KEYWORD_VOID): _Action(_ActionKind.SHIFT, 1),
}

_GOTOS: dict[tuple[int, Symbol], int] = {
    (0, Symbol.PROGRAM): 100,
}

_ERROR_ACTION = _Action(_ActionKind.ERROR)


class LALRParser:
    """Shift-reduce parser driven by action and goto tables."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: list[Token] = list(tokens)
        self.position = 0
        self.states: list[int] = [0]
        self.values: list[_StackValue] = []

    def _current(self) -> Optional[Token]:
        if not self.tokens:
            return None
        if self.position >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.position]

    def _reduce(self, rule_index: int) -> None:
        rule = _RULES[rule_index]
        count = len(rule.rhs)
        values = self.values[len(self.values) - count:] if count else []
        del self.values[len(self.values) - count:]
        del self.states[max(len(self.states) - count, 0):]
        self.values.append(rule.build(values))
        state = self.states[-1] if self.states else 0
        target = _GOTOS.get((state, rule.lhs))
        if target is None:
            raise ParseError("Invalid state transition")
        self.states.append(target)

    def parse(self) -> ASTNode:
        """Run the parser; raise ParseError when the input is rejected."""
        while True:
            token = self._current()
            symbol = _symbol_for(token)
            action = _ACTIONS.get((self.states[-1], symbol), _ERROR_ACTION)
            if action.kind is _ActionKind.SHIFT:
                self.values.append(token)
                self.states.append(action.value)
                self.position += 1
            elif action.kind is _ActionKind.REDUCE:
                self._reduce(action.value)
            elif action.kind is _ActionKind.ACCEPT:
                if not self.values:
                    raise ParseError("Syntax error")
                return self.values[0]
            else:
                raise ParseError("Syntax error")