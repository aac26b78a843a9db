"""Abstract syntax tree nodes, constructors and text, DOT and JSON renderings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

PathLike = Union[str, Path]


class NodeType(Enum):
    """Kinds of syntax tree nodes."""

    PROGRAM = "PROGRAM"
    FUNCTION_DECL = "FUNCTION_DECL"
    BLOCK = "BLOCK"
    VARIABLE_DECL = "VARIABLE_DECL"
    ASSIGNMENT = "ASSIGNMENT"
    BINARY_OP = "BINARY_OP"
    UNARY_OP = "UNARY_OP"
    IF = "IF"
    WHILE = "WHILE"
    FOR = "FOR"
    RETURN = "RETURN"
    CALL = "CALL"
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"


@dataclass
class ASTNode:
    """A syntax tree node with an optional value and ordered children."""

    type: NodeType
    value: Optional[str] = None
    children: list[ASTNode] = field(default_factory=list)

    def add_child(self, child: Optional[ASTNode]) -> None:
        """Append a child; ``None`` is ignored."""
        if child is not None:
            self.children.append(child)

    # ------------------------------------------------------------------ text
    def _text_lines(self, depth: int) -> Iterator[str]:
        label = self.type.value
        if self.value is not None:
            label += f" ({self.value})"
        yield "  " * depth + label + "\n"
        for child in self.children:
            yield from child._text_lines(depth + 1)

    def to_text(self) -> str:
        """Render the tree as an indented outline."""
        return "".join(self._text_lines(0))

    # ------------------------------------------------------------------- dot
    def to_dot(self) -> str:
        """Render the tree as a Graphviz digraph."""
        lines = ["digraph AST {\n", '  node [shape=box, fontname="Arial"];\n']
        counter = 0

        def visit(node: ASTNode, parent_id: Optional[int], my_id: int) -> None:
            nonlocal counter
            label = node.type.value
            if node.value is not None:
                label += f"\\n{node.value}"
            lines.append(f'  node{my_id} [label="{label}"];\n')
            if parent_id is not None:
                lines.append(f"  node{parent_id} -> node{my_id};\n")
            for child in node.children:
                counter += 1
                visit(child, my_id, counter)

        visit(self, None, counter)
        lines.append("}\n")
        return "".join(lines)

    # ------------------------------------------------------------------ json
    def _json_lines(self, depth: int, is_last: bool) -> Iterator[str]:
        pad = "  " * depth
        inner = "  " * (depth + 1)
        yield pad + "{\n"
        yield f'{inner}"type": "{self.type.value}",\n'
        if self.value is not None:
            yield f'{inner}"value": "{self.value}",\n'
        else:
            yield f'{inner}"value": null,\n'
        yield f'{inner}"children": [\n'
        last_index = len(self.children) - 1
        for index, child in enumerate(self.children):
            yield from child._json_lines(depth + 2, index == last_index)
        yield f"{inner}]\n"
        yield pad + ("}\n" if is_last else "},\n")

    def to_json(self) -> str:
        """Render the tree as a JSON document with the tree under ``"ast"``."""
        return "{\n" + '  "ast": ' + "".join(self._json_lines(1, True)) + "}\n"

    # ----------------------------------------------------------------- files
    def save_text(self, path: PathLike) -> None:
        """Write the outline rendering to ``path``."""
        Path(path).write_text(self.to_text(), encoding="utf-8")

    def save_dot(self, path: PathLike) -> None:
        """Write the Graphviz rendering to ``path``."""
        Path(path).write_text(self.to_dot(), encoding="utf-8")

    def save_json(self, path: PathLike) -> None:
        """Write the JSON rendering to ``path``."""
        Path(path).write_text(self.to_json(), encoding="utf-8")


def _with_children(node_type: NodeType, value: Optional[str], *children: Optional[ASTNode]) -> ASTNode:
    node = ASTNode(node_type, value)
    for child in children:
        node.add_child(child)
    return node


def program() -> ASTNode:
    """Create an empty program node."""
    return ASTNode(NodeType.PROGRAM)


def function(name: str, params: Optional[ASTNode] = None, body: Optional[ASTNode] = None) -> ASTNode:
    """Create a function declaration with optional parameter and body nodes."""
    return _with_children(NodeType.FUNCTION_DECL, name, params, body)


def block() -> ASTNode:
    """Create an empty block node."""
    return ASTNode(NodeType.BLOCK)


def var_decl(type_name: str, name: str, init_expr: Optional[ASTNode] = None) -> ASTNode:
    """Create a variable declaration whose value is ``"<type> <name>"``."""
    return _with_children(NodeType.VARIABLE_DECL, f"{type_name} {name}", init_expr)


def assignment(name: str, expr: Optional[ASTNode] = None) -> ASTNode:
    """Create an assignment to ``name``."""
    return _with_children(NodeType.ASSIGNMENT, name, expr)


def binary_op(op: str, left: Optional[ASTNode], right: Optional[ASTNode]) -> ASTNode:
    """Create a binary operation node."""
    return _with_children(NodeType.BINARY_OP, op, left, right)


def unary_op(op: str, expr: Optional[ASTNode]) -> ASTNode:
    """Create a unary operation node."""
    return _with_children(NodeType.UNARY_OP, op, expr)


def if_stmt(
    condition: Optional[ASTNode],
    then_branch: Optional[ASTNode],
    else_branch: Optional[ASTNode] = None,
) -> ASTNode:
    """Create an if statement node."""
    return _with_children(NodeType.IF, None, condition, then_branch, else_branch)


def while_stmt(condition: Optional[ASTNode], body: Optional[ASTNode]) -> ASTNode:
    """Create a while loop node."""
    return _with_children(NodeType.WHILE, None, condition, body)


def for_stmt(
    init: Optional[ASTNode],
    condition: Optional[ASTNode],
    update: Optional[ASTNode],
    body: Optional[ASTNode],
) -> ASTNode:
    """Create a for loop node; absent parts are simply left out."""
    return _with_children(NodeType.FOR, None, init, condition, update, body)


def return_stmt(expr: Optional[ASTNode] = None) -> ASTNode:
    """Create a return statement node."""
    return _with_children(NodeType.RETURN, None, expr)


def call(name: str, args: Optional[ASTNode] = None) -> ASTNode:
    """Create a call to ``name`` with an optional argument block."""
    return _with_children(NodeType.CALL, name, args)


def identifier(name: str) -> ASTNode:
    """Create an identifier node."""
    return ASTNode(NodeType.IDENTIFIER, name)


def number(value: str) -> ASTNode:
    """Create a numeric literal node."""
    return ASTNode(NodeType.NUMBER, value)


def string(value: str) -> ASTNode:
    """Create a string literal node."""
    return ASTNode(NodeType.STRING, value)