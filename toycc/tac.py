"""Three-address code generation from syntax trees."""

from __future__ import annotations

from typing import Optional

from toycc.ast import ASTNode, NodeType


class NameSupply:
    """Hands out fresh temporary names (``t0``, ``t1``...) and labels (``L0``...)."""

    def __init__(self) -> None:
        self.temp_count = 0
        self.label_count = 0

    def new_temp(self) -> str:
        """Return the next unused temporary name."""
        name = f"t{self.temp_count}"
        self.temp_count += 1
        return name

    def new_label(self) -> str:
        """Return the next unused label name."""
        name = f"L{self.label_count}"
        self.label_count += 1
        return name


def _call_arguments(node: ASTNode) -> list[ASTNode]:
    if node.children and node.children[0].type is NodeType.BLOCK:
        return node.children[0].children
    return []


class TacEmitter:
    """Accumulates three-address code for expressions, statements and functions."""

    def __init__(self, names: Optional[NameSupply] = None) -> None:
        self.names = names if names is not None else NameSupply()
        self._lines: list[str] = []

    def _emit(self, line: str) -> None:
        self._lines.append(line + "\n")

    def expression(self, node: Optional[ASTNode]) -> Optional[str]:
        """Emit code for an expression and return the name holding its value."""
        if node is None:
            return None
        kind = node.type
        if kind in (NodeType.NUMBER, NodeType.IDENTIFIER):
            return node.value
        if kind is NodeType.BINARY_OP:
            left = self.expression(node.children[0])
            right = self.expression(node.children[1])
            temp = self.names.new_temp()
            self._emit(f"{temp} = {left} {node.value} {right}")
            return temp
        if kind is NodeType.UNARY_OP:
            operand = self.expression(node.children[0])
            temp = self.names.new_temp()
            self._emit(f"{temp} = {node.value} {operand}")
            return temp
        if kind is NodeType.CALL:
            args = [self.expression(arg) for arg in _call_arguments(node)]
            for arg in args:
                self._emit(f"param {arg}")
            temp = self.names.new_temp()
            self._emit(f"{temp} = call {node.value}, {len(args)}")
            return temp
        return "error"

    def statement(self, node: Optional[ASTNode]) -> None:
        """Emit code for a statement."""
        if node is None:
            return
        kind = node.type
        children = node.children
        if kind is NodeType.BLOCK:
            for child in children:
                self.statement(child)
        elif kind is NodeType.VARIABLE_DECL:
            if children:
                value = self.expression(children[0])
                self._emit(f"{node.value} = {value}")
        elif kind is NodeType.ASSIGNMENT:
            value = self.expression(children[0])
            self._emit(f"{node.value} = {value}")
        elif kind is NodeType.IF:
            condition = self.expression(children[0])
            else_label = self.names.new_label()
            end_label = self.names.new_label()
            self._emit(f"if {condition} == 0 goto {else_label}")
            self.statement(children[1])
            self._emit(f"goto {end_label}")
            self._emit(f"{else_label}:")
            if len(children) > 2:
                self.statement(children[2])
            self._emit(f"{end_label}:")
        elif kind is NodeType.WHILE:
            start_label = self.names.new_label()
            end_label = self.names.new_label()
            self._emit(f"{start_label}:")
            condition = self.expression(children[0])
            self._emit(f"if {condition} == 0 goto {end_label}")
            self.statement(children[1])
            self._emit(f"goto {start_label}")
            self._emit(f"{end_label}:")
        elif kind is NodeType.FOR:
            start_label = self.names.new_label()
            end_label = self.names.new_label()
            update_label = self.names.new_label()
            if children:
                self.statement(children[0])
            self._emit(f"{start_label}:")
            if len(children) > 1:
                condition = self.expression(children[1])
                self._emit(f"if {condition} == 0 goto {end_label}")
            if len(children) > 3:
                self.statement(children[3])
            self._emit(f"{update_label}:")
            if len(children) > 2:
                self.expression(children[2])
            self._emit(f"goto {start_label}")
            self._emit(f"{end_label}:")
        elif kind is NodeType.RETURN:
            if children:
                value = self.expression(children[0])
                self._emit(f"return {value}")
            else:
                self._emit("return")
        elif kind is NodeType.CALL:
            self.expression(node)

    def function(self, node: Optional[ASTNode]) -> None:
        """Emit code for a function declaration; other nodes are ignored."""
        if node is None or node.type is not NodeType.FUNCTION_DECL:
            return
        self._emit(f"function {node.value}:")
        if len(node.children) > 1:
            self.statement(node.children[1])
        self._emit("end function")
        self._emit("")

    def text(self) -> str:
        """Return all code emitted so far."""
        return "".join(self._lines)