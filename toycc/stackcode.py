"""Stack-machine code generation and its translation to register-style target code."""

from __future__ import annotations

from typing import Optional

from toycc.ast import ASTNode, NodeType
from toycc.tac import NameSupply

_BINARY_OPCODES = {
    "+": "ADD",
    "-": "SUB",
    "*": "MUL",
    "/": "DIV",
    "%": "MOD",
    "==": "EQ",
    "!=": "NEQ",
    "<": "LT",
    "<=": "LTE",
    ">": "GT",
    ">=": "GTE",
}

_UNARY_OPCODES = {"-": "NEG", "!": "NOT"}


class StackEmitter:
    """Accumulates stack-machine code for expressions, statements and functions."""

    def __init__(self, names: Optional[NameSupply] = None) -> None:
        self.names = names if names is not None else NameSupply()
        self._lines: list[str] = []

    def _emit(self, line: str) -> None:
        self._lines.append(line + "\n")

    def expression(self, node: Optional[ASTNode]) -> None:
        """Emit code that leaves the expression's value on the stack."""
        if node is None:
            return
        kind = node.type
        if kind is NodeType.NUMBER:
            self._emit(f"PUSH {node.value}")
        elif kind is NodeType.IDENTIFIER:
            self._emit(f"LOAD {node.value}")
        elif kind is NodeType.BINARY_OP:
            self.expression(node.children[0])
            self.expression(node.children[1])
            opcode = _BINARY_OPCODES.get(node.value)
            if opcode is not None:
                self._emit(opcode)
        elif kind is NodeType.UNARY_OP:
            self.expression(node.children[0])
            opcode = _UNARY_OPCODES.get(node.value)
            if opcode is not None:
                self._emit(opcode)
        elif kind is NodeType.CALL:
            if node.children and node.children[0].type is NodeType.BLOCK:
                for arg in reversed(node.children[0].children):
                    self.expression(arg)
            self._emit(f"CALL {node.value}")

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
                self.expression(children[0])
                self._emit(f"STORE {node.value}")
        elif kind is NodeType.ASSIGNMENT:
            self.expression(children[0])
            self._emit(f"STORE {node.value}")
        elif kind is NodeType.IF:
            else_label = self.names.new_label()
            end_label = self.names.new_label()
            self.expression(children[0])
            self._emit(f"JZ {else_label}")
            self.statement(children[1])
            self._emit(f"JMP {end_label}")
            self._emit(f"{else_label}:")
            if len(children) > 2:
                self.statement(children[2])
            self._emit(f"{end_label}:")
        elif kind is NodeType.WHILE:
            start_label = self.names.new_label()
            end_label = self.names.new_label()
            self._emit(f"{start_label}:")
            self.expression(children[0])
            self._emit(f"JZ {end_label}")
            self.statement(children[1])
            self._emit(f"JMP {start_label}")
            self._emit(f"{end_label}:")
        elif kind is NodeType.FOR:
            start_label = self.names.new_label()
            end_label = self.names.new_label()
            update_label = self.names.new_label()
            if children:
                self.statement(children[0])
            self._emit(f"{start_label}:")
            if len(children) > 1:
                self.expression(children[1])
                self._emit(f"JZ {end_label}")
            if len(children) > 3:
                self.statement(children[3])
            self._emit(f"{update_label}:")
            if len(children) > 2:
                self.expression(children[2])
                self._emit("POP")
            self._emit(f"JMP {start_label}")
            self._emit(f"{end_label}:")
        elif kind is NodeType.RETURN:
            if children:
                self.expression(children[0])
                self._emit("RET")
            else:
                self._emit("RET0")
        elif kind is NodeType.CALL:
            self.expression(node)
            self._emit("POP")

    def function(self, node: Optional[ASTNode]) -> None:
        """Emit code for a function declaration; other nodes are ignored."""
        if node is None or node.type is not NodeType.FUNCTION_DECL:
            return
        self._emit(f"FUNC {node.value}")
        if len(node.children) > 1:
            self.statement(node.children[1])
        self._emit("END_FUNC")
        self._emit("")

    def text(self) -> str:
        """Return all code emitted so far."""
        return "".join(self._lines)


_SIMPLE_ARITHMETIC = frozenset({"ADD", "SUB", "MUL", "DIV"})


def _translate_line(line: str) -> list[str]:
    if line in _SIMPLE_ARITHMETIC:
        return [f"    {line} R1, R2, R3"]
    if line.startswith("PUSH "):
        return [f"    MOV R1, {line[5:]}", "    PUSH R1"]
    if line.startswith("LOAD "):
        return [f"    LOAD R1, [{line[5:]}]", "    PUSH R1"]
    if line.startswith("STORE "):
        return ["    POP R1", f"    STORE [{line[6:]}], R1"]
    if line.startswith("JZ "):
        return ["    POP R1", "    CMP R1, 0", f"    JE {line[3:]}"]
    if line.startswith("JMP "):
        return [f"    JMP {line[4:]}"]
    if line.startswith("CALL "):
        return [f"    CALL {line[5:]}"]
    if line == "RET":
        return ["    POP R1", "    RET"]
    if line == "RET0":
        return ["    RET"]
    if line.startswith("FUNC "):
        return [f"{line[5:]}:", "    PUSH FP", "    MOV FP, SP"]
    if line == "END_FUNC":
        return ["    MOV SP, FP", "    POP FP", "    RET"]
    if line.endswith(":"):
        return [line]
    return [f"    {line}"]


def translate_to_target(stack_code: str) -> str:
    """Rewrite stack-machine code as assembly-like target code, skipping blank lines."""
    output: list[str] = []
    for line in stack_code.split("\n"):
        if not line:
            continue
        output.extend(_translate_line(line))
    return "".join(f"{line}\n" for line in output)