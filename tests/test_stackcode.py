import pytest

from toycc import ast
from toycc.ast import ASTNode, NodeType
from toycc.stackcode import StackEmitter, translate_to_target
from toycc.tac import NameSupply


def _lines(emitter):
    return emitter.text().splitlines()


@pytest.mark.parametrize(
    "op, opcode",
    [
        ("+", "ADD"),
        ("-", "SUB"),
        ("*", "MUL"),
        ("/", "DIV"),
        ("%", "MOD"),
        ("==", "EQ"),
        ("!=", "NEQ"),
        ("<", "LT"),
        ("<=", "LTE"),
        (">", "GT"),
        (">=", "GTE"),
    ],
)
def test_binary_opcodes(op, opcode):
    emitter = StackEmitter()
    emitter.expression(ast.binary_op(op, ast.identifier("x"), ast.number("10")))
    assert _lines(emitter) == ["LOAD x", "PUSH 10", opcode]


def test_unknown_binary_operator_emits_only_operands():
    emitter = StackEmitter()
    emitter.expression(ast.binary_op("&&", ast.identifier("x"), ast.identifier("y")))
    assert _lines(emitter) == ["LOAD x", "LOAD y"]


@pytest.mark.parametrize("op, opcode", [("-", "NEG"), ("!", "NOT")])
def test_unary_opcodes(op, opcode):
    emitter = StackEmitter()
    emitter.expression(ast.unary_op(op, ast.identifier("x")))
    assert _lines(emitter) == ["LOAD x", opcode]


def test_call_pushes_arguments_in_reverse():
    args = ASTNode(NodeType.BLOCK, "args")
    args.add_child(ast.identifier("x"))
    args.add_child(ast.identifier("y"))
    emitter = StackEmitter()
    emitter.expression(ast.call("f", args))
    assert _lines(emitter) == ["LOAD y", "LOAD x", "CALL f"]


def test_call_statement_discards_result():
    emitter = StackEmitter()
    emitter.statement(ast.call("f"))
    assert _lines(emitter) == ["CALL f", "POP"]


def test_assignment_and_declaration_store():
    emitter = StackEmitter()
    emitter.statement(ast.assignment("x", ast.number("10")))
    emitter.statement(ast.var_decl("int", "y"))
    assert _lines(emitter) == ["PUSH 10", "STORE x"]


def test_return_forms():
    emitter = StackEmitter()
    emitter.statement(ast.return_stmt(ast.identifier("z")))
    emitter.statement(ast.return_stmt())
    assert _lines(emitter) == ["LOAD z", "RET", "RET0"]


def test_if_allocates_labels_before_condition():
    emitter = StackEmitter()
    emitter.statement(ast.if_stmt(ast.identifier("c"), ast.block()))
    lines = _lines(emitter)
    assert lines[:2] == ["LOAD c", "JZ L0"]
    assert lines[-1] == "L1:"
    assert lines.index("JMP L1") < lines.index("L0:")


def test_for_update_result_is_popped():
    emitter = StackEmitter()
    node = ast.for_stmt(
        None,
        ast.identifier("c"),
        ast.assignment("i", ast.number("1")),
        ast.block(),
    )
    emitter.statement(node)
    lines = _lines(emitter)
    # the for node has three children here, so the assignment sits at index 2 and
    # the body slot (index 3) is absent
    assert lines[0] == "L0:"
    assert "L2:" in lines
    assert lines[-2:] == ["JMP L0", "L1:"]
    assert emitter.names.label_count == 3


def test_function_wraps_body_and_ignores_other_nodes():
    body = ast.block()
    body.add_child(ast.return_stmt(ast.identifier("z")))
    emitter = StackEmitter()
    emitter.function(ast.block())
    assert emitter.text() == ""
    emitter.function(ast.function("main", ASTNode(NodeType.BLOCK, "params"), body))
    assert emitter.text().startswith("FUNC main\n")
    assert emitter.text().endswith("END_FUNC\n\n")


def test_shared_name_supply_continues_labels():
    names = NameSupply()
    names.new_label()
    emitter = StackEmitter(names)
    emitter.statement(ast.while_stmt(ast.identifier("c"), ast.block()))
    assert _lines(emitter)[0] == "L1:"


def test_translate_arithmetic_and_memory():
    target = translate_to_target("PUSH 10\nLOAD x\nADD\nSTORE z\n")
    assert target.splitlines() == [
        "    MOV R1, 10",
        "    PUSH R1",
        "    LOAD R1, [x]",
        "    PUSH R1",
        "    ADD R1, R2, R3",
        "    POP R1",
        "    STORE [z], R1",
    ]


def test_translate_function_frame():
    target = translate_to_target("FUNC main\nRET\nEND_FUNC\n\n")
    assert target.splitlines() == [
        "main:",
        "    PUSH FP",
        "    MOV FP, SP",
        "    POP R1",
        "    RET",
        "    MOV SP, FP",
        "    POP FP",
        "    RET",
    ]


def test_translate_jumps_labels_and_passthrough():
    target = translate_to_target("L0:\nJZ L1\nJMP L0\nCALL f\nRET0\nMOD\nL1:")
    assert target.splitlines() == [
        "L0:",
        "    POP R1",
        "    CMP R1, 0",
        "    JE L1",
        "    JMP L0",
        "    CALL f",
        "    RET",
        "    MOD",
        "L1:",
    ]


def test_translate_empty_input():
    assert translate_to_target("\n\n") == ""


def test_emitted_function_translates_to_labelled_target():
    body = ast.block()
    body.add_child(ast.assignment("x", ast.number("10")))
    emitter = StackEmitter()
    emitter.function(ast.function("main", None, body))
    # without params the body is the only child, so it is not emitted
    target = translate_to_target(emitter.text())
    assert target.splitlines()[0] == "main:"
    assert target.endswith("    RET\n")
    assert all(line for line in target.splitlines())