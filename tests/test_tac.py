from toycc import ast
from toycc.ast import ASTNode, NodeType
from toycc.tac import NameSupply, TacEmitter


def _lines(emitter):
    return emitter.text().splitlines()


def test_name_supply_sequences_are_independent():
    names = NameSupply()
    assert [names.new_temp(), names.new_temp()] == ["t0", "t1"]
    assert names.new_label() == "L0"
    assert names.new_temp() == "t2"


def test_leaf_expressions_return_value_without_code():
    emitter = TacEmitter()
    assert emitter.expression(ast.number("10")) == "10"
    assert emitter.expression(ast.identifier("x")) == "x"
    assert emitter.text() == ""


def test_binary_expression():
    emitter = TacEmitter()
    result = emitter.expression(ast.binary_op("+", ast.identifier("x"), ast.identifier("y")))
    assert result == "t0"
    assert emitter.text() == "t0 = x + y\n"


def test_nested_expression_uses_fresh_temps_in_order():
    emitter = TacEmitter()
    inner = ast.binary_op("*", ast.identifier("a"), ast.identifier("b"))
    outer = ast.binary_op("-", inner, ast.unary_op("-", ast.identifier("c")))
    result = emitter.expression(outer)
    lines = _lines(emitter)
    assert len(lines) == 3
    assert [line.split(" = ")[0] for line in lines] == ["t0", "t1", "t2"]
    assert result == "t2"
    assert lines[2].endswith("t0 - t1")


def test_call_emits_params_then_call():
    emitter = TacEmitter()
    args = ASTNode(NodeType.BLOCK, "args")
    args.add_child(ast.identifier("x"))
    args.add_child(ast.number("10"))
    result = emitter.expression(ast.call("f", args))
    lines = _lines(emitter)
    assert lines[:2] == ["param x", "param 10"]
    assert lines[2] == f"{result} = call f, 2"


def test_call_without_argument_block():
    emitter = TacEmitter()
    result = emitter.expression(ast.call("f"))
    assert _lines(emitter) == [f"{result} = call f, 0"]


def test_unsupported_expression_yields_error():
    emitter = TacEmitter()
    assert emitter.expression(ast.string("hi")) == "error"


def test_assignment_statement():
    emitter = TacEmitter()
    emitter.statement(ast.assignment("z", ast.identifier("t2")))
    assert _lines(emitter) == ["z = t2"]


def test_declaration_without_initializer_emits_nothing():
    emitter = TacEmitter()
    emitter.statement(ast.var_decl("int", "x"))
    assert emitter.text() == ""


def test_if_statement_structure():
    emitter = TacEmitter()
    node = ast.if_stmt(
        ast.identifier("c"),
        ast.assignment("x", ast.number("10")),
        ast.assignment("x", ast.number("20")),
    )
    emitter.statement(node)
    lines = _lines(emitter)
    assert lines[0] == "if c == 0 goto L0"
    assert "goto L1" in lines
    assert lines.index("L0:") < lines.index("x = 20") < lines.index("L1:")
    assert lines[-1] == "L1:"


def test_while_loop_jumps_back_to_start():
    emitter = TacEmitter()
    emitter.statement(ast.while_stmt(ast.identifier("c"), ast.block()))
    lines = _lines(emitter)
    assert lines[0] == "L0:"
    assert lines[1] == "if c == 0 goto L1"
    assert lines[-2:] == ["goto L0", "L1:"]


def test_for_loop_uses_three_labels():
    emitter = TacEmitter()
    node = ast.for_stmt(
        ast.var_decl("int", "i", ast.number("0")),
        ast.binary_op("<", ast.identifier("i"), ast.number("10")),
        ast.assignment("i", ast.binary_op("+", ast.identifier("i"), ast.number("1"))),
        ast.block(),
    )
    emitter.statement(node)
    lines = _lines(emitter)
    assert lines[0] == "int i = 0"
    assert "L2:" in lines
    assert lines[-1] == "L1:"
    assert emitter.names.label_count == 3


def test_return_forms():
    emitter = TacEmitter()
    emitter.statement(ast.return_stmt(ast.identifier("z")))
    emitter.statement(ast.return_stmt())
    assert _lines(emitter) == ["return z", "return"]


def test_function_wraps_body():
    body = ast.block()
    body.add_child(ast.return_stmt(ast.identifier("z")))
    emitter = TacEmitter()
    emitter.function(ast.function("main", ASTNode(NodeType.BLOCK, "params"), body))
    assert emitter.text().startswith("function main:\n")
    assert emitter.text().endswith("end function\n\n")
    assert "return z" in _lines(emitter)


def test_function_ignores_other_nodes():
    emitter = TacEmitter()
    emitter.function(ast.block())
    assert emitter.text() == ""


def test_shared_name_supply_continues_numbering():
    names = NameSupply()
    first = TacEmitter(names)
    first.statement(ast.while_stmt(ast.identifier("c"), ast.block()))
    second = TacEmitter(names)
    second.statement(ast.while_stmt(ast.identifier("c"), ast.block()))
    assert _lines(second)[0] == "L2:"