# toycc

`toycc` is a small compiler toolkit for a C-like teaching language. It has no
runtime dependencies.

## Modules

- **`toycc.ast`**: `ASTNode` is a dataclass with a `type` (a `NodeType`), an
  optional string `value` and a list of `children`. `add_child` appends a
  child and ignores `None`. The builder functions are `program()`,
  `function()`, `block()`, `var_decl()`, `assignment()`, `binary_op()`,
  `unary_op()`, `if_stmt()`, `while_stmt()`, `for_stmt()`, `return_stmt()`,
  `call()`, `identifier()`, `number()` and `string()`. `var_decl` stores
  `"<type> <name>"` as the value. A tree can be rendered in three forms:
  - an indented outline, with `to_text` / `save_text`;
  - a Graphviz digraph, with `to_dot` / `save_dot`;
  - a JSON document with the tree under `"ast"`, with `to_json` / `save_json`.
- **`toycc.parser_rd`**: `Token` holds a type, a value, a line and a column.
  Its type is a `TokenType`. `RDParser` takes a sequence of tokens, and
  `ParseError` carries a `message`. Note that `RDParser.parse()` currently
  returns a fixed tree: a program holding one bare `main` function. It does
  this whatever tokens it was given.
- **`toycc.parser_lalr`**: `LALRParser` is a shift/reduce parser driven by
  action and goto tables. Its grammar symbols are the `Symbol` enum. The
  tables are minimal: they shift only a leading type keyword. Every input is
  therefore rejected, and `parse()` raises `ParseError("Syntax error")`.
- **`toycc.tac`**: `TacEmitter` produces three-address code through its
  `expression`, `statement` and `function` methods. `text()` returns the code
  emitted so far. Temporaries (`t0`, `t1`, …) and labels (`L0`, `L1`, …) come
  from a `NameSupply`, which can be shared between emitters.
- **`toycc.stackcode`**: `StackEmitter` produces stack-machine code with the
  same set of methods. `translate_to_target()` rewrites that code as an
  assembly-like, register-style listing and skips blank lines.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
```

## Example

```python
from toycc.ast import program, function, block, var_decl, binary_op, identifier, number, return_stmt
from toycc.tac import TacEmitter
from toycc.stackcode import StackEmitter, translate_to_target

body = block()
body.add_child(var_decl("int", "x", number("10")))
body.add_child(return_stmt(binary_op("+", identifier("x"), number("1"))))
root = program()
root.add_child(function("main", block(), body))

print(root.to_text())

tac = TacEmitter()
tac.function(root.children[0])
print(tac.text())

stack = StackEmitter()
stack.function(root.children[0])
print(translate_to_target(stack.text()))
```

To write the tree out as a graph for Graphviz:

```python
root.save_dot("ast.dot")
```

## What it does not do

- It has no lexer. Source text cannot be turned into `Token`s. You have to
  build the tokens yourself.
- It has no command-line program.
- It has no single driver that runs the parser and all three emitters on a
  file and writes the listings to an output directory. Trees are built with
  the `toycc.ast` helpers and passed to the emitters by hand.
- Neither parser yet builds a tree from real input, as described above.

## Running the tests

```
pytest
```