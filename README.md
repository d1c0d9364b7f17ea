# zenplug

`zenplug` turns small embedded-language snippets into C source text. Each
plugin reads a snippet body and writes C code to an output stream. Some
plugins also write file-scope helper code to a separate "hoist" stream.

The package also has a small type model (`zenplug.ast`) and a scoped type
checker (`zenplug.typecheck`) for a C-like language.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Plugins

A plugin takes a snippet body and a `zenplug.plugin_api.PluginApi`. The
`PluginApi` holds `filename`, `current_line`, `out` (inline output, by default
a fresh `io.StringIO`) and `hoist_out` (file-scope output, or `None`).

```python
import io
from zenplug.plugin_api import PluginApi
from zenplug import brainfuck

out = io.StringIO()
api = PluginApi(filename="demo.zc", current_line=1, out=out)
brainfuck.transpile("++[>+<-].", api)
print(out.getvalue())
```

Each plugin module has a `transpile(body, api)` function. It also has a
`plugin` object, which is a `zenplug.plugin_api.Plugin`: a name paired with
that function, callable as `plugin(body, api)`. A plugin name may not be empty
or longer than 31 characters.

- `zenplug.brainfuck`: writes a C block with a 30000-cell tape and a pointer.
  Characters that are not Brainfuck commands are ignored.
- `zenplug.befunge`: lays the program out on an 80×25 grid and compiles it
  into a computed-goto dispatch table. `load_grid(body)` returns that grid as
  25 strings of 80 characters. Leading blank lines are dropped, and text past
  the last row or column is cut off.
- `zenplug.regex_plugin`: writes a `static int _regex_match_N(const char *text)`
  matcher and then writes its name to `out`. The matcher goes to `hoist_out`
  when there is one. Otherwise it goes to `out`, ahead of the name. The
  dialect covers literals, `.`, `^` (ignored), `$`, and character classes with
  ranges, `^` negation and an optional `+` or `*`. Whitespace in the pattern is
  ignored. `match_logic(pattern)` returns only the matcher statements.
  `RegexTranspiler` keeps its own counter for the numbering. The module-level
  `transpile` shares one counter across the process.
- `zenplug.lisp`: writes an S-expression program as a C statement expression.
  It supports numbers, strings (which become nil), symbols, `+ - * /`,
  comparisons, `cons`, `car`, `cdr`, `list`, `print`/`println`, `if`, `let`,
  `defun` and plain function calls. The first time a `LispTranspiler` sees a
  `hoist_out`, it writes its C runtime there. `runtime_source()` returns that
  runtime text.
- `zenplug.sql`: handles `CREATE TABLE`, `INSERT INTO … VALUES` and
  `SELECT * FROM`, plus `//` and `/* */` comments. Each table becomes a C
  struct and a 128-row array. `SqlTranspiler` keeps the tables declared so far,
  as `Table` objects holding `Column`s, and `find_table(name)` looks one up.
  The module-level `transpile` shares one registry across the process.

A malformed snippet makes a plugin raise `PluginError`. Examples are an
unbalanced parenthesis in Lisp, a missing `VALUES` or `FROM` in SQL, or a
`SELECT` from an unknown table. The error has `message`, `filename` and `line`
attributes, and its text reads `"<message> at <filename>:<line>"`.

## Type model

`zenplug.ast` defines `TokenType`, `Token`, `TypeKind`, `Type`, `NodeType`,
`ASTNode` and `TraitRegistry`. It also provides these helpers:

- `is_char_ptr`, `is_integer_type`, `is_float_type`
- `type_eq`: loose equality. All integer kinds match each other, as do all
  float kinds, and a string literal matches `char*`.
- `type_to_string`: the C spelling of a type, for example `int32_t`, `char*`,
  `int[4]`, `Slice_int` or `Vec_int`.

`Type.pointer_to(inner)` builds a pointer type.

The fields that depend on a node's kind go in `ASTNode.fields` and can also be
read as attributes. The checker reads the following fields:

- `children` on a root
- `statements` on a block
- `name`, `init_expr` on a variable declaration
- `param_names`, `arg_count`, `body` on a function
- `name` on a variable reference
- `value`, `condition`, `then_body`, `else_body`, `init`, `step`, `left`,
  `right`, `callee`, `args` on the remaining kinds

A field may hold one node, a list of nodes, or a node chained through its own
`next` field.

## Type checking

```python
from zenplug.ast import ASTNode, NodeType
from zenplug.typecheck import check_program

ok = check_program(ASTNode(NodeType.ROOT), "demo.zc")
```

`check_program(root, filename)` prints progress lines to standard output. Each
type mismatch in a variable initialiser is reported on standard error as
`Type Error at <file>:<line>:<col>: ...`. The function returns `True` when no
errors were found and `False` otherwise.

`TypeChecker(filename)` runs the same pass without the progress lines.
`check(root)` returns the error count. `errors` lists the reports, and
`current_scope` is a `Scope` whose `lookup(name)` searches the enclosing
scopes too.

## What it does not do

The package has no lexer or parser. Syntax trees have to be built by hand, as
`ASTNode` objects. It does not generate C for whole programs, call a C
compiler, or load plugins from files. There is no command-line tool either:
the plugins produce C text only, and you compile it yourself.