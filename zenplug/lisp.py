"""Lisp to C transpiler plugin built on a small tagged-value runtime."""

from __future__ import annotations

from .plugin_api import Plugin, PluginApi, PluginError

_WS = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")
_ARITH = {"+": "l_add", "-": "l_sub", "*": "l_mul", "/": "l_div"}
_UNARY = {"car": "l_car", "cdr": "l_cdr"}

_NUM_ARGS = (
    "long x=(a&&a->type==L_NUM)?a->num:0; long y=(b&&b->type==L_NUM)?b->num:0;"
)
_BINARY_RUNTIME = (
    ("l_add", "return l_num(x+y);"),
    ("l_sub", "return l_num(x-y);"),
    ("l_mul", "return l_num(x*y);"),
    ("l_div", "return l_num(y?x/y:0);"),
    ("l_lt", "return (x<y)?l_num(1):LNIL;"),
)


def runtime_source() -> str:
    """Return the C runtime that generated Lisp code relies on."""
    lines = [
        "/* Lisp Runtime */\n",
        "typedef enum { L_NUM, L_PAIR, L_NIL } LType;\n",
        "typedef struct LVal { LType type; union { long num; struct { struct LVal *car; "
        "struct LVal *cdr; } pair; }; } *LVal;\n",
        "static struct LVal _nil = { L_NIL }; static LVal LNIL = &_nil;\n",
        "static LVal nil = &_nil;\n",
        "static LVal l_num(long n) { LVal v = malloc(sizeof(struct LVal)); "
        "v->type=L_NUM; v->num=n; return v; }\n",
        "static LVal l_nil() { return LNIL; }\n",
        "static LVal l_cons(LVal a, LVal b) { LVal v = malloc(sizeof(struct LVal)); "
        "v->type=L_PAIR; v->pair.car=a; v->pair.cdr=b; return v; }\n",
        "static LVal l_car(LVal v) { return (v && v->type==L_PAIR) ? v->pair.car : LNIL; }\n",
        "static LVal l_cdr(LVal v) { return (v && v->type==L_PAIR) ? v->pair.cdr : LNIL; }\n",
        "static int l_truthy(LVal v) { return (v && v->type!=L_NIL); }\n",
    ]
    lines.extend(
        f"static LVal {name}(LVal a, LVal b) {{ {_NUM_ARGS} {body} }}\n"
        for name, body in _BINARY_RUNTIME
    )
    lines.extend(
        [
            "static void l_print(LVal v) { \n",
            '  if(!v || v->type==L_NIL) printf("nil");\n',
            '  else if(v->type==L_NUM) printf("%ld", v->num);\n',
            '  else if(v->type==L_PAIR) { printf("("); l_print(v->pair.car); '
            'printf(" . "); l_print(v->pair.cdr); printf(")"); }\n',
            "}\n",
        ]
    )
    return "".join(lines)


class _Parser:
    """Recursive-descent reader that emits C while it walks the source."""

    def __init__(self, text: str, api: PluginApi) -> None:
        self.text = text
        self.pos = 0
        self.api = api
        self.parts: list[str] = []

    def _ch(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.text[i] if i < len(self.text) else ""

    def _emit(self, text: str) -> None:
        self.parts.append(text)

    def _error(self, message: str) -> PluginError:
        return PluginError(message, self.api.filename, self.api.current_line)

    def _advance(self) -> None:
        if self.pos < len(self.text):
            self.pos += 1

    def _skip_ws(self) -> None:
        while self._ch() in _WS:
            self.pos += 1

    def _take(self, stops: str) -> str:
        """Consume up to whitespace or any character of ``stops``."""
        start = self.pos
        while (ch := self._ch()) and ch not in _WS and ch not in stops:
            self.pos += 1
        return self.text[start : self.pos]

    def _skip_string(self) -> None:
        self.pos += 1
        while (ch := self._ch()) and ch != '"':
            if ch == "\\":
                self.pos += 1
            self.pos += 1
        self.pos = min(self.pos, len(self.text))
        if self._ch() == '"':
            self.pos += 1

    def program(self) -> str:
        self._emit("({\n")
        while True:
            self._skip_ws()
            if not self._ch():
                break
            if self._ch() == ")":
                raise self._error("Unexpected ')' at top level")
            self._emit("    ")
            self.expr()
            self._emit(";\n")
        self._emit("})\n")
        return "".join(self.parts)

    def expr(self) -> None:
        self._skip_ws()
        if not self._ch():
            return
        if self._ch() == "(":
            self.list_form()
        else:
            self.atom()

    def atom(self) -> None:
        ch = self._ch()
        if ch == ")":
            raise self._error("Unexpected ')'")
        start = self.pos
        if ch in _DIGITS or (ch == "-" and self._ch(1) in _DIGITS):
            self.pos += 1
            while self._ch() in _DIGITS:
                self.pos += 1
            self._emit(f"l_num({self.text[start:self.pos]})")
            return
        if ch == '"':
            self._skip_string()
            self._emit("l_nil()")
            return
        self._emit(self._take(")("))

    def _binary(self, func: str) -> None:
        self._emit(f"{func}(")
        self._skip_ws()
        self.expr()
        self._emit(", ")
        self._skip_ws()
        self.expr()
        self._emit(")")

    def _skip_extra_args(self) -> None:
        self._skip_ws()
        while (ch := self._ch()) and ch != ")":
            if ch == "(":
                depth = 1
                self.pos += 1
                while depth > 0 and (c := self._ch()):
                    if c == "(":
                        depth += 1
                    elif c == ")":
                        depth -= 1
                    self.pos += 1
            else:
                while (c := self._ch()) and c not in _WS and c != ")":
                    self.pos += 1
            self._skip_ws()

    def list_form(self) -> None:
        self.pos += 1
        self._skip_ws()
        if not self._ch():
            raise self._error("Unclosed parenthesis (unexpected EOF)")

        op_start = self.pos
        op = self._take(")(")

        if len(op) == 1 and op in _ARITH:
            self._binary(_ARITH[op])
            self._skip_extra_args()
        elif (len(op) == 1 and op in "<>") or (len(op) == 2 and op[0] in "=!"):
            func = {"<": "l_lt", ">": "l_gt"}.get(op, "l_eq")
            self._binary(func)
        elif op == "cons":
            self._binary("l_cons")
        elif op in _UNARY:
            self._emit(f"{_UNARY[op]}(")
            self._skip_ws()
            self.expr()
            self._emit(")")
        elif op == "list":
            self._emit("l_nil()")
        elif op.startswith("print"):
            self._print(self.text[op_start + 5 : op_start + 6] == "l")
        elif op == "if":
            self._if()
        elif op == "let":
            self._let()
        elif op == "defun":
            self._defun()
        else:
            self._call(op)

        while (ch := self._ch()) and ch != ")":
            self.pos += 1
        if not self._ch():
            raise self._error("Unclosed parenthesis (end of list)")
        self.pos += 1

    def _print(self, newline: bool) -> None:
        self._skip_ws()
        if self._ch() == '"':
            self._emit('printf("')
            self.pos += 1
            while (ch := self._ch()) and ch != '"':
                if ch == "\\":
                    self._emit("\\")
                    self.pos += 1
                    if self._ch():
                        self._emit(self._ch())
                        self.pos += 1
                else:
                    self._emit(ch)
                    self.pos += 1
            self._emit('\\n")' if newline else '")')
            if self._ch() == '"':
                self.pos += 1
        else:
            self._emit("l_print(")
            self.expr()
            self._emit(');' + (' printf("\\n");' if newline else ""))

    def _if(self) -> None:
        self._emit("(l_truthy(")
        self._skip_ws()
        self.expr()
        self._emit(") ? ")
        self._skip_ws()
        self.expr()
        self._emit(" : ")
        self._skip_ws()
        if self._ch() != ")":
            self.expr()
        else:
            self._emit("l_nil()")
        self._emit(")")

    def _body(self) -> None:
        self._skip_ws()
        while (ch := self._ch()) and ch != ")":
            self.expr()
            self._emit(";\n")
            self._skip_ws()

    def _let(self) -> None:
        self._emit("({\n")
        self._skip_ws()
        if self._ch() == "(":
            self.pos += 1
            self._skip_ws()
            while (ch := self._ch()) and ch != ")":
                if ch != "(":
                    raise self._error("Malformed let binding")
                self.pos += 1
                self._skip_ws()
                name = self._take(")")
                self._emit(f"LVal {name} = ")
                self._skip_ws()
                self.expr()
                self._emit(";\n")
                self._skip_ws()
                if self._ch() == ")":
                    self.pos += 1
                self._skip_ws()
            if not self._ch():
                raise self._error("Unclosed let bindings")
            self.pos += 1
        self._body()
        self._emit("})")

    def _defun(self) -> None:
        self._skip_ws()
        name = self._take("(")
        self._emit(f"auto LVal {name}(")
        self._skip_ws()
        self._advance()
        self._skip_ws()
        params = []
        while (ch := self._ch()) and ch != ")":
            params.append(f"LVal {self._take(')')}")
            self._skip_ws()
        self._emit(", ".join(params))
        self._advance()
        self._emit(") {\n return ({\n")
        self._body()
        self._emit("});\n}")

    def _call(self, op: str) -> None:
        self._emit(f"{op}(")
        self._skip_ws()
        first = True
        while (ch := self._ch()) and ch != ")":
            if not first:
                self._emit(", ")
            first = False
            self.expr()
            self._skip_ws()
        self._emit(")")


class LispTranspiler:
    """Turns Lisp blocks into C expressions; hoists the runtime only once."""

    def __init__(self) -> None:
        self._runtime_emitted = False

    def transpile(self, body: str, api: PluginApi) -> None:
        """Write the C statement expression for ``body`` to ``api.out``."""
        if not self._runtime_emitted and api.hoist_out is not None:
            api.hoist_out.write(runtime_source())
            self._runtime_emitted = True
        api.out.write(_Parser(body, api).program())


_default = LispTranspiler()


def transpile(body: str, api: PluginApi) -> None:
    """Transpile with the shared, process-wide runtime state."""
    _default.transpile(body, api)


plugin = Plugin("lisp", transpile)