"""A toy SQL dialect compiled into C structs, arrays and loops."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Optional

from .plugin_api import Plugin, PluginApi, PluginError

_WS = frozenset(" \t\n\v\f\r")
_IDENT = frozenset(string.ascii_letters + string.digits + "_")
MAX_ROWS = 128


@dataclass
class Column:
    """A column and the C type its values are stored as."""

    name: str
    type: str


@dataclass
class Table:
    """A table declared by CREATE TABLE."""

    name: str
    columns: list[Column] = field(default_factory=list)


class _Parser:
    def __init__(self, text: str, api: PluginApi, tables: dict[str, Table]) -> None:
        self.text = text
        self.pos = 0
        self.api = api
        self.tables = tables
        self.parts: list[str] = []

    def _ch(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _emit(self, text: str) -> None:
        self.parts.append(text)

    def _error(self, message: str) -> PluginError:
        return PluginError(message, self.api.filename, self.api.current_line)

    def _skip_ws(self) -> None:
        end = len(self.text)
        while True:
            while self._ch() in _WS:
                self.pos += 1
            if self.text.startswith("//", self.pos):
                nl = self.text.find("\n", self.pos + 2)
                self.pos = end if nl < 0 else nl
            elif self.text.startswith("/*", self.pos):
                close = self.text.find("*/", self.pos + 2)
                self.pos = end if close < 0 else close + 2
            else:
                break

    def _match_kw(self, kw: str) -> bool:
        n = len(kw)
        seg = self.text[self.pos : self.pos + n]
        if len(seg) != n or not seg.isascii() or seg.lower() != kw.lower():
            return False
        if self.text[self.pos + n : self.pos + n + 1] in _IDENT:
            return False
        self.pos += n
        return True

    def _ident(self) -> str:
        start = self.pos
        while self._ch() in _IDENT:
            self.pos += 1
        return self.text[start : self.pos]

    def _skip_if(self, ch: str) -> bool:
        if self._ch() == ch:
            self.pos += 1
            return True
        return False

    def run(self) -> str:
        self._emit("({\n")
        while True:
            self._skip_ws()
            if not self._ch():
                break
            if self._match_kw("CREATE"):
                self._skip_ws()
                self._match_kw("TABLE")
                self._create_table()
            elif self._match_kw("INSERT"):
                self._insert()
            elif self._match_kw("SELECT"):
                self._select()
            else:
                self.pos += 1
        self._emit("0; })")
        return "".join(self.parts)

    def _create_table(self) -> None:
        self._skip_ws()
        name = self._ident()
        table = Table(name)
        self.tables[name] = table

        self._skip_ws()
        if not self._skip_if("("):
            raise self._error("Expected '(' after table name")
        self._skip_ws()

        self._emit("typedef struct {\n")
        while self._ch() and self._ch() != ")":
            self._skip_ws()
            col_name = self._ident()
            if not col_name and self._ch() != ",":
                break
            self._skip_ws()
            type_name = self._ident().upper()
            ctype, store_type = "int", "int"
            if type_name and ("TEXT".startswith(type_name) or "STRING".startswith(type_name)):
                ctype, store_type = "const char*", "char*"
            table.columns.append(Column(col_name, store_type))
            self._emit(f"    {ctype} {col_name};\n")
            self._skip_ws()
            self._skip_if(",")
        self._skip_if(")")
        self._skip_ws()
        self._skip_if(";")

        self._emit(f"}} Row_{name};\n")
        self._emit(f"static Row_{name} table_{name}[{MAX_ROWS}];\n")
        self._emit(f"static int count_{name} = 0;\n")

    def _insert(self) -> None:
        self._skip_ws()
        self._match_kw("INTO")
        self._skip_ws()
        name = self._ident()
        self._skip_ws()
        if not self._match_kw("VALUES"):
            raise self._error("Expected VALUES in INSERT")
        self._skip_ws()
        self._skip_if("(")

        self._emit(f"if (count_{name} < {MAX_ROWS}) {{\n")
        self._emit(f"    table_{name}[count_{name}] = (Row_{name}){{ ")
        while self._ch() and self._ch() != ")":
            self._skip_ws()
            start = self.pos
            if self._ch() == '"':
                self.pos += 1
                while (ch := self._ch()) and ch != '"':
                    if ch == "\\":
                        self.pos += 1
                    self.pos += 1
                self.pos = min(self.pos, len(self.text))
                self._skip_if('"')
            else:
                while (ch := self._ch()) and ch not in ",)":
                    self.pos += 1
            self._emit(self.text[start : self.pos])
            self._skip_ws()
            if self._skip_if(","):
                self._emit(", ")
        self._skip_if(")")
        self._skip_ws()
        self._skip_if(";")

        self._emit(" };\n")
        self._emit(f"    count_{name}++;\n")
        self._emit("}\n")

    def _select(self) -> None:
        self._skip_ws()
        self._match_kw("*")
        self._skip_ws()
        if not self._match_kw("FROM"):
            raise self._error("Expected FROM in SELECT")
        self._skip_ws()
        name = self._ident()
        self._skip_ws()
        self._skip_if(";")

        table = self.tables.get(name)
        if table is None:
            raise self._error(f"Unknown table '{name}' in SELECT")

        fmt = " ".join("%d" if col.type == "int" else "%s" for col in table.columns)
        args = "".join(f", table_{name}[_i].{col.name}" for col in table.columns)
        self._emit(f"for(int _i=0; _i<count_{name}; _i++) {{\n")
        self._emit(f'    printf("{fmt}\\n"{args});\n')
        self._emit("}\n")


class SqlTranspiler:
    """Keeps the tables declared so far so later blocks can query them."""

    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}

    def find_table(self, name: str) -> Optional[Table]:
        """Return the most recently declared table called ``name``."""
        return self._tables.get(name)

    def transpile(self, body: str, api: PluginApi) -> None:
        """Write the C statement expression for the SQL in ``body``."""
        api.out.write(_Parser(body, api, self._tables).run())


_default = SqlTranspiler()


def transpile(body: str, api: PluginApi) -> None:
    """Transpile with the shared, process-wide table registry."""
    _default.transpile(body, api)


plugin = Plugin("sql", transpile)