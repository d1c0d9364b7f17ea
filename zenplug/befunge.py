"""Befunge-93 to C transpiler plugin using computed-goto dispatch."""

from __future__ import annotations

from .plugin_api import Plugin, PluginApi

WIDTH = 80
HEIGHT = 25

_SIMPLE_OPS = {
    ">": "    dx=1; dy=0;\n",
    "<": "    dx=-1; dy=0;\n",
    "^": "    dx=0; dy=-1;\n",
    "v": "    dx=0; dy=1;\n",
    "+": "    { long a=stack[--sp]; stack[sp-1]+=a; }\n",
    "-": "    { long a=stack[--sp]; stack[sp-1]-=a; }\n",
    "*": "    { long a=stack[--sp]; stack[sp-1]*=a; }\n",
    "/": "    { long a=stack[--sp]; stack[sp-1]= (a!=0)?stack[sp-1]/a:0; }\n",
    "%": "    { long a=stack[--sp]; stack[sp-1]= (a!=0)?stack[sp-1]%a:0; }\n",
    "!": "    stack[sp-1] = !stack[sp-1];\n",
    "`": "    { long a=stack[--sp]; stack[sp-1]=(stack[sp-1]>a); }\n",
    ":": "    if(sp>0) { stack[sp]=stack[sp-1]; sp++; }\n",
    "\\": "   if(sp>1) { long t=stack[sp-1]; stack[sp-1]=stack[sp-2]; stack[sp-2]=t; }\n",
    "$": "    if(sp>0) sp--;\n",
    ".": '    printf("%ld ", stack[--sp]);\n',
    ",": '    printf("%c", (char)stack[--sp]);\n',
    "_": "    { long a=stack[--sp]; dx=a?-1:1; dy=0; }\n",
    "|": "    { long a=stack[--sp]; dx=0; dy=a?-1:1; }\n",
    "@": "    goto end_befunge;\n",
    "#": "    x+=dx; y+=dy;\n",
}

_ADVANCE = (
    "    x += dx; y += dy;\n"
    f"    if(x>={WIDTH}) x=0; else if(x<0) x={WIDTH}-1;\n"
    f"    if(y>={HEIGHT}) y=0; else if(y<0) y={HEIGHT}-1;\n"
    "    goto *dispatch[y][x];\n\n"
)


def load_grid(body: str) -> list[str]:
    """Lay ``body`` out on the 80x25 playfield, padding with spaces.

    Leading blank lines are dropped; text past the last row or column is cut.
    """
    rows = body.lstrip("\r\n").split("\n")[:HEIGHT]
    grid = [row[:WIDTH].ljust(WIDTH) for row in rows]
    grid.extend(" " * WIDTH for _ in range(HEIGHT - len(grid)))
    return grid


def _cell_code(op: str) -> str:
    if op.isdigit() and op.isascii():
        return f"    if(string_mode) {{ stack[sp++] = '{op}'; }} else {{ stack[sp++] = {op}; }}\n"
    if op == '"':
        return "    string_mode = !string_mode;\n"
    if op in _SIMPLE_OPS:
        return _SIMPLE_OPS[op]
    return f"    if(string_mode) stack[sp++] = '{op}';\n"


def transpile(body: str, api: PluginApi) -> None:
    """Write a C block executing the Befunge program ``body`` to ``api.out``."""
    grid = load_grid(body)
    parts = [
        "{\n",
        "    static long stack[1024]; int sp = 0;\n",
        "    int x = 0, y = 0, dx = 1, dy = 0;\n",
        "    int string_mode = 0;\n\n",
        f"    static void *dispatch[{HEIGHT}][{WIDTH}] = {{\n",
    ]
    for r, row in enumerate(grid):
        cells = "".join(
            "&&space_handler, " if op == " " else f"&&cell_{r}_{c}, "
            for c, op in enumerate(row)
        )
        parts.append(f"        {{ {cells}}},\n")
    parts.append("    };\n\n")
    parts.append("    goto *dispatch[0][0];\n\n")

    for r, row in enumerate(grid):
        for c, op in enumerate(row):
            if op == " ":
                continue
            parts.append(f"cell_{r}_{c}:\n")
            parts.append(_cell_code(op))
            parts.append(_ADVANCE)

    parts.append("space_handler:\n")
    parts.append(_ADVANCE)
    parts.append("end_befunge:;\n")
    parts.append("}\n")
    api.out.write("".join(parts))


plugin = Plugin("befunge", transpile)