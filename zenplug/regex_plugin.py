"""Compile a tiny regular-expression dialect into C matcher functions."""

from __future__ import annotations

from .plugin_api import Plugin, PluginApi

_WS = " \t\n\v\f\r"


def _skip_ws(text: str, pos: int, end: int) -> int:
    while pos < end and text[pos] in _WS:
        pos += 1
    return pos


def _class_logic(pattern: str, start: int, end: int, quantifier: str) -> list[str]:
    lines = ["    {\n", "      int _count = 0;\n"]
    if quantifier:
        lines.append("      while (1) {\n")
        lines.append("        if (*c == 0) break;\n")
    else:
        lines.append("        if (*c == 0) return 0;\n")
    lines.append("        int match = 0;\n")

    pos = _skip_ws(pattern, start, end)
    invert = pos < end and pattern[pos] == "^"
    if invert:
        pos += 1
    pos = _skip_ws(pattern, pos, end)

    while pos < end:
        ch = pattern[pos]
        if ch in _WS:
            pos += 1
            continue
        nxt = _skip_ws(pattern, pos + 1, end)
        if nxt < end and pattern[nxt] == "-" and nxt + 1 < end:
            range_end = _skip_ws(pattern, nxt + 1, end)
            if range_end < end:
                lines.append(
                    f"        if (*c >= '{ch}' && *c <= '{pattern[range_end]}') match = 1;\n"
                )
                pos = range_end + 1
                continue
        lines.append(f"        if (*c == '{ch}') match = 1;\n")
        pos += 1

    if invert:
        lines.append("        if (match) { match = 0; } else { match = 1; }\n")

    if quantifier:
        lines.append("        if (!match) break;\n")
        lines.append("        c++; _count++;\n")
        lines.append("      }\n")
        if quantifier == "+":
            lines.append("      if (_count == 0) return 0;\n")
    else:
        lines.append("      if (!match) return 0;\n")
        lines.append("      c++;\n")
    lines.append("    }\n")
    return lines


def match_logic(pattern: str) -> str:
    """Return the C statements that match ``pattern`` against ``c``.

    Supports literals, ``.``, ``^`` (ignored), ``$`` and character classes
    with an optional ``+`` or ``*``. Whitespace in the pattern is ignored.
    An unterminated class ends the generated code.
    """
    lines: list[str] = []
    n = len(pattern)
    pos = 0
    while pos < n:
        ch = pattern[pos]
        if ch in _WS or ch == "^":
            pos += 1
        elif ch == "$":
            lines.append("    if (*c != '\\0') return 0;\n")
            pos += 1
        elif ch == "[":
            class_end = pattern.find("]", pos + 1)
            if class_end < 0:
                break
            q = _skip_ws(pattern, class_end + 1, n)
            quantifier = pattern[q] if q < n and pattern[q] in "+*" else ""
            lines.extend(_class_logic(pattern, pos + 1, class_end, quantifier))
            pos = class_end + 1
            if quantifier:
                pos = _skip_ws(pattern, pos, n)
                if pos < n and pattern[pos] == quantifier:
                    pos += 1
        elif ch == ".":
            lines.append("    if (*c == 0) return 0; c++;\n")
            pos += 1
        else:
            lines.append(f"    if (*c != '{ch}') return 0; c++;\n")
            pos += 1
    return "".join(lines)


class RegexTranspiler:
    """Emits numbered matcher functions; each call gets a fresh name."""

    def __init__(self) -> None:
        self._counter = 0

    def transpile(self, body: str, api: PluginApi) -> None:
        """Emit a matcher for ``body`` and write its name to ``api.out``.

        The function goes to ``api.hoist_out`` when there is one, otherwise
        to ``api.out`` ahead of the name.
        """
        pattern = body.strip(_WS)
        fn_name = f"_regex_match_{self._counter}"
        self._counter += 1

        target = api.hoist_out if api.hoist_out is not None else api.out
        target.write(
            f"static int {fn_name}(const char *text) {{\n"
            "    if (!text) return 0;\n"
            "    const char *c = text;\n"
            f"{match_logic(pattern)}"
            "    return 1;\n"
            "}\n"
        )
        api.out.write(fn_name)


_default = RegexTranspiler()


def transpile(body: str, api: PluginApi) -> None:
    """Transpile with the shared, process-wide numbering."""
    _default.transpile(body, api)


plugin = Plugin("regex", transpile)