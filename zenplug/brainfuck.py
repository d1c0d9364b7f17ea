"""Brainfuck to C transpiler plugin."""

from __future__ import annotations

from .plugin_api import Plugin, PluginApi

_OPS = {
    ">": "    ++ptr;\n",
    "<": "    --ptr;\n",
    "+": "    ++*ptr;\n",
    "-": "    --*ptr;\n",
    ".": "    putchar(*ptr);\n",
    ",": "    *ptr = getchar();\n",
    "[": "    while (*ptr) {\n",
    "]": "    }\n",
}

_PROLOGUE = "{\n    static unsigned char tape[30000] = {0};\n    unsigned char *ptr = tape;\n"
_EPILOGUE = "}\n"


def transpile(body: str, api: PluginApi) -> None:
    """Write a C block running the Brainfuck program ``body`` to ``api.out``."""
    out = api.out
    out.write(_PROLOGUE)
    out.write("".join(_OPS[ch] for ch in body if ch in _OPS))
    out.write(_EPILOGUE)


plugin = Plugin("brainfuck", transpile)