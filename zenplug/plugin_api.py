"""Interface shared by the code-generating plugins and their host."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO

MAX_PLUGIN_NAME = 31


@dataclass
class PluginApi:
    """Context handed to a plugin: where it is and where its output goes.

    ``out`` receives inline (expression context) output; ``hoist_out``, when
    given, receives code that belongs at file scope.
    """

    filename: str = "<input>"
    current_line: int = 0
    out: TextIO = field(default_factory=io.StringIO)
    hoist_out: Optional[TextIO] = None


TranspileFn = Callable[[str, PluginApi], None]


@dataclass(frozen=True)
class Plugin:
    """A named transpiler that turns an embedded block into C code."""

    name: str
    fn: TranspileFn

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("plugin name must not be empty")
        if len(self.name) > MAX_PLUGIN_NAME:
            raise ValueError(
                f"plugin name {self.name!r} is longer than {MAX_PLUGIN_NAME} characters"
            )

    def __call__(self, body: str, api: PluginApi) -> None:
        self.fn(body, api)


class PluginError(Exception):
    """Raised when a plugin cannot transpile its input."""

    def __init__(self, message: str, filename: str, line: int) -> None:
        super().__init__(f"{message} at {filename}:{line}")
        self.message = message
        self.filename = filename
        self.line = line