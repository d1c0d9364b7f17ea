"""Code generators that turn Brainfuck, Befunge, regex, Lisp and SQL snippets into C, with a small type model and checker."""

__version__ = "0.1.0"
__all__ = ["plugin_api", "brainfuck", "befunge", "regex_plugin", "lisp", "sql", "ast", "typecheck"]