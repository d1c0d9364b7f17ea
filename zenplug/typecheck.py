"""Semantic analysis pass: scoped symbols and declaration type checks."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .ast import ASTNode, NodeType, Token, Type, TypeKind, type_eq, type_to_string

_MAX_MESSAGE = 254


@dataclass
class Symbol:
    """A name declared in some scope, with what is known of its type."""

    name: str
    type_info: Optional[Type] = None
    decl_token: Token = field(default_factory=Token)
    type_name: Optional[str] = None
    is_mutable: bool = False
    is_used: bool = False


@dataclass
class Scope:
    """A lexical scope; lookups fall through to the enclosing scopes."""

    parent: Optional[Scope] = None
    symbols: dict[str, Symbol] = field(default_factory=dict)

    def add(self, symbol: Symbol) -> None:
        """Declare ``symbol`` here, hiding any earlier one of the same name."""
        self.symbols[symbol.name] = symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Return the innermost symbol called ``name``, or None."""
        scope: Optional[Scope] = self
        while scope is not None:
            found = scope.symbols.get(name)
            if found is not None:
                return found
            scope = scope.parent
        return None


def _children(value: object) -> Iterator[ASTNode]:
    """Yield the nodes held by a node field: nothing, one node or a list."""
    if value is None:
        return
    if isinstance(value, ASTNode):
        node: Optional[ASTNode] = value
        while node is not None:
            yield node
            nxt = node.fields.get("next")
            node = nxt if isinstance(nxt, ASTNode) else None
        return
    for item in value:  # type: ignore[union-attr]
        yield from _children(item)


def _is_void_pointer(t: Type) -> bool:
    return (
        t.kind == TypeKind.POINTER
        and t.inner is not None
        and t.inner.kind == TypeKind.VOID
    )


def _is_sized_integer(t: Type) -> bool:
    return TypeKind.I8 <= t.kind <= TypeKind.U64


class TypeChecker:
    """Walks a syntax tree, tracking scopes and reporting type mismatches."""

    def __init__(self, filename: str = "<input>") -> None:
        self.filename = filename
        self.current_scope = Scope()
        self.current_func: Optional[ASTNode] = None
        self.errors: list[str] = []
        self.warning_count = 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def check(self, root: Optional[ASTNode]) -> int:
        """Check ``root`` and everything under it; return the error count."""
        for node in _children(root):
            self._check_node(node)
        return self.error_count

    def _error(self, token: Token, message: str) -> None:
        report = f"Type Error at {self.filename}:{token.line}:{token.col}: {message}"
        print(report, file=sys.stderr)
        self.errors.append(report)

    @contextmanager
    def _scope(self) -> Iterator[Scope]:
        scope = Scope(parent=self.current_scope)
        self.current_scope = scope
        try:
            yield scope
        finally:
            self.current_scope = scope.parent if scope.parent is not None else Scope()

    def _declare(self, name: str, type_info: Optional[Type], token: Token) -> None:
        self.current_scope.add(Symbol(name, type_info, token))

    def _compatible(self, target: Optional[Type], value: Optional[Type], token: Token) -> bool:
        if target is None or value is None:
            return True
        if type_eq(target, value):
            return True
        if _is_void_pointer(target) or _is_void_pointer(value):
            return True
        if _is_sized_integer(target) and _is_sized_integer(value):
            return True
        message = (
            f"Type mismatch: expected '{type_to_string(target)}', "
            f"got '{type_to_string(value)}'"
        )
        self._error(token, message[:_MAX_MESSAGE])
        return False

    def _check_var_decl(self, node: ASTNode) -> None:
        init = node.fields.get("init_expr")
        if init is not None:
            self._check_node(init)
            if node.type_info is not None and init.type_info is not None:
                self._compatible(node.type_info, init.type_info, node.token)
        declared = node.type_info
        if declared is None and init is not None:
            declared = init.type_info
        self._declare(node.fields.get("name", ""), declared, node.token)

    def _check_function(self, node: ASTNode) -> None:
        self.current_func = node
        names = list(node.fields.get("param_names") or [])
        count = node.fields.get("arg_count")
        if count is not None:
            names = names[:count]
        with self._scope():
            for name in names:
                if name:
                    self._declare(name, None, Token())
            self._visit(node.fields.get("body"))
        self.current_func = None

    def _check_var_ref(self, node: ASTNode) -> None:
        symbol = self.current_scope.lookup(node.fields.get("name", ""))
        if symbol is not None and symbol.type_info is not None:
            node.type_info = symbol.type_info

    def _visit(self, value: object) -> None:
        for child in _children(value):
            self._check_node(child)

    def _check_node(self, node: ASTNode) -> None:
        f = node.fields
        kind = node.type
        if kind == NodeType.ROOT:
            self._visit(f.get("children"))
        elif kind == NodeType.BLOCK:
            with self._scope():
                self._visit(f.get("statements"))
        elif kind == NodeType.VAR_DECL:
            self._check_var_decl(node)
        elif kind == NodeType.FUNCTION:
            self._check_function(node)
        elif kind == NodeType.EXPR_VAR:
            self._check_var_ref(node)
        elif kind == NodeType.RETURN:
            self._visit(f.get("value"))
        elif kind == NodeType.IF:
            self._visit(f.get("condition"))
            self._visit(f.get("then_body"))
            self._visit(f.get("else_body"))
        elif kind == NodeType.WHILE:
            self._visit(f.get("condition"))
            self._visit(f.get("body"))
        elif kind == NodeType.FOR:
            with self._scope():
                self._visit(f.get("init"))
                self._visit(f.get("condition"))
                self._visit(f.get("step"))
                self._visit(f.get("body"))
        elif kind == NodeType.EXPR_BINARY:
            self._visit(f.get("left"))
            self._visit(f.get("right"))
        elif kind == NodeType.EXPR_CALL:
            self._visit(f.get("callee"))
            self._visit(f.get("args"))


def check_program(root: Optional[ASTNode], filename: str = "<input>") -> bool:
    """Run the semantic pass over ``root``; return True when it found no errors."""
    checker = TypeChecker(filename)
    print("[TypeCheck] Starting semantic analysis...")
    errors = checker.check(root)
    if errors:
        print(f"[TypeCheck] Found {errors} errors.")
        return False
    print("[TypeCheck] Passed.")
    return True