"""Tokens, the formal type model and syntax-tree nodes of the compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Any, Optional


class _Ordinal(IntEnum):
    """Integer enumeration whose automatic values count up from zero."""

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):  # noqa: N805
        return count


class TokenType(_Ordinal):
    """Kinds of lexical tokens."""

    EOF = auto()
    IDENT = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    FSTRING = auto()
    CHAR = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LANGLE = auto()
    RANGLE = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    OP = auto()
    AT = auto()
    DOTDOT = auto()
    ARROW = auto()
    PIPE = auto()
    TEST = auto()
    ASSERT = auto()
    SIZEOF = auto()
    DEFER = auto()
    AUTOFREE = auto()
    QUESTION = auto()
    USE = auto()
    QQ = auto()
    QQ_EQ = auto()
    Q_DOT = auto()
    DCOLON = auto()
    TRAIT = auto()
    IMPL = auto()
    AND = auto()
    OR = auto()
    FOR = auto()
    COMPTIME = auto()
    ELLIPSIS = auto()
    UNION = auto()
    ASM = auto()
    VOLATILE = auto()
    MUT = auto()
    ASYNC = auto()
    AWAIT = auto()
    PREPROC = auto()
    COMMENT = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class Token:
    """A token: its kind, its source text and where it starts."""

    type: TokenType = TokenType.EOF
    text: str = ""
    line: int = 0
    col: int = 0


class TypeKind(_Ordinal):
    """Kinds of types in the formal type system."""

    VOID = auto()
    BOOL = auto()
    CHAR = auto()
    STRING = auto()
    U0 = auto()
    I8 = auto()
    U8 = auto()
    I16 = auto()
    U16 = auto()
    I32 = auto()
    U32 = auto()
    I64 = auto()
    U64 = auto()
    I128 = auto()
    U128 = auto()
    F32 = auto()
    F64 = auto()
    INT = auto()
    FLOAT = auto()
    USIZE = auto()
    ISIZE = auto()
    BYTE = auto()
    RUNE = auto()
    UINT = auto()
    STRUCT = auto()
    ENUM = auto()
    POINTER = auto()
    ARRAY = auto()
    FUNCTION = auto()
    GENERIC = auto()
    UNKNOWN = auto()


@dataclass
class Type:
    """A type; ``inner`` is the pointee or element, ``args`` generic arguments."""

    kind: TypeKind
    name: Optional[str] = None
    inner: Optional[Type] = None
    args: list[Type] = field(default_factory=list)
    is_const: bool = False
    array_size: int = 0
    is_varargs: bool = False
    is_restrict: bool = False
    has_drop: bool = False

    @classmethod
    def pointer_to(cls, inner: Type) -> Type:
        """Return a pointer type to ``inner``."""
        return cls(TypeKind.POINTER, inner=inner)


class NodeType(_Ordinal):
    """Kinds of syntax-tree nodes."""

    ROOT = auto()
    FUNCTION = auto()
    BLOCK = auto()
    RETURN = auto()
    VAR_DECL = auto()
    CONST = auto()
    TYPE_ALIAS = auto()
    IF = auto()
    WHILE = auto()
    FOR = auto()
    FOR_RANGE = auto()
    LOOP = auto()
    REPEAT = auto()
    UNLESS = auto()
    GUARD = auto()
    BREAK = auto()
    CONTINUE = auto()
    MATCH = auto()
    MATCH_CASE = auto()
    EXPR_BINARY = auto()
    EXPR_UNARY = auto()
    EXPR_LITERAL = auto()
    EXPR_VAR = auto()
    EXPR_CALL = auto()
    EXPR_MEMBER = auto()
    EXPR_INDEX = auto()
    EXPR_CAST = auto()
    EXPR_SIZEOF = auto()
    EXPR_STRUCT_INIT = auto()
    EXPR_ARRAY_LITERAL = auto()
    EXPR_SLICE = auto()
    STRUCT = auto()
    FIELD = auto()
    ENUM = auto()
    ENUM_VARIANT = auto()
    TRAIT = auto()
    IMPL = auto()
    IMPL_TRAIT = auto()
    INCLUDE = auto()
    RAW_STMT = auto()
    TEST = auto()
    ASSERT = auto()
    DEFER = auto()
    DESTRUCT_VAR = auto()
    TERNARY = auto()
    ASM = auto()
    LAMBDA = auto()
    PLUGIN = auto()
    GOTO = auto()
    LABEL = auto()
    DO_WHILE = auto()
    TYPEOF = auto()
    TRY = auto()
    REFLECTION = auto()
    AWAIT = auto()
    REPL_PRINT = auto()


@dataclass(eq=False)
class ASTNode:
    """A syntax-tree node.

    The attributes common to every node are dataclass fields; the ones that
    depend on the node's kind (``name``, ``body``, ``statements``...) live in
    ``fields`` and can also be read as attributes.
    """

    type: NodeType
    line: int = 0
    token: Token = field(default_factory=Token)
    definition_token: Token = field(default_factory=Token)
    resolved_type: Optional[str] = None
    type_info: Optional[Type] = None
    fields: dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Any:
        node_fields = self.__dict__.get("fields")
        if node_fields is not None and name in node_fields:
            return node_fields[name]
        raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")


class TraitRegistry:
    """The set of trait names declared so far."""

    def __init__(self) -> None:
        self._names: set[str] = set()

    def register(self, name: str) -> None:
        """Record ``name`` as a trait."""
        self._names.add(name)

    def __contains__(self, name: object) -> bool:
        return name in self._names


_INTEGER_KINDS = frozenset(
    {
        TypeKind.INT,
        TypeKind.CHAR,
        TypeKind.BOOL,
        TypeKind.I8,
        TypeKind.U8,
        TypeKind.I16,
        TypeKind.U16,
        TypeKind.I32,
        TypeKind.U32,
        TypeKind.I64,
        TypeKind.U64,
        TypeKind.USIZE,
        TypeKind.ISIZE,
        TypeKind.BYTE,
        TypeKind.RUNE,
        TypeKind.UINT,
        TypeKind.I128,
        TypeKind.U128,
    }
)

_FLOAT_KINDS = frozenset({TypeKind.FLOAT, TypeKind.F32, TypeKind.F64})

_C_NAMES = {
    TypeKind.VOID: "void",
    TypeKind.BOOL: "bool",
    TypeKind.STRING: "string",
    TypeKind.CHAR: "char",
    TypeKind.I8: "int8_t",
    TypeKind.U8: "uint8_t",
    TypeKind.I16: "int16_t",
    TypeKind.U16: "uint16_t",
    TypeKind.I32: "int32_t",
    TypeKind.U32: "uint32_t",
    TypeKind.I64: "int64_t",
    TypeKind.U64: "uint64_t",
    TypeKind.F32: "float",
    TypeKind.F64: "double",
    TypeKind.USIZE: "size_t",
    TypeKind.ISIZE: "ptrdiff_t",
    TypeKind.BYTE: "uint8_t",
    TypeKind.I128: "__int128",
    TypeKind.U128: "unsigned __int128",
    TypeKind.RUNE: "int32_t",
    TypeKind.UINT: "unsigned int",
    TypeKind.INT: "int",
    TypeKind.FLOAT: "float",
}


def is_char_ptr(t: Type) -> bool:
    """True for ``char*``, whether char is a primitive or a struct named char."""
    if t.kind != TypeKind.POINTER or t.inner is None:
        return False
    inner = t.inner
    return inner.kind == TypeKind.CHAR or (
        inner.kind == TypeKind.STRUCT and inner.name == "char"
    )


def is_integer_type(t: Optional[Type]) -> bool:
    """True for any integer-like kind, including bool and char."""
    return t is not None and t.kind in _INTEGER_KINDS


def is_float_type(t: Optional[Type]) -> bool:
    """True for any floating-point kind."""
    return t is not None and t.kind in _FLOAT_KINDS


def type_eq(a: Optional[Type], b: Optional[Type]) -> bool:
    """Loose structural type equality.

    All integer kinds match each other, as do all float kinds, and a string
    literal matches ``char*``. A missing type matches nothing.
    """
    if a is None or b is None:
        return False
    if a is b:
        return True
    if is_integer_type(a) and is_integer_type(b):
        return True
    if is_float_type(a) and is_float_type(b):
        return True
    if a.kind == TypeKind.STRING and is_char_ptr(b):
        return True
    if b.kind == TypeKind.STRING and is_char_ptr(a):
        return True
    if a.kind != b.kind:
        return False
    if a.kind in (TypeKind.STRUCT, TypeKind.GENERIC):
        return a.name == b.name
    if a.kind in (TypeKind.POINTER, TypeKind.ARRAY):
        return type_eq(a.inner, b.inner)
    return True


def _mangle(name: str) -> str:
    """Make ``name`` usable inside a C identifier."""
    return "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in name)


def type_to_string(t: Optional[Type]) -> str:
    """Return the C spelling of ``t``; a missing type is ``void``."""
    if t is None:
        return "void"
    if t.kind in _C_NAMES:
        return _C_NAMES[t.kind]
    if t.kind == TypeKind.POINTER:
        inner = type_to_string(t.inner)
        return f"{inner}* __restrict" if t.is_restrict else f"{inner}*"
    if t.kind == TypeKind.ARRAY:
        inner = type_to_string(t.inner)
        if t.array_size > 0:
            return f"{inner}[{t.array_size}]"
        return f"Slice_{inner}"
    if t.kind == TypeKind.FUNCTION:
        return "z_closure_T"
    if t.kind in (TypeKind.STRUCT, TypeKind.GENERIC):
        base = t.name or ""
        if t.args:
            return f"{base}_{_mangle(type_to_string(t.args[0]))}"
        return base
    return "unknown"