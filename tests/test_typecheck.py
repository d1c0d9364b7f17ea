from zenplug.ast import ASTNode, NodeType, Token, TokenType, Type, TypeKind
from zenplug.typecheck import Scope, Symbol, TypeChecker, check_program


def node(kind, type_info=None, token=None, **fields):
    return ASTNode(kind, type_info=type_info, token=token or Token(), fields=fields)


def var_decl(name, declared=None, init=None, token=None):
    return node(NodeType.VAR_DECL, type_info=declared, token=token, name=name, init_expr=init)


def literal(t):
    return node(NodeType.EXPR_LITERAL, type_info=t)


def var_ref(name):
    return node(NodeType.EXPR_VAR, name=name)


def struct(name):
    return Type(TypeKind.STRUCT, name=name)


def test_scope_lookup_falls_through_to_parent():
    outer = Scope()
    outer.add(Symbol("x", Type(TypeKind.INT)))
    inner = Scope(parent=outer)
    inner.add(Symbol("y", Type(TypeKind.BOOL)))
    assert inner.lookup("x").type_info.kind == TypeKind.INT
    assert inner.lookup("y").type_info.kind == TypeKind.BOOL
    assert outer.lookup("y") is None


def test_scope_inner_symbol_hides_outer():
    outer = Scope()
    outer.add(Symbol("x", Type(TypeKind.INT)))
    inner = Scope(parent=outer)
    inner.add(Symbol("x", struct("Foo")))
    assert inner.lookup("x").type_info.name == "Foo"


def test_mismatch_is_reported_with_position():
    tok = Token(TokenType.IDENT, "a", 3, 5)
    root = node(
        NodeType.ROOT,
        children=[var_decl("a", Type(TypeKind.INT), literal(struct("Foo")), tok)],
    )
    checker = TypeChecker("f.zc")
    assert checker.check(root) == 1
    assert checker.errors[0] == (
        "Type Error at f.zc:3:5: Type mismatch: expected 'int', got 'Foo'"
    )


def test_integer_kinds_are_compatible():
    root = node(
        NodeType.ROOT,
        children=[var_decl("a", Type(TypeKind.I8), literal(Type(TypeKind.U64)))],
    )
    assert TypeChecker().check(root) == 0


def test_void_pointer_accepts_any_pointer():
    void_ptr = Type.pointer_to(Type(TypeKind.VOID))
    foo_ptr = Type.pointer_to(struct("Foo"))
    root = node(
        NodeType.ROOT,
        children=[
            var_decl("a", void_ptr, literal(foo_ptr)),
            var_decl("b", foo_ptr, literal(void_ptr)),
        ],
    )
    assert TypeChecker().check(root) == 0


def test_missing_types_are_not_checked():
    root = node(NodeType.ROOT, children=[var_decl("a", None, literal(struct("Foo")))])
    assert TypeChecker().check(root) == 0


def test_variable_reference_takes_inferred_type():
    ref = var_ref("a")
    foo = struct("Foo")
    root = node(
        NodeType.ROOT,
        children=[var_decl("a", None, literal(foo)), node(NodeType.RETURN, value=ref)],
    )
    TypeChecker().check(root)
    assert ref.type_info is foo


def test_block_scope_ends_with_block():
    inner_ref = var_ref("a")
    outer_ref = var_ref("a")
    foo = struct("Foo")
    block = node(NodeType.BLOCK, statements=[var_decl("a", foo), inner_ref])
    root = node(NodeType.ROOT, children=[block, outer_ref])
    TypeChecker().check(root)
    assert inner_ref.type_info is foo
    assert outer_ref.type_info is None


def test_for_loop_init_is_scoped():
    foo = struct("Foo")
    body_ref = var_ref("i")
    after_ref = var_ref("i")
    loop = node(
        NodeType.FOR,
        init=var_decl("i", foo),
        condition=None,
        step=None,
        body=node(NodeType.BLOCK, statements=[body_ref]),
    )
    TypeChecker().check(node(NodeType.ROOT, children=[loop, after_ref]))
    assert body_ref.type_info is foo
    assert after_ref.type_info is None


def test_function_parameter_shadows_global():
    foo = struct("Foo")
    param_ref = var_ref("p")
    func = node(
        NodeType.FUNCTION,
        name="f",
        param_names=["p"],
        arg_count=1,
        body=node(NodeType.BLOCK, statements=[node(NodeType.RETURN, value=param_ref)]),
    )
    checker = TypeChecker()
    checker.check(node(NodeType.ROOT, children=[var_decl("p", foo), func]))
    assert param_ref.type_info is None
    assert checker.current_func is None


def test_errors_found_inside_nested_statements():
    bad = var_decl("x", Type(TypeKind.BOOL), literal(struct("Bar")))
    tree = node(
        NodeType.IF,
        condition=literal(Type(TypeKind.BOOL)),
        then_body=node(NodeType.BLOCK, statements=[bad]),
        else_body=node(NodeType.WHILE, condition=None, body=node(NodeType.BLOCK, statements=[bad])),
    )
    assert TypeChecker().check(node(NodeType.ROOT, children=[tree])) == 2


def test_check_program_passes(capsys):
    root = node(NodeType.ROOT, children=[var_decl("a", Type(TypeKind.INT))])
    assert check_program(root, "ok.zc") is True
    out = capsys.readouterr().out
    assert "[TypeCheck] Starting semantic analysis..." in out
    assert "[TypeCheck] Passed." in out


def test_check_program_reports_failures(capsys):
    root = node(
        NodeType.ROOT,
        children=[var_decl("a", Type(TypeKind.INT), literal(struct("Foo")), Token(line=2, col=1))],
    )
    assert check_program(root, "bad.zc") is False
    captured = capsys.readouterr()
    assert "[TypeCheck] Found 1 errors." in captured.out
    assert "Type Error at bad.zc:2:1:" in captured.err