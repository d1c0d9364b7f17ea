import io

from zenplug.plugin_api import PluginApi
from zenplug.regex_plugin import RegexTranspiler, match_logic, plugin, transpile


def test_literals_and_dot():
    code = match_logic("a.b")
    assert code == (
        "    if (*c != 'a') return 0; c++;\n"
        "    if (*c == 0) return 0; c++;\n"
        "    if (*c != 'b') return 0; c++;\n"
    )


def test_anchors():
    code = match_logic("^x$")
    assert code.startswith("    if (*c != 'x') return 0; c++;\n")
    assert code.endswith("    if (*c != '\\0') return 0;\n")


def test_whitespace_ignored():
    assert match_logic(" a  b ") == match_logic("ab")


def test_class_star_allows_zero():
    code = match_logic("[0-9]*")
    assert "while (1)" in code
    assert "_count == 0" not in code


def test_single_class_without_quantifier():
    code = match_logic("[xy]")
    assert "        if (*c == 'x') match = 1;\n" in code
    assert "        if (*c == 'y') match = 1;\n" in code
    assert "      if (!match) return 0;\n" in code
    assert "while (1)" not in code


def test_inverted_class():
    code = match_logic("[^a]")
    assert "        if (match) { match = 0; } else { match = 1; }\n" in code
    assert "        if (*c == 'a') match = 1;\n" in code


def test_unterminated_class_stops():
    assert match_logic("a[bc") == match_logic("a")


def test_function_hoisted():
    out, hoist = io.StringIO(), io.StringIO()
    RegexTranspiler().transpile("  ab  ", PluginApi("f", 1, out, hoist))
    assert out.getvalue() == "_regex_match_0"
    text = hoist.getvalue()
    assert text.startswith("static int _regex_match_0(const char *text) {\n")
    assert match_logic("ab") in text
    assert text.endswith("    return 1;\n}\n")


def test_function_inline_without_hoist():
    api = PluginApi()
    RegexTranspiler().transpile("a", api)
    text = api.out.getvalue()
    assert text.startswith("static int _regex_match_0")
    assert text.endswith("}\n_regex_match_0")


def test_numbering_increments():
    tr = RegexTranspiler()
    names = []
    for _ in range(3):
        api = PluginApi(hoist_out=io.StringIO())
        tr.transpile("a", api)
        names.append(api.out.getvalue())
    assert names == [f"_regex_match_{i}" for i in range(3)]


def test_module_level_transpile_uses_shared_counter():
    first, second = PluginApi(hoist_out=io.StringIO()), PluginApi(hoist_out=io.StringIO())
    transpile("a", first)
    plugin("a", second)
    n1 = int(first.out.getvalue().rsplit("_", 1)[1])
    n2 = int(second.out.getvalue().rsplit("_", 1)[1])
    assert n2 == n1 + 1
    assert plugin.name == "regex"