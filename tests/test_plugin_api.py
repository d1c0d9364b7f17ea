import io

import pytest

from zenplug.plugin_api import Plugin, PluginApi, PluginError


def test_plugin_call_delegates_to_function():
    seen = []

    def fn(body, api):
        seen.append(body)
        api.out.write(body.upper())

    plugin = Plugin("shout", fn)
    api = PluginApi()
    plugin("abc", api)
    assert seen == ["abc"]
    assert api.out.getvalue() == "ABC"


def test_api_defaults():
    api = PluginApi()
    assert api.hoist_out is None
    assert api.current_line == 0
    api.out.write("x")
    assert api.out.getvalue() == "x"


def test_api_holds_given_streams():
    out, hoist = io.StringIO(), io.StringIO()
    api = PluginApi("main.zc", 12, out, hoist)
    assert api.out is out
    assert api.hoist_out is hoist
    assert (api.filename, api.current_line) == ("main.zc", 12)


def test_plugin_name_too_long():
    with pytest.raises(ValueError):
        Plugin("n" * 32, lambda body, api: None)


def test_plugin_name_empty():
    with pytest.raises(ValueError):
        Plugin("", lambda body, api: None)


def test_plugin_error_carries_location():
    err = PluginError("Unexpected ')'", "prog.zc", 7)
    assert err.filename == "prog.zc"
    assert err.line == 7
    assert err.message == "Unexpected ')'"
    assert str(err) == "Unexpected ')' at prog.zc:7"


def test_plugin_error_is_raisable():
    def fn(body, api):
        raise PluginError("bad", api.filename, api.current_line)

    with pytest.raises(PluginError) as info:
        Plugin("bad", fn)("", PluginApi("f.zc", 3))
    assert info.value.line == 3