from zenplug.brainfuck import plugin, transpile
from zenplug.plugin_api import PluginApi


def run(body):
    api = PluginApi()
    transpile(body, api)
    return api.out.getvalue()


def test_empty_program_is_block_with_tape():
    text = run("")
    assert text.startswith("{\n    static unsigned char tape[30000] = {0};\n")
    assert "unsigned char *ptr = tape;\n" in text
    assert text.endswith("}\n")


def test_each_operator():
    text = run("><+-.,[]")
    body = text.split("ptr = tape;\n", 1)[1]
    assert body == (
        "    ++ptr;\n"
        "    --ptr;\n"
        "    ++*ptr;\n"
        "    --*ptr;\n"
        "    putchar(*ptr);\n"
        "    *ptr = getchar();\n"
        "    while (*ptr) {\n"
        "    }\n"
        "}\n"
    )


def test_comments_are_ignored():
    assert run("hello + world") == run("+")


def test_loop_braces_balance():
    text = run("++[>+<-]")
    assert text.count("while (*ptr) {") == 1
    assert text.count("{") == text.count("}")


def test_plugin_name_and_call():
    api = PluginApi()
    plugin("+", api)
    assert plugin.name == "brainfuck"
    assert "++*ptr;" in api.out.getvalue()