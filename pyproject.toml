[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zenplug"
version = "0.1.0"
description = "Code generators that turn Brainfuck, Befunge, regex, Lisp and SQL snippets into C, plus a small type model and checker"
requires-python = ">=3.10"
dependencies = []
keywords = ["code-generation", "transpiler", "brainfuck", "befunge", "lisp", "sql", "regex", "c"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Programming Language :: C",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zenplug"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
