[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lexauto"
version = "0.1.0"
description = "Lexer building blocks: regex AST, NFA and DFA construction, longest-match simulation with backtracking and right-context lookahead"
requires-python = ">=3.10"
keywords = ["lexer", "tokenizer", "nfa", "dfa", "regex", "automata"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Text Processing :: General",
]
dependencies = ["wcwidth"]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lexauto"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
