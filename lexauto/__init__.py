"""Regex syntax trees, NFA/DFA construction, match simulation and lexer runtime state."""

__version__ = "0.1.0"