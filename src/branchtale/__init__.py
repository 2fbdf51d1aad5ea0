"""Interpreter for branching narrative games written as .level files."""

__version__ = "0.1.0"
