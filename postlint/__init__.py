"""Linter for Jekyll-style markdown posts."""

__version__ = "0.1.0"
