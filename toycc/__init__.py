"""Toy compiler toolkit: syntax trees, parsers and code emitters for a small C-like language."""

__version__ = "0.1.0"

__all__ = ["ast", "parser_rd", "parser_lalr", "tac", "stackcode"]