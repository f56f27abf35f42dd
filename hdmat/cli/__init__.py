"""Command line interface (``hdmat convert`` / ``hdmat inspect``)."""

from .main import build_parser, main

__all__ = ["build_parser", "main"]
