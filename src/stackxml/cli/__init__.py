"""Command-line interface module for stackxml.

This module provides the ``stackxml`` tool for checking documents, dumping
their event streams and rewriting them in canonical layout.
"""

from .main import main

__all__ = ["main"]
