"""Command-line interface module for dom-commons.

This module provides the ``dom-commons`` tool for formatting, querying and
validating XML files.
"""

from .main import main

__all__ = ["main"]
