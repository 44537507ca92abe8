"""Command-line interface module for the scriptable XML tree parser."""

from .main import main

__all__ = ["main"]
