"""Command-line interface for LRG report files.

Provides commands to reformat, query, summarise and render reports.
"""

from .main import main

__all__ = ["main"]
