"""Command-line interface for perimeter.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Single questions with optional SVG diagrams and worked answers
- Printable PDF worksheets with an answer section
- Catalogue listing
"""

from perimeter.cli.app import cli, main

__all__ = ["cli", "main"]
