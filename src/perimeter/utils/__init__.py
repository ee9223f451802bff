"""Utility functions for perimeter.

This module provides utility functions including:

- Logging setup and configuration
- Generation statistics tracking
"""

from perimeter.utils.logging import (
    GenerationLogger,
    GenerationStats,
    configure_logging,
)

__all__ = [
    "GenerationLogger",
    "GenerationStats",
    "configure_logging",
]
