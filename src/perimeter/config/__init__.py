"""Configuration management for perimeter.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GenerationConfig: Sampling ranges and rejection-sampling bounds
- PlacementConfig: Label sizing and placement search settings
- CanvasConfig: On-screen canvas size and font size
- LayoutConfig: Print page grid settings
- StyleConfig: Colours shared by both renderers
- LoggingConfig: Logging settings
- PerimeterSettings: Main application settings
"""

from perimeter.config.settings import (
    CanvasConfig,
    GenerationConfig,
    LayoutConfig,
    LoggingConfig,
    PerimeterSettings,
    PlacementConfig,
    StyleConfig,
    get_default_settings,
)

__all__ = [
    "CanvasConfig",
    "GenerationConfig",
    "LayoutConfig",
    "LoggingConfig",
    "PerimeterSettings",
    "PlacementConfig",
    "StyleConfig",
    "get_default_settings",
]
