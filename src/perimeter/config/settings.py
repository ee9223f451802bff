"""Configuration settings for Perimeter."""

from pathlib import Path

from pydantic import BaseModel, Field


class GenerationConfig(BaseModel):
    """Configuration for question generation and rejection sampling."""

    min_side: int = Field(
        default=3,
        ge=1,
        le=50,
        description="Smallest side length drawn for polygons (cm)",
    )
    max_side: int = Field(
        default=20,
        ge=2,
        le=99,
        description="Largest side length drawn for polygons (cm)",
    )
    rect_min_gap: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Minimum difference between the two sides of a rectangle or parallelogram",
    )
    rect_fallback_offset: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Offset applied to the second side when rectangle sampling is exhausted",
    )
    iso_min_side: int = Field(
        default=4,
        ge=1,
        description="Smallest leg/base drawn for isosceles triangles (cm)",
    )
    iso_max_side: int = Field(
        default=16,
        ge=2,
        description="Largest leg/base drawn for isosceles triangles (cm)",
    )
    iso_min_height_ratio: float = Field(
        default=0.4,
        ge=0.1,
        le=2.0,
        description="Minimum height-to-base ratio of an isosceles triangle",
    )
    max_attempts: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Rejection sampling attempts before the fixed fallback is used",
    )
    mixed_unit_probability: float = Field(
        default=0.45,
        ge=0.0,
        le=1.0,
        description="Chance that a labelled edge is shown in mm or m when mixing units",
    )
    metre_probability: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Chance that a mixed-unit question uses metres instead of millimetres",
    )
    two_hidden_probability: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Chance that a level 2 rectilinear question hides two edges instead of one",
    )
    max_per_family: int = Field(
        default=2,
        ge=1,
        le=20,
        description="Maximum polygons of one family in a worksheet batch",
    )
    uniqueness_attempts: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Retries for a duplicate question before it is accepted",
    )


class PlacementConfig(BaseModel):
    """Configuration for label sizing, candidate anchors and the placement search.

    All distances are expressed as multiples of the caller's font size so that
    the same configuration serves the screen and the print renderer.
    """

    standoff_ratio: float = Field(
        default=2.4,
        ge=0.5,
        le=10.0,
        description="Distance from edge midpoint to label anchor, in font sizes",
    )
    char_width_ratio: float = Field(
        default=0.62,
        ge=0.3,
        le=1.5,
        description="Average glyph width, in font sizes",
    )
    pill_pad_ratio: float = Field(
        default=0.8,
        ge=0.0,
        le=3.0,
        description="Horizontal padding on each side of the label text, in font sizes",
    )
    pill_height_ratio: float = Field(
        default=1.5,
        ge=1.0,
        le=4.0,
        description="Label height, in font sizes",
    )
    crowding_radius: float = Field(
        default=0.22,
        ge=0.0,
        le=1.0,
        description="Edges whose midpoint lies closer than this fraction of the shape size to the centroid are crowded",
    )
    crowding_gain: float = Field(
        default=0.5,
        ge=0.0,
        le=2.0,
        description="Maximum extra standoff for crowded edges, as a fraction of the base standoff",
    )
    margin_slack_ratio: float = Field(
        default=0.3,
        ge=0.0,
        le=3.0,
        description="Extra canvas margin beyond the largest label reach, in font sizes",
    )
    max_exhaustive_labels: int = Field(
        default=12,
        ge=1,
        le=16,
        description="Largest label count searched exhaustively (3^m assignments)",
    )
    local_search_passes: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Improvement passes for label counts above the exhaustive bound",
    )
    tick_length_ratio: float = Field(
        default=0.42,
        ge=0.0,
        le=3.0,
        description="Length of an equal-side tick mark, in font sizes",
    )
    tick_spacing_ratio: float = Field(
        default=0.26,
        ge=0.0,
        le=3.0,
        description="Spacing between parallel tick marks, in font sizes",
    )


class CanvasConfig(BaseModel):
    """Configuration for the interactive (on-screen) diagram."""

    width: float = Field(default=520.0, gt=0, description="Canvas width in pixels")
    height: float = Field(default=520.0, gt=0, description="Canvas height in pixels")
    font_size: float = Field(default=19.0, gt=0, description="Label font size in pixels")


class StyleConfig(BaseModel):
    """Colours shared by both renderers."""

    given_colour: str = Field(default="#1e40af", description="Label text for given measurements")
    hidden_colour: str = Field(default="#d97706", description="Label text for missing edges")
    revealed_colour: str = Field(default="#065f46", description="Label text for revealed missing edges")
    shape_fill: str = Field(default="#e0e7ff", description="Shape fill colour")
    shape_stroke: str = Field(default="#4f46e5", description="Shape outline colour")
    answer_colour: str = Field(default="#b91c1c", description="Answer text colour")
    level_colours: tuple[str, str, str] = Field(
        default=("#16a34a", "#ca8a04", "#dc2626"),
        description="Header band colours for levels 1-3",
    )


class LayoutConfig(BaseModel):
    """Configuration for the paginated print layout (millimetres)."""

    page_width: float = Field(default=210.0, gt=0, description="Page width (A4)")
    page_height: float = Field(default=297.0, gt=0, description="Page height (A4)")
    margin: float = Field(default=8.0, ge=0, description="Page margin")
    rows: int = Field(default=3, ge=1, le=10, description="Grid rows per page")
    polygon_columns: int = Field(default=3, ge=1, le=10, description="Grid columns for polygon sheets")
    rectilinear_columns: int = Field(default=2, ge=1, le=10, description="Grid columns for rectilinear sheets")
    cell_padding: float = Field(default=4.0, ge=0, description="Padding inside each cell")
    title_height: float = Field(default=7.0, ge=0, description="Height reserved for the cell title")
    answer_height: float = Field(default=7.0, ge=0, description="Height reserved for the answer line")
    band_height: float = Field(default=5.0, ge=0, description="Height of a level header band")
    font_size: float = Field(default=2.3, gt=0, description="Label font size (about 6.5 pt)")
    title: str = Field(default="Find the perimeter in cm", description="Text above every diagram")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class PerimeterSettings(BaseModel):
    """Main application settings."""

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> PerimeterSettings:
    """Get default application settings."""
    return PerimeterSettings()
