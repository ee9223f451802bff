"""Core algorithms for perimeter.

This module contains the core algorithms for:

- Geometry operations (signed area, point-in-polygon, outward normals)
- Shape catalogue and question generation (rejection sampling, fallbacks)
- Measurement model (missing edges, unit conversion, working steps)
- Label placement (candidate anchors, max-min separation search)
- Diagram projection and the shared diagram model
- Worksheet batches and the print layout

Everything except the generator's random source is pure: identical inputs
give identical outputs.

Key functions:
- project: Fit an outline and its labels onto a canvas
- build_diagram: Build the renderer-independent diagram of a question
- build_layout: Partition a worksheet into pages

Key classes:
- QuestionGenerator: Generates one question per call
- LabelPlacer: Chooses label anchors
- WorksheetBuilder: Builds question batches
- LayoutBuilder: Builds the print layout
"""

from perimeter.core.catalogue import (
    LEVELS,
    all_definitions,
    get_definition,
    level_pool,
)
from perimeter.core.diagram import build_diagram
from perimeter.core.generator import (
    QuestionGenerator,
    is_valid_isosceles,
    pick_polygon_keys,
    pick_template_keys,
)
from perimeter.core.geometry import (
    centroid,
    outward_normal,
    point_in_polygon,
    signed_area,
)
from perimeter.core.layout import Cell, HeaderBand, LayoutBuilder, Page, PrintLayout, build_layout
from perimeter.core.measurement import display_to_cm, format_length
from perimeter.core.placement import LabelPlacer, rect_gap
from perimeter.core.projector import project
from perimeter.core.worksheet import Worksheet, WorksheetBuilder

__all__ = [
    "LEVELS",
    # Layout classes
    "Cell",
    "HeaderBand",
    # Placement classes
    "LabelPlacer",
    "LayoutBuilder",
    "Page",
    "PrintLayout",
    # Generator classes
    "QuestionGenerator",
    # Worksheet classes
    "Worksheet",
    "WorksheetBuilder",
    # Catalogue functions
    "all_definitions",
    # Diagram functions
    "build_diagram",
    "build_layout",
    # Geometry functions
    "centroid",
    # Measurement functions
    "display_to_cm",
    "format_length",
    "get_definition",
    "is_valid_isosceles",
    "level_pool",
    "outward_normal",
    "pick_polygon_keys",
    "pick_template_keys",
    "point_in_polygon",
    "project",
    "rect_gap",
    "signed_area",
]
