"""Exception hierarchy for Perimeter."""


class PerimeterError(Exception):
    """Base exception for all Perimeter errors."""

    pass


class CatalogueError(PerimeterError):
    """Errors in the shape catalogue.

    These indicate an authoring bug (unknown shape, empty pool) rather than a
    runtime condition, and are never caught inside the generator.
    """

    pass


class UnknownShapeError(CatalogueError):
    """Requested shape key is not in the catalogue."""

    def __init__(self, shape_key: str) -> None:
        self.shape_key = shape_key
        super().__init__(f"Shape '{shape_key}' not found in catalogue")


class EmptyPoolError(CatalogueError):
    """No catalogue shape matches the requested level and kind."""

    def __init__(self, level: int, kind: str | None) -> None:
        self.level = level
        self.kind = kind
        super().__init__(f"No shapes available for level {level} (kind={kind or 'any'})")


class GeometryError(PerimeterError):
    """Errors in geometric calculations."""

    pass


class ProjectionError(GeometryError):
    """Target canvas cannot hold the shape and its label margins."""

    def __init__(self, width: float, height: float, reason: str) -> None:
        self.width = width
        self.height = height
        self.reason = reason
        super().__init__(f"Cannot project onto {width:g} x {height:g} canvas: {reason}")


class PlacementError(PerimeterError):
    """Malformed input to the label placement engine."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Label placement failed: {reason}")


class LayoutError(PerimeterError):
    """Errors while partitioning a worksheet into pages."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Worksheet layout failed: {reason}")


class RenderError(PerimeterError):
    """Error writing a diagram or worksheet document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write '{path}': {reason}")
