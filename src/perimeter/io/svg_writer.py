"""SVG writer for on-screen diagrams.

Renders a ``DiagramModel`` as a standalone SVG document: the filled outline,
equal-length tick marks, dashed leader lines and rounded label pills. All
geometry comes from the model; this module only formats it.
"""

from html import escape
from pathlib import Path

from perimeter.config import StyleConfig
from perimeter.domain import DiagramModel, LabelState, PlacedLabel
from perimeter.exceptions import RenderError


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _path_data(diagram: DiagramModel) -> str:
    commands = [f"M {_num(diagram.points[0].x)},{_num(diagram.points[0].y)}"]
    commands.extend(f"L {_num(p.x)},{_num(p.y)}" for p in diagram.points[1:])
    commands.append("Z")
    return " ".join(commands)


def _pill(label: PlacedLabel, font_size: float) -> str:
    min_x, min_y, _, _ = label.bounding_box()
    weight = "700" if label.state != LabelState.GIVEN else "600"
    return (
        f'<g class="label label-{label.state.value}">'
        f'<rect x="{_num(min_x)}" y="{_num(min_y)}" width="{_num(label.width)}" '
        f'height="{_num(label.height)}" rx="{_num(label.height / 2)}" '
        f'fill="#ffffff" stroke="{label.colour}" stroke-width="1"/>'
        f'<text x="{_num(label.anchor.x)}" y="{_num(label.anchor.y)}" '
        f'font-size="{_num(font_size)}" font-weight="{weight}" fill="{label.colour}" '
        f'text-anchor="middle" dominant-baseline="central">{escape(label.text)}</text>'
        f"</g>"
    )


def render_svg(diagram: DiagramModel, style: StyleConfig | None = None) -> str:
    """Render a diagram as an SVG document string.

    Args:
        diagram: Diagram model (canvas coordinates)
        style: Colours (defaults if None)

    Returns:
        SVG document
    """
    style = style or StyleConfig()
    width, height = _num(diagram.width), _num(diagram.height)
    ox, oy = _num(diagram.origin.x), _num(diagram.origin.y)

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{ox} {oy} {width} {height}" '
        f'width="{width}" height="{height}" font-family="sans-serif">',
        f'<path d="{_path_data(diagram)}" fill="{style.shape_fill}" stroke="{style.shape_stroke}" '
        f'stroke-width="2" stroke-linejoin="round"/>',
    ]

    for tick in diagram.ticks:
        for start, end in tick.segments:
            parts.append(
                f'<line x1="{_num(start.x)}" y1="{_num(start.y)}" x2="{_num(end.x)}" y2="{_num(end.y)}" '
                f'stroke="{style.shape_stroke}" stroke-width="1.5"/>'
            )

    for label in diagram.placement.labels:
        start, end = label.leader
        parts.append(
            f'<line x1="{_num(start.x)}" y1="{_num(start.y)}" x2="{_num(end.x)}" y2="{_num(end.y)}" '
            f'stroke="{label.colour}" stroke-width="1" stroke-dasharray="3 3"/>'
        )

    parts.extend(_pill(label, diagram.font_size) for label in diagram.placement.labels)
    parts.append("</svg>")
    return "\n".join(parts)


class SvgWriter:
    """Writes single-question diagrams to SVG files.

    Example:
        SvgWriter().save(diagram, Path("question.svg"))
    """

    def __init__(self, style: StyleConfig | None = None) -> None:
        self.style = style or StyleConfig()

    def save(self, diagram: DiagramModel, output_path: Path) -> Path:
        """Write the diagram to ``output_path``.

        Raises:
            RenderError: If the file cannot be written
        """
        try:
            output_path.write_text(render_svg(diagram, self.style), encoding="utf-8")
        except OSError as e:
            raise RenderError(str(output_path), str(e)) from e
        return output_path
