"""PDF writer for printed worksheets.

A thin reportlab binding over ``PrintLayout``. The layout is in millimetres with
the y axis pointing down; reportlab works in points with the y axis pointing
up, so every coordinate goes through ``_x``/``_y`` before drawing.
"""

from pathlib import Path

from reportlab.lib.colors import HexColor, white
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as pdf_canvas

from perimeter.config import StyleConfig
from perimeter.core.layout import Cell, HeaderBand, Page, PrintLayout
from perimeter.domain import DiagramModel, LabelState
from perimeter.exceptions import RenderError

TITLE_SCALE = 1.3
BASELINE_SHIFT = 0.35


class PdfWriter:
    """Writes a print layout to a PDF document.

    Example:
        layout = build_layout(worksheet)
        PdfWriter().save(layout, Path("sheet.pdf"))
    """

    def __init__(self, style: StyleConfig | None = None) -> None:
        self.style = style or StyleConfig()
        self._page_height = 0.0

    def save(self, layout: PrintLayout, output_path: Path) -> Path:
        """Draw every page of the layout and write the document.

        Args:
            layout: Print layout (question pass, then answer pass)
            output_path: Destination PDF file

        Returns:
            The output path

        Raises:
            RenderError: If the document cannot be written
        """
        self._page_height = layout.page_height
        canvas = pdf_canvas.Canvas(
            str(output_path), pagesize=(layout.page_width * mm, layout.page_height * mm)
        )
        canvas.setTitle("Perimeter worksheet")

        for page in layout.pages:
            self._draw_page(canvas, page, layout)
            canvas.showPage()

        try:
            canvas.save()
        except OSError as e:
            raise RenderError(str(output_path), str(e)) from e
        return output_path

    def _x(self, x: float) -> float:
        return x * mm

    def _y(self, y: float) -> float:
        return (self._page_height - y) * mm

    def _draw_page(self, canvas: pdf_canvas.Canvas, page: Page, layout: PrintLayout) -> None:
        font_size = layout.font_size
        if page.answers:
            canvas.setFont("Helvetica-Bold", font_size * mm)
            canvas.setFillColor(HexColor(self.style.answer_colour))
            canvas.drawString(self._x(layout.margin), self._y(layout.margin * 0.6), "Answers")

        for band in page.bands:
            self._draw_band(canvas, band, font_size)
        for cell in page.cells:
            self._draw_cell(canvas, cell, font_size)

    def _draw_band(self, canvas: pdf_canvas.Canvas, band: HeaderBand, font_size: float) -> None:
        canvas.setFillColor(HexColor(band.colour))
        canvas.roundRect(
            self._x(band.x),
            self._y(band.y + band.height),
            band.width * mm,
            band.height * mm,
            band.height * mm / 4,
            stroke=0,
            fill=1,
        )
        canvas.setFillColor(white)
        canvas.setFont("Helvetica-Bold", font_size * mm)
        canvas.drawString(
            self._x(band.x + font_size),
            self._y(band.y + band.height / 2 + font_size * BASELINE_SHIFT),
            band.text,
        )

    def _draw_cell(self, canvas: pdf_canvas.Canvas, cell: Cell, font_size: float) -> None:
        canvas.setFillColor(HexColor("#111827"))
        canvas.setFont("Helvetica-Bold", font_size * TITLE_SCALE * mm)
        canvas.drawString(self._x(cell.x + font_size), self._y(cell.title_y), cell.title)

        self._draw_diagram(canvas, cell.diagram)

        if cell.answer is not None and cell.answer_y is not None:
            canvas.setFillColor(HexColor(self.style.answer_colour))
            canvas.setFont("Helvetica-Bold", font_size * TITLE_SCALE * mm)
            canvas.drawCentredString(
                self._x(cell.x + cell.width / 2), self._y(cell.answer_y), f"Perimeter = {cell.answer}"
            )

    def _draw_diagram(self, canvas: pdf_canvas.Canvas, diagram: DiagramModel) -> None:
        path = canvas.beginPath()
        first, *rest = diagram.points
        path.moveTo(self._x(first.x), self._y(first.y))
        for point in rest:
            path.lineTo(self._x(point.x), self._y(point.y))
        path.close()

        canvas.setLineWidth(0.6)
        canvas.setStrokeColor(HexColor(self.style.shape_stroke))
        canvas.setFillColor(HexColor(self.style.shape_fill))
        canvas.drawPath(path, stroke=1, fill=1)

        canvas.setLineWidth(0.5)
        for tick in diagram.ticks:
            for start, end in tick.segments:
                canvas.line(self._x(start.x), self._y(start.y), self._x(end.x), self._y(end.y))

        canvas.setLineWidth(0.3)
        canvas.setDash(1.5, 1.5)
        for label in diagram.placement.labels:
            start, end = label.leader
            canvas.setStrokeColor(HexColor(label.colour))
            canvas.line(self._x(start.x), self._y(start.y), self._x(end.x), self._y(end.y))
        canvas.setDash()

        for label in diagram.placement.labels:
            min_x, _, _, max_y = label.bounding_box()
            canvas.setStrokeColor(HexColor(label.colour))
            canvas.setFillColor(white)
            canvas.roundRect(
                self._x(min_x),
                self._y(max_y),
                label.width * mm,
                label.height * mm,
                label.height * mm / 2,
                stroke=1,
                fill=1,
            )
            font = "Helvetica" if label.state == LabelState.GIVEN else "Helvetica-Bold"
            canvas.setFont(font, diagram.font_size * mm)
            canvas.setFillColor(HexColor(label.colour))
            canvas.drawCentredString(
                self._x(label.anchor.x),
                self._y(label.anchor.y + diagram.font_size * BASELINE_SHIFT),
                label.text,
            )
