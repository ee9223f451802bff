"""Document I/O layer for perimeter.

This module turns diagram and layout models into files. Writers contain no
geometry: everything they draw comes from ``DiagramModel`` or ``PrintLayout``.

Key classes:
- SvgWriter: Single-question diagram as SVG
- PdfWriter: Paginated worksheet as PDF (reportlab)
"""

from perimeter.io.pdf_writer import PdfWriter
from perimeter.io.svg_writer import SvgWriter, render_svg

__all__ = [
    "PdfWriter",
    "SvgWriter",
    "render_svg",
]
