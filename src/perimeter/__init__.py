"""Perimeter - procedural "find the perimeter" questions with diagrams.

Perimeter generates polygon and rectilinear outlines, assigns (and sometimes
hides or converts) their edge measurements, places collision-free measurement
labels around the edges and projects the result onto any canvas, so that the
same geometric model can be drawn on screen or tiled onto printable worksheets.

Example:
    $ perimeter question --level 2 --kind rectilinear --svg question.svg

    $ perimeter worksheet --kind polygon --pages 2 --differentiated -o sheet.pdf
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
