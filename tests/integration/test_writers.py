"""Tests for the SVG and PDF writers."""

import random
from pathlib import Path

import pytest

from perimeter.core import QuestionGenerator, WorksheetBuilder, build_diagram, build_layout
from perimeter.domain import DiagramModel, ShapeKind
from perimeter.exceptions import RenderError
from perimeter.io import PdfWriter, SvgWriter, render_svg


@pytest.fixture
def diagram() -> DiagramModel:
    question = QuestionGenerator(rng=random.Random(4)).generate(
        2, shape_key="l_shape", hidden_count=1
    )
    return build_diagram(question, 520.0, 520.0, 19.0)


class TestSvgWriter:
    """Tests for SVG output."""

    def test_document_structure(self, diagram: DiagramModel) -> None:
        """Test the SVG holds the outline, leaders and one pill per label."""
        svg = render_svg(diagram)

        assert svg.startswith("<svg ")
        assert svg.endswith("</svg>")
        assert 'viewBox="0 0 520 520"' in svg
        assert svg.count("<path ") == 1
        assert svg.count("<rect ") == len(diagram.placement)
        assert svg.count('stroke-dasharray="3 3"') == len(diagram.placement)
        assert ">?</text>" in svg

    def test_revealed_labels(self) -> None:
        """Test answer mode draws the missing length instead of '?'."""
        question = QuestionGenerator(rng=random.Random(4)).generate(
            2, shape_key="l_shape", hidden_count=1
        )
        hidden = question.edges[question.hidden_indices[0]]
        svg = render_svg(build_diagram(question, 520.0, 520.0, 19.0, show_answer=True))

        assert ">?</text>" not in svg
        assert f">{hidden.length_cm} cm</text>" in svg

    def test_save(self, diagram: DiagramModel, tmp_path: Path) -> None:
        """Test the writer saves the document."""
        output = SvgWriter().save(diagram, tmp_path / "question.svg")
        assert output.read_text(encoding="utf-8") == render_svg(diagram)

    def test_save_to_missing_directory(self, diagram: DiagramModel, tmp_path: Path) -> None:
        """Test write failures raise RenderError."""
        with pytest.raises(RenderError):
            SvgWriter().save(diagram, tmp_path / "missing" / "question.svg")


class TestPdfWriter:
    """Tests for PDF output."""

    @pytest.fixture
    def layout(self):
        sheet = WorksheetBuilder(rng=random.Random(9)).build(ShapeKind.RECTILINEAR, pages=1, differentiated=True)
        return build_layout(sheet)

    def test_save(self, layout, tmp_path: Path) -> None:
        """Test the writer produces a PDF document."""
        output = PdfWriter().save(layout, tmp_path / "sheet.pdf")

        data = output.read_bytes()
        assert data.startswith(b"%PDF")
        assert b"/Count 2" in data

    def test_save_to_missing_directory(self, layout, tmp_path: Path) -> None:
        """Test write failures raise RenderError."""
        with pytest.raises(RenderError):
            PdfWriter().save(layout, tmp_path / "missing" / "sheet.pdf")
