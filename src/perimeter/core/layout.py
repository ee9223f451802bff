"""Print layout: partition a worksheet into A4 pages.

The layout is a pure model in page units (millimetres, y axis pointing down).
It holds a question pass followed by an answer pass over the same questions;
the answer pass reveals missing and converted edges and prints the answer
under each diagram. The PDF writer only draws what the layout holds.

Each page is a grid of cells. A cell reserves padding, a title line and, on
the answer pass, an answer line; the diagram is projected into what remains.
Differentiated worksheets reserve a header band above every row and fill it
at the row where a level's first question sits, from that question's column to
the right margin.
"""

from dataclasses import dataclass

import structlog

from perimeter.config import LayoutConfig, PlacementConfig, StyleConfig
from perimeter.core.diagram import build_diagram
from perimeter.core.worksheet import Worksheet
from perimeter.domain import DiagramModel, Point, Question
from perimeter.exceptions import LayoutError, ProjectionError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HeaderBand:
    """Coloured band announcing the start of a level block."""

    level: int
    text: str
    colour: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Cell:
    """One question slot on a page.

    Attributes:
        number: 1-based question number on the worksheet
        level: Question level
        row: Grid row on the page
        column: Grid column on the page
        x: Left edge of the cell
        y: Top edge of the cell
        width: Cell width
        height: Cell height
        title: Text above the diagram
        title_y: Baseline of the title
        diagram: Projected diagram in page coordinates
        answer: Answer text (answer pass only)
        answer_y: Baseline of the answer line (answer pass only)
    """

    number: int
    level: int
    row: int
    column: int
    x: float
    y: float
    width: float
    height: float
    title: str
    title_y: float
    diagram: DiagramModel
    answer: str | None = None
    answer_y: float | None = None


@dataclass(frozen=True)
class Page:
    """One printed page."""

    number: int
    cells: tuple[Cell, ...]
    bands: tuple[HeaderBand, ...]
    answers: bool


@dataclass(frozen=True)
class PrintLayout:
    """Every page of a worksheet: question pass, then answer pass.

    Attributes:
        pages: Question pages followed by answer pages
        page_width: Page width
        page_height: Page height
        font_size: Label font size
        margin: Page margin
    """

    pages: tuple[Page, ...]
    page_width: float
    page_height: float
    font_size: float
    margin: float

    @property
    def question_pages(self) -> tuple[Page, ...]:
        return tuple(p for p in self.pages if not p.answers)

    @property
    def answer_pages(self) -> tuple[Page, ...]:
        return tuple(p for p in self.pages if p.answers)


class LayoutBuilder:
    """Partitions worksheets into pages of cells.

    Example:
        layout = LayoutBuilder(LayoutConfig()).build(worksheet)
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        placement_config: PlacementConfig | None = None,
        style: StyleConfig | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.placement_config = placement_config or PlacementConfig()
        self.style = style or StyleConfig()

    def build(self, worksheet: Worksheet) -> PrintLayout:
        """Lay out a worksheet.

        Args:
            worksheet: Question batch

        Returns:
            Print layout with the question pass followed by the answer pass

        Raises:
            LayoutError: If the worksheet is empty or a cell cannot hold its
                diagram
        """
        if not worksheet.questions:
            raise LayoutError("worksheet has no questions")

        question_pages = self._pass(worksheet, answers=False, first_page=1)
        answer_pages = self._pass(worksheet, answers=True, first_page=len(question_pages) + 1)

        logger.debug(
            "Worksheet laid out",
            questions=len(worksheet.questions),
            question_pages=len(question_pages),
            answer_pages=len(answer_pages),
        )

        return PrintLayout(
            pages=question_pages + answer_pages,
            page_width=self.config.page_width,
            page_height=self.config.page_height,
            font_size=self.config.font_size,
            margin=self.config.margin,
        )

    def band_rows(self, worksheet: Worksheet) -> dict[int, int]:
        """Map of question index to level for questions that open a level block."""
        if not worksheet.differentiated:
            return {}
        return {index: level for level, index in worksheet.level_starts().items()}

    def _pass(self, worksheet: Worksheet, answers: bool, first_page: int) -> tuple[Page, ...]:
        cfg = self.config
        band = cfg.band_height if worksheet.differentiated else 0.0
        usable_w = cfg.page_width - 2 * cfg.margin
        usable_h = cfg.page_height - 2 * cfg.margin
        cell_w = usable_w / worksheet.columns
        cell_h = usable_h / worksheet.rows - band
        if cell_w <= 0 or cell_h <= 0:
            raise LayoutError(f"page grid {worksheet.columns}x{worksheet.rows} leaves no room for cells")

        openers = self.band_rows(worksheet)
        per_page = worksheet.per_page
        pages = []

        for page_index in range(worksheet.pages):
            chunk = worksheet.questions[page_index * per_page : (page_index + 1) * per_page]
            cells = []
            bands = []
            for slot, question in enumerate(chunk):
                index = page_index * per_page + slot
                row, column = divmod(slot, worksheet.columns)
                slot_y = cfg.margin + row * (cell_h + band)
                x = cfg.margin + column * cell_w
                y = slot_y + band

                if index in openers:
                    level = openers[index]
                    bands.append(
                        HeaderBand(
                            level=level,
                            text=f"Level {level}",
                            colour=self.style.level_colours[level - 1],
                            x=x,
                            y=slot_y,
                            width=usable_w - column * cell_w,
                            height=band,
                        )
                    )

                cells.append(self._cell(index, question, row, column, x, y, cell_w, cell_h, answers))

            pages.append(
                Page(number=first_page + page_index, cells=tuple(cells), bands=tuple(bands), answers=answers)
            )

        return tuple(pages)

    def _cell(
        self,
        index: int,
        question: Question,
        row: int,
        column: int,
        x: float,
        y: float,
        width: float,
        height: float,
        answers: bool,
    ) -> Cell:
        cfg = self.config
        reserve = cfg.answer_height if answers else 0.0
        diagram_w = width - 2 * cfg.cell_padding
        diagram_h = height - 2 * cfg.cell_padding - cfg.title_height - reserve
        if diagram_w <= 0 or diagram_h <= 0:
            raise LayoutError(f"cell for question {index + 1} leaves no room for the diagram")

        origin = Point(x + cfg.cell_padding, y + cfg.cell_padding + cfg.title_height)
        try:
            diagram = build_diagram(
                question,
                diagram_w,
                diagram_h,
                cfg.font_size,
                show_answer=answers,
                origin=origin,
                placement_config=self.placement_config,
                style=self.style,
            )
        except ProjectionError as e:
            raise LayoutError(f"question {index + 1} does not fit its cell: {e}") from e

        return Cell(
            number=index + 1,
            level=question.level,
            row=row,
            column=column,
            x=x,
            y=y,
            width=width,
            height=height,
            title=f"{index + 1}. {cfg.title}",
            title_y=y + cfg.cell_padding + cfg.title_height * 0.7,
            diagram=diagram,
            answer=question.answer if answers else None,
            answer_y=origin.y + diagram_h + reserve * 0.7 if answers else None,
        )


def build_layout(
    worksheet: Worksheet,
    config: LayoutConfig | None = None,
    placement_config: PlacementConfig | None = None,
    style: StyleConfig | None = None,
) -> PrintLayout:
    """Lay out a worksheet with the given (or default) configuration."""
    return LayoutBuilder(config, placement_config, style).build(worksheet)
