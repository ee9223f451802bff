"""Worksheet batches: many questions for one printed sheet.

A worksheet is a batch of ``pages * per_page`` questions of one kind:
- Polygon sheets hold 3 x 3 questions per page, rectilinear sheets 2 x 3
- A single-level batch draws every question at that level
- A differentiated batch takes a third of its questions from each level,
  grouped in level order so each level starts a new block on the sheet

Duplicate questions (equal ``config_key``) are re-generated up to
``uniqueness_attempts`` times; after that the duplicate is accepted and logged.
"""

import random
from dataclasses import dataclass
from typing import Any

import structlog

from perimeter.config import GenerationConfig, LayoutConfig
from perimeter.core.catalogue import LEVELS
from perimeter.core.generator import QuestionGenerator, pick_polygon_keys, pick_template_keys
from perimeter.domain import Question, ShapeKind
from perimeter.utils import GenerationLogger


@dataclass(frozen=True)
class Worksheet:
    """A batch of questions laid out on a fixed grid.

    Attributes:
        kind: Polygon or rectilinear sheet
        questions: Questions in reading order
        columns: Grid columns per page
        rows: Grid rows per page
        differentiated: Questions span every level, grouped in level order
    """

    kind: ShapeKind
    questions: tuple[Question, ...]
    columns: int
    rows: int
    differentiated: bool = False

    @property
    def per_page(self) -> int:
        """Questions per page."""
        return self.columns * self.rows

    @property
    def pages(self) -> int:
        """Number of pages needed for the question pass."""
        return -(-len(self.questions) // self.per_page)

    def level_starts(self) -> dict[int, int]:
        """Index of the first question of every level present."""
        starts: dict[int, int] = {}
        for i, question in enumerate(self.questions):
            starts.setdefault(question.level, i)
        return starts

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "kind": self.kind.value,
            "columns": self.columns,
            "rows": self.rows,
            "differentiated": self.differentiated,
            "questions": [q.to_dict() for q in self.questions],
        }


def split_levels(count: int) -> list[int]:
    """Level of each question in a differentiated batch of ``count``.

    Each level gets a third; any remainder goes to the lowest levels.

    Examples:
        >>> split_levels(6)
        [1, 1, 2, 2, 3, 3]
        >>> split_levels(4)
        [1, 1, 2, 3]
    """
    share, extra = divmod(count, len(LEVELS))
    levels: list[int] = []
    for i, level in enumerate(LEVELS):
        levels.extend([level] * (share + (1 if i < extra else 0)))
    return levels


class WorksheetBuilder:
    """Builds question batches for printed worksheets.

    Example:
        builder = WorksheetBuilder(rng=random.Random(3))
        sheet = builder.build(ShapeKind.POLYGON, level=1, pages=2)
    """

    def __init__(
        self,
        config: GenerationConfig | None = None,
        layout: LayoutConfig | None = None,
        rng: random.Random | None = None,
        generation_logger: GenerationLogger | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Generation configuration (defaults if None)
            layout: Page grid configuration (defaults if None)
            rng: Random source shared with the question generator
            generation_logger: Statistics collector (a fresh one if None)
        """
        self.config = config or GenerationConfig()
        self.layout = layout or LayoutConfig()
        self.rng = rng or random.Random()
        self.generation_logger = generation_logger or GenerationLogger(structlog.get_logger(__name__))
        self.generator = QuestionGenerator(self.config, self.rng, tracker=self.generation_logger)

    def grid(self, kind: ShapeKind) -> tuple[int, int]:
        """(columns, rows) of the page grid for a sheet kind."""
        if kind == ShapeKind.POLYGON:
            return self.layout.polygon_columns, self.layout.rows
        return self.layout.rectilinear_columns, self.layout.rows

    def build(
        self,
        kind: ShapeKind,
        level: int | None = None,
        pages: int = 1,
        differentiated: bool = False,
    ) -> Worksheet:
        """Build a worksheet batch.

        Args:
            kind: Polygon or rectilinear sheet
            level: Level of every question (ignored when differentiated)
            pages: Pages in the question pass
            differentiated: Take a third of the questions from each level

        Returns:
            Worksheet with ``pages * per_page`` questions

        Raises:
            ValueError: If pages < 1, or level is missing or out of range
        """
        if pages < 1:
            raise ValueError(f"Page count must be at least 1, got {pages}")
        if not differentiated and level not in LEVELS:
            raise ValueError(f"Level must be one of {LEVELS}, got {level}")

        columns, rows = self.grid(kind)
        count = pages * columns * rows
        levels = split_levels(count) if differentiated else [level] * count

        if kind == ShapeKind.POLYGON:
            keys = pick_polygon_keys(levels, self.rng, self.config.max_per_family)
        else:
            keys = pick_template_keys(count, self.rng)

        seen: set[tuple[Any, ...]] = set()
        questions = []
        for question_level, key in zip(levels, keys):
            question = self._unique_question(question_level, key, seen)
            seen.add(question.config_key)
            questions.append(question)
            self.generation_logger.log_question(key, question_level, question.perimeter)

        return Worksheet(
            kind=kind,
            questions=tuple(questions),
            columns=columns,
            rows=rows,
            differentiated=differentiated,
        )

    def _unique_question(self, level: int, key: str, seen: set[tuple[Any, ...]]) -> Question:
        question = self.generator.generate(level, shape_key=key)
        attempts = 0
        while question.config_key in seen and attempts < self.config.uniqueness_attempts:
            attempts += 1
            self.generation_logger.log_retry(key, attempts)
            question = self.generator.generate(level, shape_key=key)
        if question.config_key in seen:
            self.generation_logger.log_duplicate_accepted(key, attempts)
        return question
