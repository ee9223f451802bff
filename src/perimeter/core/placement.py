"""Label placement engine for measurement pills.

This module positions one pill per labelled edge:
- Each label gets three candidate anchors at its standoff from the edge
  midpoint: straight out along the outward normal, and the normal rotated by
  +45 and -45 degrees
- Two pills are compared by the gap between their bounding boxes
- The chosen assignment maximizes the smallest gap over all label pairs

For up to ``max_exhaustive_labels`` labels (every catalogue shape) the 3^m
assignments are searched depth first with branch pruning, so the result is the
exact max-min optimum. Larger label counts use a deterministic improvement
search from several starts instead.

Key classes:
- LabelPlacer: Builds candidates and chooses the placement
"""

import itertools
import math

import structlog

from perimeter.config import PlacementConfig
from perimeter.core.geometry import rotate
from perimeter.domain import LabelCandidate, LabelState, PlacedLabel, Placement, Point
from perimeter.exceptions import PlacementError

logger = structlog.get_logger(__name__)

CANDIDATE_ANGLES = (0.0, math.pi / 4, -math.pi / 4)


def pill_size(text: str, font_size: float, config: PlacementConfig) -> tuple[float, float]:
    """Rendered (width, height) of a pill holding ``text``."""
    width = len(text) * font_size * config.char_width_ratio + 2 * font_size * config.pill_pad_ratio
    height = font_size * config.pill_height_ratio
    return width, height


def candidate_anchors(midpoint: Point, normal: tuple[float, float], standoff: float) -> tuple[Point, ...]:
    """Anchor points at ``standoff`` from the midpoint.

    Returns:
        Perpendicular-outward anchor, then the +45 and -45 degree rotations
    """
    anchors = []
    for angle in CANDIDATE_ANGLES:
        dx, dy = rotate(normal, angle)
        anchors.append(Point(midpoint.x + dx * standoff, midpoint.y + dy * standoff))
    return tuple(anchors)


def rect_gap(
    a: Point, a_width: float, a_height: float, b: Point, b_width: float, b_height: float
) -> float:
    """Gap between two axis-aligned boxes given by centre and size.

    Returns:
        0 when the boxes overlap; the separating axis gap when they overlap on
        the other axis; otherwise the Euclidean distance between nearest
        corners
    """
    dx = abs(a.x - b.x) - (a_width + b_width) / 2
    dy = abs(a.y - b.y) - (a_height + b_height) / 2
    if dx < 0 and dy < 0:
        return 0.0
    if dx < 0:
        return dy
    if dy < 0:
        return dx
    return math.hypot(dx, dy)


class LabelPlacer:
    """Chooses one anchor per label, maximizing the worst pairwise gap."""

    def __init__(self, config: PlacementConfig | None = None) -> None:
        """Initialize label placer with configuration.

        Args:
            config: Placement configuration (defaults if None)
        """
        self.config = config or PlacementConfig()

    def build_candidate(
        self,
        edge_index: int,
        text: str,
        midpoint: Point,
        normal: tuple[float, float],
        standoff: float,
        font_size: float,
        state: LabelState = LabelState.GIVEN,
        colour: str = "#1e40af",
    ) -> LabelCandidate:
        """Create the candidate set for one labelled edge."""
        width, height = pill_size(text, font_size, self.config)
        return LabelCandidate(
            edge_index=edge_index,
            text=text,
            anchors=candidate_anchors(midpoint, normal, standoff),
            width=width,
            height=height,
            midpoint=midpoint,
            standoff=standoff,
            state=state,
            colour=colour,
        )

    def place(self, candidates: list[LabelCandidate]) -> Placement:
        """Choose an anchor for every label.

        Args:
            candidates: One candidate set per label

        Returns:
            Placement with the chosen anchors and leader lines

        Raises:
            PlacementError: If a label has no anchors
        """
        if not candidates:
            return Placement()

        for candidate in candidates:
            if not candidate.anchors:
                raise PlacementError(f"label for edge {candidate.edge_index} has no anchors")

        gaps = self._gap_table(candidates)

        if len(candidates) <= self.config.max_exhaustive_labels:
            choices, score = self._exhaustive(candidates, gaps)
            exhaustive = True
        else:
            logger.debug(
                "Label count above exhaustive bound, using local search",
                labels=len(candidates),
                bound=self.config.max_exhaustive_labels,
            )
            choices, score = self._local_search(candidates, gaps)
            exhaustive = False

        labels = tuple(
            PlacedLabel(
                edge_index=c.edge_index,
                text=c.text,
                anchor=c.anchors[choice],
                leader_start=c.midpoint,
                width=c.width,
                height=c.height,
                state=c.state,
                colour=c.colour,
                candidate_index=choice,
            )
            for c, choice in zip(candidates, choices)
        )
        return Placement(labels=labels, choices=choices, min_separation=score, exhaustive=exhaustive)

    @staticmethod
    def _gap_table(candidates: list[LabelCandidate]) -> dict[tuple[int, int], list[list[float]]]:
        """Pairwise gaps for every (label a, label b) and (anchor a, anchor b)."""
        table: dict[tuple[int, int], list[list[float]]] = {}
        for a, b in itertools.combinations(range(len(candidates)), 2):
            ca, cb = candidates[a], candidates[b]
            table[(a, b)] = [
                [rect_gap(pa, ca.width, ca.height, pb, cb.width, cb.height) for pb in cb.anchors]
                for pa in ca.anchors
            ]
        return table

    @staticmethod
    def score(
        choices: tuple[int, ...] | list[int],
        gaps: dict[tuple[int, int], list[list[float]]],
        floor: float = -math.inf,
    ) -> float:
        """Smallest pairwise gap of an assignment.

        Stops early once the running minimum drops to ``floor``; the returned
        value is then only known to be at most ``floor``.
        """
        worst = math.inf
        for (a, b), table in gaps.items():
            gap = table[choices[a]][choices[b]]
            if gap < worst:
                worst = gap
                if worst <= floor:
                    break
        return worst

    def _exhaustive(
        self,
        candidates: list[LabelCandidate],
        gaps: dict[tuple[int, int], list[list[float]]],
    ) -> tuple[tuple[int, ...], float]:
        """Depth-first search over every assignment, in product order.

        A branch is cut as soon as its partial minimum cannot beat the best
        complete assignment, so the first assignment reaching the optimum wins.
        """
        count = len(candidates)
        choices = [0] * count
        best: tuple[int, ...] = tuple(choices)
        best_score = -math.inf

        def descend(depth: int, partial: float) -> None:
            nonlocal best, best_score
            if depth == count:
                best, best_score = tuple(choices), partial
                return
            for option in range(len(candidates[depth].anchors)):
                current = partial
                for prev in range(depth):
                    gap = gaps[(prev, depth)][choices[prev]][option]
                    if gap < current:
                        current = gap
                        if current <= best_score:
                            break
                if current <= best_score:
                    continue
                choices[depth] = option
                descend(depth + 1, current)

        descend(0, math.inf)
        return best, best_score

    def _local_search(
        self,
        candidates: list[LabelCandidate],
        gaps: dict[tuple[int, int], list[list[float]]],
    ) -> tuple[tuple[int, ...], float]:
        """Improve from each uniform start by moving one label or the tightest pair."""
        best: tuple[int, ...] = tuple(0 for _ in candidates)
        best_score = -math.inf
        for start in range(max(len(c.anchors) for c in candidates)):
            choices = tuple(min(start, len(c.anchors) - 1) for c in candidates)
            choices, score = self._improve(candidates, gaps, choices)
            if score > best_score:
                best, best_score = choices, score
        return best, best_score

    def _improve(
        self,
        candidates: list[LabelCandidate],
        gaps: dict[tuple[int, int], list[list[float]]],
        choices: tuple[int, ...],
    ) -> tuple[tuple[int, ...], float]:
        current = self.score(choices, gaps)
        for _ in range(self.config.local_search_passes):
            a, b = min(gaps, key=lambda pair: gaps[pair][choices[pair[0]]][choices[pair[1]]])
            trials = [
                tuple(option if k == i else c for k, c in enumerate(choices))
                for i, candidate in enumerate(candidates)
                for option in range(len(candidate.anchors))
                if option != choices[i]
            ]
            trials.extend(
                tuple(oa if k == a else ob if k == b else c for k, c in enumerate(choices))
                for oa in range(len(candidates[a].anchors))
                for ob in range(len(candidates[b].anchors))
            )
            trial, score = max(((t, self.score(t, gaps)) for t in trials), key=lambda item: item[1])
            if score <= current:
                break
            choices, current = trial, score
        return choices, current
