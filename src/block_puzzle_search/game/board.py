from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .placement import ANCHORS, BOARD_SIZE, parse_placement
from .rules import ScoringRules
from .shapes import Shape


Coordinate = Tuple[int, int]


@dataclass(frozen=True, eq=False)
class _AnchorTable:
    """Precomputed flat cell indices of one shape at every in-bounds anchor."""

    anchors: Tuple[Coordinate, ...]
    indices: np.ndarray  # (len(anchors), shape.cells)
    by_anchor: Dict[Coordinate, np.ndarray]


@lru_cache(maxsize=None)
def _anchor_table(shape: Shape) -> _AnchorTable:
    anchors: List[Coordinate] = []
    rows: List[List[int]] = []
    for x, y in ANCHORS:
        if x + shape.width > BOARD_SIZE or y + shape.height > BOARD_SIZE:
            continue
        anchors.append((x, y))
        rows.append([(y + dy) * BOARD_SIZE + (x + dx) for dx, dy in shape.offsets])
    indices = np.array(rows, dtype=np.intp).reshape(len(anchors), shape.cells)
    indices.setflags(write=False)
    by_anchor = {anchor: indices[i] for i, anchor in enumerate(anchors)}
    return _AnchorTable(anchors=tuple(anchors), indices=indices, by_anchor=by_anchor)


class Board:
    """8x8 occupancy grid with placement, line clearing and scoring.

    Cells live in a flat boolean array (index ``y * 8 + x``) so that
    :meth:`copy` is a single small allocation. Placements never raise: an
    out-of-bounds, overlapping or malformed placement returns ``False`` and
    leaves the board untouched.
    """

    size = BOARD_SIZE

    def __init__(self, rules: Optional[ScoringRules] = None) -> None:
        self.rules = rules or ScoringRules()
        self.cells = np.zeros(BOARD_SIZE * BOARD_SIZE, dtype=np.bool_)
        self.score = 0
        self.lines_cleared = 0
        self.shapes_placed = 0

    @classmethod
    def from_rows(cls, rows: Sequence[str], rules: Optional[ScoringRules] = None) -> "Board":
        """Build a board from 8 strings, ``#``/``X`` occupied and anything else free.

        The first string is row ``1`` (y = 0).
        """
        if len(rows) != BOARD_SIZE or any(len(r) != BOARD_SIZE for r in rows):
            raise ValueError(f"expected {BOARD_SIZE} rows of {BOARD_SIZE} characters")
        board = cls(rules)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                board.set_cell(x, y, ch in "#X")
        return board

    # Grid access ------------------------------------------------------
    @property
    def grid(self) -> np.ndarray:
        """``[y, x]`` view of the cells."""
        return self.cells.reshape(BOARD_SIZE, BOARD_SIZE)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE

    def cell(self, x: int, y: int) -> bool:
        return bool(self.cells[y * BOARD_SIZE + x])

    def set_cell(self, x: int, y: int, value: bool = True) -> None:
        """Set a cell directly. Setup helper: no scoring, no line clearing."""
        self.cells[y * BOARD_SIZE + x] = bool(value)

    @property
    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def get_filled_ratio(self) -> float:
        return self.filled_count / float(BOARD_SIZE * BOARD_SIZE)

    # Placement --------------------------------------------------------
    def can_place(self, shape: Shape, x: int, y: int) -> bool:
        idx = _anchor_table(shape).by_anchor.get((x, y))
        return idx is not None and not self.cells[idx].any()

    def place_at(self, shape: Shape, x: int, y: int) -> bool:
        idx = _anchor_table(shape).by_anchor.get((x, y))
        if idx is None or self.cells[idx].any():
            return False
        self.cells[idx] = True
        lines = self._clear_full_lines()
        self.score += self.rules.score_for(shape.cells, lines)
        self.lines_cleared += lines
        self.shapes_placed += 1
        return True

    def try_place(self, shape: Shape, placement: str) -> bool:
        anchor = parse_placement(placement)
        if anchor is None:
            return False
        return self.place_at(shape, *anchor)

    def _clear_full_lines(self) -> int:
        grid = self.grid
        # Both masks come from the post-placement state, so clears are simultaneous
        full_rows = grid.all(axis=1)
        full_cols = grid.all(axis=0)
        lines = int(np.count_nonzero(full_rows)) + int(np.count_nonzero(full_cols))
        if lines:
            grid[full_rows, :] = False
            grid[:, full_cols] = False
        return lines

    # Queries ----------------------------------------------------------
    def valid_anchors(self, shape: Shape) -> List[Coordinate]:
        """Anchors where ``shape`` fits, x outer and y inner."""
        table = _anchor_table(shape)
        if not table.anchors:
            return []
        free = ~self.cells[table.indices].any(axis=1)
        return [anchor for anchor, ok in zip(table.anchors, free) if ok]

    def fits_anywhere(self, shape: Shape) -> bool:
        table = _anchor_table(shape)
        if not table.anchors:
            return False
        return bool((~self.cells[table.indices].any(axis=1)).any())

    def is_game_over(self, remaining_shapes: Iterable[Shape]) -> bool:
        return not any(self.fits_anywhere(shape) for shape in remaining_shapes)

    def copy(self) -> "Board":
        new = Board.__new__(Board)
        new.rules = self.rules
        new.cells = self.cells.copy()
        new.score = self.score
        new.lines_cleared = self.lines_cleared
        new.shapes_placed = self.shapes_placed
        return new

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.score == other.score and bool(np.array_equal(self.cells, other.cells))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(score={self.score}, filled={self.filled_count})"
