"""Anchor strings: column letter ``a``-``h`` followed by row digit ``1``-``8``."""

from __future__ import annotations

import re
from typing import Optional, Tuple, cast

BOARD_SIZE = 8
COLUMNS = "abcdefgh"
ROWS = "12345678"

_PLACEMENT_RE = re.compile(r"^[a-h][1-8]$")

# Search order: x (column) outer, y (row) inner
ANCHORS: Tuple[Tuple[int, int], ...] = tuple(
    (x, y) for x in range(BOARD_SIZE) for y in range(BOARD_SIZE)
)


def to_placement(x: int, y: int) -> str:
    if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
        raise ValueError(f"anchor ({x}, {y}) outside {BOARD_SIZE}x{BOARD_SIZE} board")
    return COLUMNS[x] + ROWS[y]


def is_valid_placement(text: object) -> bool:
    return isinstance(text, str) and _PLACEMENT_RE.match(text) is not None


def parse_placement(text: object) -> Optional[Tuple[int, int]]:
    """Return ``(x, y)`` for a well-formed anchor, otherwise ``None``."""
    if not is_valid_placement(text):
        return None
    text = cast(str, text)
    return COLUMNS.index(text[0]), ROWS.index(text[1])
