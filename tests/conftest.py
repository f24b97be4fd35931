from __future__ import annotations

import pytest

from block_puzzle_search.game import Board


@pytest.fixture
def row_board() -> Board:
    """Row 1 filled in columns a-g, everything else free."""
    board = Board()
    for x in range(7):
        board.set_cell(x, 0)
    return board


@pytest.fixture
def make_board():
    """Factory: a full board except for the given free (x, y) cells."""

    def _make(free, rules=None) -> Board:
        board = Board(rules)
        board.cells[:] = True
        for x, y in free:
            board.set_cell(x, y, False)
        return board

    return _make
