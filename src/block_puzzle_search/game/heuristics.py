from __future__ import annotations

"""
Board metrics that strategies can use to rank positions.

None of these are needed by the engine itself. Every function accepts either
a :class:`Board` or its ``[y, x]`` boolean grid.
"""

from collections import deque
from typing import List, Union

import numpy as np

from .board import Board

BoardLike = Union[Board, np.ndarray]


def _as_grid(board: BoardLike) -> np.ndarray:
    if isinstance(board, Board):
        return board.grid
    return np.asarray(board, dtype=np.bool_)


def largest_empty_rectangle(board: BoardLike) -> int:
    """Area of the largest axis-aligned rectangle of free cells."""
    grid = _as_grid(board)
    if grid.size == 0:
        return 0
    free = ~grid
    # heights[y, x]: free cells ending at row y in column x
    heights = np.zeros(grid.shape, dtype=np.int64)
    heights[0] = free[0]
    for y in range(1, grid.shape[0]):
        heights[y] = np.where(free[y], heights[y - 1] + 1, 0)

    best = 0
    for row in heights.tolist():
        # Largest rectangle in histogram
        bars = row + [0]
        stack: List[int] = []
        for x, current in enumerate(bars):
            while stack and bars[stack[-1]] >= current:
                top = bars[stack.pop()]
                left = stack[-1] + 1 if stack else 0
                best = max(best, top * (x - left))
            stack.append(x)
    return best


def empty_regions(board: BoardLike) -> int:
    """Number of 4-connected regions of free cells."""
    grid = _as_grid(board)
    h, w = grid.shape
    seen = np.zeros((h, w), dtype=np.bool_)
    regions = 0
    for y in range(h):
        for x in range(w):
            if grid[y, x] or seen[y, x]:
                continue
            regions += 1
            seen[y, x] = True
            q = deque([(x, y)])
            while q:
                cx, cy = q.popleft()
                for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
                    nx, ny = cx + dx, cy + dy
                    if 0 <= nx < w and 0 <= ny < h and not grid[ny, nx] and not seen[ny, nx]:
                        seen[ny, nx] = True
                        q.append((nx, ny))
    return regions


def fragmentation_score(board: BoardLike) -> int:
    """Lower is tidier.

    Counts orthogonally adjacent cell pairs whose occupancy differs, plus one
    per free region beyond the first.
    """
    grid = _as_grid(board)
    transitions = int(np.count_nonzero(grid[:, 1:] != grid[:, :-1]))
    transitions += int(np.count_nonzero(grid[1:, :] != grid[:-1, :]))
    return transitions + max(0, empty_regions(grid) - 1)


def isolated_cells(board: BoardLike) -> int:
    """Free cells with no free orthogonal neighbour."""
    grid = _as_grid(board)
    free = np.pad(~grid, 1, constant_values=False)
    neighbours = free[:-2, 1:-1] | free[2:, 1:-1] | free[1:-1, :-2] | free[1:-1, 2:]
    return int(np.count_nonzero(~grid & ~neighbours))


def get_board_features(board: BoardLike) -> dict:
    grid = _as_grid(board)
    size = grid.shape[0]
    row_fill = grid.sum(axis=1)
    col_fill = grid.sum(axis=0)
    return {
        "filled_cells": int(grid.sum()),
        "fill_ratio": float(grid.sum()) / float(grid.size),
        "almost_complete_lines": int(np.count_nonzero(row_fill == size - 1))
        + int(np.count_nonzero(col_fill == size - 1)),
        "empty_rows": int(np.count_nonzero(row_fill == 0)),
        "empty_cols": int(np.count_nonzero(col_fill == 0)),
        "isolated_cells": isolated_cells(grid),
        "empty_regions": empty_regions(grid),
        "largest_empty_rectangle": largest_empty_rectangle(grid),
        "fragmentation": fragmentation_score(grid),
    }
