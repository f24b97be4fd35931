from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional, Protocol, TextIO

import numpy as np

from block_puzzle_search.game import COLUMNS, Board, Shape, ShapeBatch

if TYPE_CHECKING:
    from block_puzzle_search.search import Move


FILLED = "█"
EMPTY = "·"


class ObservationSink(Protocol):
    """Anything a player or the driver can report progress to."""

    def show(self, board: Board, shapes: ShapeBatch) -> None: ...

    def show_move(self, move: "Move", board: Board) -> None: ...


def format_grid(grid: np.ndarray) -> List[str]:
    return ["".join(FILLED if cell else EMPTY for cell in row) for row in grid]


def format_board(board: Board) -> str:
    lines = ["  " + COLUMNS[: board.size]]
    for y, row in enumerate(format_grid(board.grid)):
        lines.append(f"{y + 1} {row}")
    return "\n".join(lines)


def format_shape(shape: Shape) -> List[str]:
    return format_grid(shape.footprint)


def format_batch(shapes: ShapeBatch) -> str:
    blocks = [(shape_id, format_shape(shape)) for shape_id, shape in shapes.items()]
    if not blocks:
        return "(no shapes)"
    height = max(len(rows) for _, rows in blocks)
    widths = [max(len(rows[0]), len(str(shape_id)) + 1) for shape_id, rows in blocks]
    lines = ["   ".join(f"{shape_id}:".ljust(w) for (shape_id, _), w in zip(blocks, widths))]
    for i in range(height):
        parts = []
        for (_, rows), w in zip(blocks, widths):
            parts.append((rows[i] if i < len(rows) else "").ljust(w))
        lines.append("   ".join(parts).rstrip())
    return "\n".join(lines)


class ConsoleRenderer:
    """Writes text boards to a stream (stdout by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def show(self, board: Board, shapes: ShapeBatch) -> None:
        self.stream.write(f"Score: {board.score}\n{format_board(board)}\n\n{format_batch(shapes)}\n\n")

    def show_move(self, move: "Move", board: Board) -> None:
        self.stream.write(f"Placed shape {move.shape_id} at {move.placement} -> score {board.score}\n")


class NullRenderer:
    def show(self, board: Board, shapes: ShapeBatch) -> None:
        pass

    def show_move(self, move: "Move", board: Board) -> None:
        pass
