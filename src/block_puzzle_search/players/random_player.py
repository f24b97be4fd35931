from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from block_puzzle_search.game import Board, ShapeBatch, to_placement
from block_puzzle_search.search import Move
from block_puzzle_search.visualization import ObservationSink
from .base import Player


class RandomPlayer(Player):
    """Uniformly random legal move. Baseline for comparing strategies."""

    name = "random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def make_move(
        self,
        board: Board,
        shapes: ShapeBatch,
        renderer: Optional[ObservationSink] = None,
    ) -> Optional[Move]:
        legal: List[Tuple[int, int, int]] = []
        for shape_id, shape in shapes.items():
            for x, y in board.valid_anchors(shape):
                legal.append((shape_id, x, y))
        if not legal:
            return None
        shape_id, x, y = legal[int(self.rng.integers(len(legal)))]
        return Move(shape_id, to_placement(x, y))
