from __future__ import annotations

import operator
from typing import Callable, Optional

from block_puzzle_search.game import ANCHORS, Board, Shape, ShapeBatch, to_placement
from block_puzzle_search.game.heuristics import fragmentation_score
from block_puzzle_search.search import Move
from block_puzzle_search.visualization import ObservationSink
from .base import Player


GainFn = Callable[[Board, Board, Shape], float]
BetterFn = Callable[[float, float], bool]


class GreedyPlayer(Player):
    """Single-step greedy: best placement of any one shape on this board.

    Every (shape, anchor) pair is tried on its own copy of the board and
    scored with ``gain(board_before, board_after, shape)``. A new gain
    replaces the current best only when ``better(new, best)`` holds, so the
    first of several equal placements is kept.
    """

    name = "greedy"

    def __init__(self, gain: GainFn, better: BetterFn = operator.gt) -> None:
        self.gain = gain
        self.better = better

    def make_move(
        self,
        board: Board,
        shapes: ShapeBatch,
        renderer: Optional[ObservationSink] = None,
    ) -> Optional[Move]:
        best: Optional[Move] = None
        best_gain = 0.0
        for shape_id, shape in shapes.items():
            for x, y in ANCHORS:
                trial = board.copy()
                if not trial.place_at(shape, x, y):
                    continue
                gain = self.gain(board, trial, shape)
                if best is None or self.better(gain, best_gain):
                    best = Move(shape_id, to_placement(x, y))
                    best_gain = gain
        return best


def score_gain(before: Board, after: Board, shape: Shape) -> float:
    return float(after.score - before.score)


def fragmentation_after(before: Board, after: Board, shape: Shape) -> float:
    return float(fragmentation_score(after))


class ScoreGreedyPlayer(GreedyPlayer):
    name = "greedy"

    def __init__(self) -> None:
        super().__init__(score_gain, operator.gt)


class FragmentationGreedyPlayer(GreedyPlayer):
    """Keeps the board as compact as possible, ignoring immediate points."""

    name = "fragmentation"

    def __init__(self) -> None:
        super().__init__(fragmentation_after, operator.lt)
