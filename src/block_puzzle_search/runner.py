from __future__ import annotations

"""
Game driver: owns the real board and shape batch, asks a player for moves,
validates them and applies them.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Optional, Sequence, cast

import numpy as np

from block_puzzle_search.game import (
    ALL_SHAPES,
    Board,
    ScoringRules,
    Shape,
    ShapeBatch,
    parse_placement,
)
from block_puzzle_search.players import Player
from block_puzzle_search.search import Move
from block_puzzle_search.visualization import NullRenderer, ObservationSink


LOGGER = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Configuration for a game driven by :class:`GameRunner`"""
    batch_size: int = 3
    max_rounds: int = 10000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= 3:
            raise ValueError(f"batch_size must be 1..3, got {self.batch_size}")
        if self.max_rounds <= 0:
            raise ValueError("max_rounds must be positive")


class IllegalMoveError(ValueError):
    """A player returned a move the driver cannot apply."""


def validate_move(move: Optional[Move], board: Board, shapes: ShapeBatch) -> None:
    if move is None:
        raise IllegalMoveError("player declined although a legal move exists")
    if move.shape_id not in shapes:
        raise IllegalMoveError(f"unknown shape id {move.shape_id!r}, available {sorted(shapes)}")
    anchor = parse_placement(move.placement)
    if anchor is None:
        raise IllegalMoveError(f"malformed placement {move.placement!r}")
    if not board.can_place(shapes[move.shape_id], *anchor):
        raise IllegalMoveError(f"shape {move.shape_id} does not fit at {move.placement}")


BatchSupplier = Callable[[], ShapeBatch]


class RandomBatchSupplier:
    """Draws ``batch_size`` shapes uniformly from ``shapes`` for each batch."""

    def __init__(
        self,
        batch_size: int = 3,
        shapes: Sequence[Shape] = ALL_SHAPES,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if not shapes:
            raise ValueError("shape pool must not be empty")
        self.batch_size = batch_size
        self.shapes = tuple(shapes)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def __call__(self) -> ShapeBatch:
        picks = self.rng.integers(len(self.shapes), size=self.batch_size)
        return {i + 1: self.shapes[int(p)] for i, p in enumerate(picks)}


@dataclass
class GameStats:
    score: int = 0
    rounds: int = 0
    moves: int = 0
    lines_cleared: int = 0
    forfeits: int = 0
    batches: int = 0
    game_over: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class GameRunner:
    """Turn loop: refill the batch when empty, stop when nothing fits.

    A round is one request to the player. Illegal output forfeits the round:
    the board is left alone and the rest of the batch is discarded.
    """

    def __init__(
        self,
        player: Player,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        supplier: Optional[BatchSupplier] = None,
        renderer: Optional[ObservationSink] = None,
    ) -> None:
        self.player = player
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.supplier = supplier or RandomBatchSupplier(self.config.batch_size, seed=self.config.seed)
        self.renderer = renderer or NullRenderer()
        self.board = Board(self.rules)
        self.shapes: ShapeBatch = {}
        self.stats = GameStats()

    def reset(self) -> None:
        self.board = Board(self.rules)
        self.shapes = {}
        self.stats = GameStats()

    def _refill(self) -> None:
        self.shapes = dict(self.supplier())
        self.stats.batches += 1

    def step(self) -> bool:
        """Play one round. Returns False once the game has ended."""
        if self.stats.game_over:
            return False
        if not self.shapes:
            self._refill()
        if self.board.is_game_over(self.shapes.values()):
            self.stats.game_over = True
            LOGGER.info("Game over after %d rounds: score %d", self.stats.rounds, self.board.score)
            return False

        self.renderer.show(self.board, self.shapes)
        move = self.player.make_move(self.board.copy(), dict(self.shapes), self.renderer)
        self.stats.rounds += 1
        try:
            validate_move(move, self.board, self.shapes)
        except IllegalMoveError as exc:
            self.stats.forfeits += 1
            LOGGER.warning("Round %d forfeited by %s: %s", self.stats.rounds, self.player.name, exc)
            self.shapes = {}
            return True

        move = cast(Move, move)
        if not self.board.try_place(self.shapes[move.shape_id], move.placement):
            raise RuntimeError(f"validated move {move} did not apply")
        del self.shapes[move.shape_id]
        self.stats.moves += 1
        self.stats.score = self.board.score
        self.stats.lines_cleared = self.board.lines_cleared
        self.renderer.show_move(move, self.board)
        return True

    def play(self) -> GameStats:
        LOGGER.info("Starting game with %s", self.player.name)
        while self.stats.rounds < self.config.max_rounds and self.step():
            pass
        if not self.stats.game_over:
            LOGGER.info("Stopped after max_rounds=%d: score %d", self.config.max_rounds, self.board.score)
        return self.stats
