from __future__ import annotations

from abc import abstractmethod
from typing import Dict, List, Optional

from block_puzzle_search.game import Board, ShapeBatch
from block_puzzle_search.game.heuristics import largest_empty_rectangle
from block_puzzle_search.search import Candidate, FullEvalSearch, GamePath, Move, SearchResult
from block_puzzle_search.visualization import ObservationSink
from .base import Player
from .greedy import GreedyPlayer, ScoreGreedyPlayer


class FullEvalPlayer(Player):
    """Player backed by :class:`FullEvalSearch`.

    Subclasses supply the three search hooks; only the first move of the
    selected path is reported; the next call re-evaluates from scratch.

    When no ordering places the whole batch but some shape still fits, the
    move comes from ``fallback`` (best single placement by score).
    """

    name = "fulleval"
    retain_boards = True

    def __init__(self, fallback: Optional[GreedyPlayer] = None) -> None:
        self.engine = FullEvalSearch(
            step_hook=self.gather_step_stats,
            path_hook=self.gather_path_stats,
            select_hook=self.select_best_path,
            retain_boards=self.retain_boards,
        )
        self.fallback = fallback or ScoreGreedyPlayer()
        self.last_result: Optional[SearchResult] = None

    def make_move(
        self,
        board: Board,
        shapes: ShapeBatch,
        renderer: Optional[ObservationSink] = None,
    ) -> Optional[Move]:
        self.last_result = self.engine.search(board, shapes)
        move = self.last_result.move
        if move is None and not board.is_game_over(shapes.values()):
            move = self.fallback.make_move(board, shapes, renderer)
        return move

    @abstractmethod
    def gather_step_stats(self, candidate: Candidate, path: GamePath, board_before: Board, board_after: Board) -> None:
        raise NotImplementedError

    @abstractmethod
    def gather_path_stats(self, path: GamePath, board_at_start: Board) -> None:
        raise NotImplementedError

    @abstractmethod
    def select_best_path(self, paths: List[GamePath]) -> GamePath:
        raise NotImplementedError


class MaxScorePlayer(FullEvalPlayer):
    """Most points over the whole batch, then the roomiest final board.

    The empty rectangle is only a tie-break, so it is measured only for
    paths that reach the best score seen so far, and skipped when the
    board has too few free cells to beat the current leader. Paths that
    were never measured carry no ``empty_rect`` and rank below measured
    ones with the same score, which is where the full comparison puts them.
    """

    name = "fulleval"
    retain_boards = False

    def __init__(self, fallback: Optional[GreedyPlayer] = None) -> None:
        super().__init__(fallback)
        self._reset_leader()

    def _reset_leader(self) -> None:
        self._best_gain: Optional[int] = None
        self._best_rect = -1
        self._rect_cache: Dict[bytes, int] = {}

    def make_move(
        self,
        board: Board,
        shapes: ShapeBatch,
        renderer: Optional[ObservationSink] = None,
    ) -> Optional[Move]:
        self._reset_leader()
        try:
            return super().make_move(board, shapes, renderer)
        finally:
            self._rect_cache = {}

    def _empty_rect(self, board: Board) -> int:
        key = board.cells.tobytes()
        rect = self._rect_cache.get(key)
        if rect is None:
            rect = largest_empty_rectangle(board)
            self._rect_cache[key] = rect
        return rect

    def gather_step_stats(self, candidate: Candidate, path: GamePath, board_before: Board, board_after: Board) -> None:
        path.stats["score_gain"] = path.stats.get("score_gain", 0) + candidate.score_gain

    def gather_path_stats(self, path: GamePath, board_at_start: Board) -> None:
        final = path.final_board
        if final is None:
            raise ValueError("complete path has no final board")
        gain = path.stats.get("score_gain", 0)
        if self._best_gain is not None:
            if gain < self._best_gain:
                return
            free = final.size * final.size - final.filled_count
            if gain == self._best_gain and free <= self._best_rect:
                return
        rect = self._empty_rect(final)
        path.stats["empty_rect"] = rect
        if self._best_gain is None or gain > self._best_gain:
            self._best_gain = gain
            self._best_rect = rect
        elif rect > self._best_rect:
            self._best_rect = rect

    def select_best_path(self, paths: List[GamePath]) -> GamePath:
        return max(paths, key=lambda p: (p.stats["score_gain"], p.stats.get("empty_rect", -1)))
