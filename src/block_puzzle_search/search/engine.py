from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import permutations
from math import factorial
from typing import Callable, List, Optional, Sequence

from block_puzzle_search.game import ANCHORS, Board, ShapeBatch, to_placement
from .paths import Candidate, GamePath, Move


LOGGER = logging.getLogger(__name__)

StepHook = Callable[[Candidate, GamePath, Board, Board], None]
PathHook = Callable[[GamePath, Board], None]
SelectHook = Callable[[List[GamePath]], GamePath]


def accumulate_score_gain(candidate: Candidate, path: GamePath, board_before: Board, board_after: Board) -> None:
    path.stats["score_gain"] = path.stats.get("score_gain", 0) + candidate.score_gain


def ignore_path(path: GamePath, board_at_start: Board) -> None:
    return None


def select_max_score(paths: List[GamePath]) -> GamePath:
    """Highest accumulated ``score_gain``; the earliest path wins ties."""
    return max(paths, key=lambda p: p.stats.get("score_gain", p.total_score_gain))


@dataclass
class SearchResult:
    paths: List[GamePath] = field(default_factory=list)
    best: Optional[GamePath] = None
    attempts: int = 0
    candidates: int = 0

    @property
    def move(self) -> Optional[Move]:
        if self.best is None or self.best.first is None:
            return None
        return self.best.first.to_move()


class FullEvalSearch:
    """Exhaustive search over every ordering and placement of a shape batch.

    For a batch of k shapes all k! orderings are expanded depth-first. At each
    depth the inherited board is never touched: every anchor that fits is
    placed on a fresh copy, which becomes the board of the next depth. A
    branch that places the whole ordering yields one :class:`GamePath`; a
    branch where a shape fits nowhere yields nothing.

    Scoring and selection are delegated to the hooks:

    - ``step_hook(candidate, path, board_before, board_after)`` for every
      candidate, with ``path`` the branch-local path ending in it;
    - ``path_hook(path, board_at_start)`` for every complete path;
    - ``select_hook(paths)`` once, over all complete paths.

    With ``retain_boards=False`` candidates and paths drop their board
    snapshots once the hooks have seen them, which bounds memory when a
    batch of small shapes produces millions of paths.
    """

    def __init__(
        self,
        step_hook: Optional[StepHook] = None,
        path_hook: Optional[PathHook] = None,
        select_hook: Optional[SelectHook] = None,
        retain_boards: bool = True,
    ) -> None:
        self.step_hook = step_hook or accumulate_score_gain
        self.path_hook = path_hook or ignore_path
        self.select_hook = select_hook or select_max_score
        self.retain_boards = retain_boards

    def search(self, board: Board, shapes: ShapeBatch) -> SearchResult:
        result = SearchResult()
        shape_ids = list(shapes)
        if not shape_ids:
            return result
        for order in permutations(shape_ids):
            self._expand(board, shapes, order, 0, GamePath(), board, result)

        LOGGER.debug(
            "Searched %d orderings: %d attempts, %d candidates, %d complete paths",
            factorial(len(shape_ids)),
            result.attempts,
            result.candidates,
            len(result.paths),
        )
        if not result.paths:
            return result
        best = self.select_hook(result.paths)
        if not any(best is p for p in result.paths):
            raise ValueError("select_hook must return one of the paths it was given")
        result.best = best
        return result

    def best_move(self, board: Board, shapes: ShapeBatch) -> Optional[Move]:
        return self.search(board, shapes).move

    def _expand(
        self,
        board: Board,
        shapes: ShapeBatch,
        order: Sequence[int],
        depth: int,
        prefix: GamePath,
        board_at_start: Board,
        result: SearchResult,
    ) -> None:
        if depth == len(order):
            prefix.final_board = board
            self.path_hook(prefix, board_at_start)
            if not self.retain_boards:
                prefix.final_board = None
            result.paths.append(prefix)
            return

        shape_id = order[depth]
        shape = shapes[shape_id]
        for x, y in ANCHORS:
            result.attempts += 1
            if not board.can_place(shape, x, y):
                continue
            after = board.copy()
            after.place_at(shape, x, y)
            candidate = Candidate(
                shape_id=shape_id,
                shape=shape,
                placement=to_placement(x, y),
                board_before=board,
                board_after=after,
                score_gain=after.score - board.score,
            )
            result.candidates += 1
            path = prefix.extended(candidate)
            self.step_hook(candidate, path, board, after)
            if not self.retain_boards:
                candidate.board_before = None
                candidate.board_after = None
            self._expand(after, shapes, order, depth + 1, path, board_at_start, result)
