from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from block_puzzle_search.game import Board, Shape


@dataclass(frozen=True)
class Move:
    """A decision reported to the driver: which shape, where."""

    shape_id: int
    placement: str


@dataclass
class Candidate:
    """One successful placement inside a search branch."""

    shape_id: int
    shape: Shape
    placement: str
    board_before: Optional[Board]
    board_after: Optional[Board]
    score_gain: int = 0
    stats: Dict[str, float] = field(default_factory=dict)

    def to_move(self) -> Move:
        return Move(self.shape_id, self.placement)


@dataclass
class GamePath:
    """A sequence of candidates placing the batch in one particular order.

    ``stats`` is owned by the path: hooks accumulate into it freely because
    :meth:`extended` copies it for every branch.
    """

    candidates: List[Candidate] = field(default_factory=list)
    stats: Dict[str, float] = field(default_factory=dict)
    final_board: Optional[Board] = None

    def extended(self, candidate: Candidate) -> "GamePath":
        return GamePath(candidates=self.candidates + [candidate], stats=dict(self.stats))

    def __len__(self) -> int:
        return len(self.candidates)

    @property
    def first(self) -> Optional[Candidate]:
        return self.candidates[0] if self.candidates else None

    @property
    def total_score_gain(self) -> int:
        return sum(c.score_gain for c in self.candidates)

    @property
    def shape_order(self) -> Tuple[int, ...]:
        return tuple(c.shape_id for c in self.candidates)

    def moves(self) -> List[Move]:
        return [c.to_move() for c in self.candidates]
