from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from block_puzzle_search.game import Board, ShapeBatch
from block_puzzle_search.search import Move
from block_puzzle_search.visualization import ObservationSink


class Player(ABC):
    """A decision-maker plugged into the game driver.

    ``make_move`` returns a :class:`Move` whose ``shape_id`` is a key of
    ``shapes`` and whose placement is an anchor string such as ``"c5"``, or
    ``None`` when nothing fits. The board handed in may be freely copied but
    must not be relied on after the call returns.
    """

    name = "player"

    @abstractmethod
    def make_move(
        self,
        board: Board,
        shapes: ShapeBatch,
        renderer: Optional[ObservationSink] = None,
    ) -> Optional[Move]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
