"""Block Puzzle Search: an 8x8 block placement puzzle for testing strategies.

- game: board engine, shapes, scoring rules
- search: exhaustive full-evaluation search and its path model
- players: the strategy contract and built-in players
- runner: game driver
- env: gymnasium environment over the same engine
"""

from .game import Board, ScoringRules, Shape, ShapeType
from .search import FullEvalSearch, GamePath, Move
from .players import Player
from .runner import GameConfig, GameRunner

__all__ = [
    "Board",
    "FullEvalSearch",
    "GameConfig",
    "GamePath",
    "GameRunner",
    "Move",
    "Player",
    "ScoringRules",
    "Shape",
    "ShapeType",
]
