"""Strategies that decide which shape to place where."""

from typing import Callable, Dict

from .base import Player
from .greedy import FragmentationGreedyPlayer, GreedyPlayer, ScoreGreedyPlayer
from .full_eval import FullEvalPlayer, MaxScorePlayer
from .random_player import RandomPlayer

PLAYERS: Dict[str, Callable[[], Player]] = {
    "greedy": ScoreGreedyPlayer,
    "fragmentation": FragmentationGreedyPlayer,
    "fulleval": MaxScorePlayer,
    "random": RandomPlayer,
}

__all__ = [
    "FragmentationGreedyPlayer",
    "FullEvalPlayer",
    "GreedyPlayer",
    "MaxScorePlayer",
    "PLAYERS",
    "Player",
    "RandomPlayer",
    "ScoreGreedyPlayer",
]
