"""Full-evaluation search over shape orderings and placements."""

from .paths import Candidate, GamePath, Move
from .engine import (
    FullEvalSearch,
    SearchResult,
    accumulate_score_gain,
    ignore_path,
    select_max_score,
)

__all__ = [
    "Candidate",
    "FullEvalSearch",
    "GamePath",
    "Move",
    "SearchResult",
    "accumulate_score_gain",
    "ignore_path",
    "select_max_score",
]
