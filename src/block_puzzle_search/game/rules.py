from __future__ import annotations

from dataclasses import dataclass

COMBO_MODES = ("additive", "multiplicative")


@dataclass(frozen=True)
class ScoringRules:
    """Score increment applied by every successful placement.

    placement part: ``placement_points`` per covered cell (``per_cell``) or
    once per placement. line part: ``line_clear_points`` per cleared line;
    in ``multiplicative`` mode the line part is further scaled by
    ``combo_multiplier ** (lines - 1)``.
    """

    placement_points: int = 1
    per_cell: bool = True
    line_clear_points: int = 10
    combo: str = "additive"
    combo_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.placement_points < 0 or self.line_clear_points < 0:
            raise ValueError("scoring points must be non-negative")
        if self.combo not in COMBO_MODES:
            raise ValueError(f"combo must be one of {COMBO_MODES}, got {self.combo!r}")
        if self.combo_multiplier < 1.0:
            raise ValueError("combo_multiplier must be >= 1.0")

    def placement_score(self, cells: int) -> int:
        return self.placement_points * (cells if self.per_cell else 1)

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        line_score = lines * self.line_clear_points
        if self.combo == "multiplicative" and lines > 1:
            return int(line_score * (self.combo_multiplier ** (lines - 1)))
        return line_score

    def score_for(self, cells: int, lines: int) -> int:
        return self.placement_score(cells) + self.score_for_lines(lines)
