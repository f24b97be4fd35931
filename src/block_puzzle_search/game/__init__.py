"""Game module for Block Puzzle Search.

Exports the board engine and supporting classes:
- Board: 8x8 occupancy grid with placement, line clearing and scoring
- Shape, ShapeType: Immutable piece footprints
- ScoringRules: Configurable score increment policy
- Placement helpers: anchor string <-> (x, y) conversion
"""

from .shapes import (
    ALL_SHAPES,
    SINGLER,
    Shape,
    ShapeBatch,
    ShapeType,
    all_shapes,
    get_shape,
    shape_index,
    shape_variants,
)
from .placement import ANCHORS, BOARD_SIZE, COLUMNS, is_valid_placement, parse_placement, to_placement
from .rules import ScoringRules
from .board import Board

__all__ = [
    "ALL_SHAPES",
    "ANCHORS",
    "BOARD_SIZE",
    "COLUMNS",
    "Board",
    "SINGLER",
    "ScoringRules",
    "Shape",
    "ShapeBatch",
    "ShapeType",
    "all_shapes",
    "get_shape",
    "is_valid_placement",
    "parse_placement",
    "shape_index",
    "shape_variants",
    "to_placement",
]
