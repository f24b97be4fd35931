from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


MAX_EXTENT = 3


class ShapeType(IntEnum):
    SINGLER = 0
    LINE2 = 1
    LINE3 = 2
    SQUARE2 = 3
    SQUARE3 = 4
    CORNER2 = 5
    CORNER3 = 6


Footprint = np.ndarray
Offset = Tuple[int, int]


BASE_SHAPES = {
    ShapeType.SINGLER: np.array([[1]], dtype=np.bool_),
    ShapeType.LINE2: np.array([[1, 1]], dtype=np.bool_),
    ShapeType.LINE3: np.array([[1, 1, 1]], dtype=np.bool_),
    ShapeType.SQUARE2: np.array([[1, 1], [1, 1]], dtype=np.bool_),
    ShapeType.SQUARE3: np.ones((3, 3), dtype=np.bool_),
    ShapeType.CORNER2: np.array([[1, 0], [1, 1]], dtype=np.bool_),
    ShapeType.CORNER3: np.array([[1, 0, 0], [1, 0, 0], [1, 1, 1]], dtype=np.bool_),
}


@dataclass(frozen=True)
class Shape:
    """A placeable piece: one orientation of a shape type.

    ``footprint`` is indexed ``[dy, dx]`` and is read-only. ``offsets`` lists
    the occupied ``(dx, dy)`` cells relative to the anchor (top-left corner).
    Shapes are built once at import and shared everywhere.
    """

    kind: ShapeType
    orientation: int
    footprint: Footprint = field(compare=False, repr=False)
    offsets: Tuple[Offset, ...] = field(compare=False, repr=False)

    @property
    def height(self) -> int:
        return int(self.footprint.shape[0])

    @property
    def width(self) -> int:
        return int(self.footprint.shape[1])

    @property
    def cells(self) -> int:
        return len(self.offsets)

    @property
    def name(self) -> str:
        return f"{self.kind.name}/{self.orientation}"

    def cells_at(self, origin_x: int, origin_y: int) -> List[Offset]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.offsets]


# Shapes available in one decision round, keyed 1..3
ShapeBatch = Dict[int, Shape]


def _rot90(footprint: Footprint, k: int) -> Footprint:
    k = k % 4
    if k == 0:
        return footprint
    return np.rot90(footprint, k, axes=(1, 0))  # rotate clockwise when k>0


def _validate(kind: ShapeType, footprint: Footprint) -> None:
    h, w = footprint.shape
    if h == 0 or w == 0 or not footprint.any():
        raise ValueError(f"{kind.name}: empty footprint")
    if h > MAX_EXTENT or w > MAX_EXTENT:
        raise ValueError(f"{kind.name}: footprint {h}x{w} exceeds {MAX_EXTENT}x{MAX_EXTENT}")
    # Anchor is the top-left of the bounding box, so no border row/column may be blank
    if not (footprint[0, :].any() and footprint[-1, :].any()
            and footprint[:, 0].any() and footprint[:, -1].any()):
        raise ValueError(f"{kind.name}: footprint is not tight to its bounding box")


def _build(kind: ShapeType, orientation: int, footprint: Footprint) -> Shape:
    frozen = np.ascontiguousarray(footprint, dtype=np.bool_).copy()
    _validate(kind, frozen)
    frozen.setflags(write=False)
    ys, xs = np.nonzero(frozen)
    offsets = tuple((int(dx), int(dy)) for dy, dx in zip(ys, xs))
    return Shape(kind=kind, orientation=orientation, footprint=frozen, offsets=offsets)


def _build_variants() -> Dict[ShapeType, Tuple[Shape, ...]]:
    table: Dict[ShapeType, Tuple[Shape, ...]] = {}
    for kind in ShapeType:
        base = BASE_SHAPES[kind]
        seen: List[Footprint] = []
        for r in range(4):
            rotated = _rot90(base, r)
            # Check if this rotation is unique
            if not any(np.array_equal(rotated, existing) for existing in seen):
                seen.append(rotated)
        table[kind] = tuple(_build(kind, i, fp) for i, fp in enumerate(seen))
    return table


SHAPE_VARIANTS: Dict[ShapeType, Tuple[Shape, ...]] = _build_variants()
ALL_SHAPES: Tuple[Shape, ...] = tuple(s for kind in ShapeType for s in SHAPE_VARIANTS[kind])
SINGLER = SHAPE_VARIANTS[ShapeType.SINGLER][0]


def shape_variants(kind: ShapeType) -> Tuple[Shape, ...]:
    """All unique orientations of ``kind``."""
    return SHAPE_VARIANTS[kind]


def get_shape(kind: ShapeType, orientation: int = 0) -> Shape:
    variants = SHAPE_VARIANTS[kind]
    if not 0 <= orientation < len(variants):
        raise ValueError(f"{kind.name} has {len(variants)} orientations, got {orientation}")
    return variants[orientation]


def all_shapes() -> Tuple[Shape, ...]:
    return ALL_SHAPES


def shape_index(shape: Shape) -> int:
    """Position of ``shape`` in :data:`ALL_SHAPES` (stable across runs)."""
    return ALL_SHAPES.index(shape)
