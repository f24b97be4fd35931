from __future__ import annotations

import numpy as np
import pytest

from block_puzzle_search.game import ALL_SHAPES, SINGLER, ShapeType, get_shape, shape_index, shape_variants
from block_puzzle_search.game import shapes as shapes_module


def test_variant_counts_per_type() -> None:
    counts = {kind: len(shape_variants(kind)) for kind in ShapeType}
    assert counts == {
        ShapeType.SINGLER: 1,
        ShapeType.LINE2: 2,
        ShapeType.LINE3: 2,
        ShapeType.SQUARE2: 1,
        ShapeType.SQUARE3: 1,
        ShapeType.CORNER2: 4,
        ShapeType.CORNER3: 4,
    }
    assert len(ALL_SHAPES) == 15


def test_footprints_fit_in_three_by_three_and_are_read_only() -> None:
    for shape in ALL_SHAPES:
        assert 1 <= shape.height <= 3
        assert 1 <= shape.width <= 3
        assert shape.cells == int(shape.footprint.sum())
        with pytest.raises(ValueError):
            shape.footprint[0, 0] = False


def test_line_orientations() -> None:
    horizontal = get_shape(ShapeType.LINE3, 0)
    vertical = get_shape(ShapeType.LINE3, 1)
    assert (horizontal.height, horizontal.width) == (1, 3)
    assert (vertical.height, vertical.width) == (3, 1)
    assert vertical.offsets == ((0, 0), (0, 1), (0, 2))


def test_corner_cells() -> None:
    assert all(s.cells == 3 for s in shape_variants(ShapeType.CORNER2))
    assert all(s.cells == 5 for s in shape_variants(ShapeType.CORNER3))


def test_shapes_are_hashable_and_compare_by_kind_and_orientation() -> None:
    assert get_shape(ShapeType.SINGLER) is SINGLER
    assert {SINGLER: 1}[get_shape(ShapeType.SINGLER, 0)] == 1
    assert get_shape(ShapeType.CORNER2, 0) != get_shape(ShapeType.CORNER2, 1)
    assert shape_index(SINGLER) == 0


def test_cells_at_offsets_anchor() -> None:
    square = get_shape(ShapeType.SQUARE2)
    assert sorted(square.cells_at(3, 4)) == [(3, 4), (3, 5), (4, 4), (4, 5)]


def test_unknown_orientation_rejected() -> None:
    with pytest.raises(ValueError):
        get_shape(ShapeType.SQUARE2, 1)


def test_malformed_footprints_fail_fast() -> None:
    with pytest.raises(ValueError):
        shapes_module._build(ShapeType.SINGLER, 0, np.array([[0, 0], [0, 1]]))
    with pytest.raises(ValueError):
        shapes_module._build(ShapeType.LINE3, 0, np.ones((1, 4)))
    with pytest.raises(ValueError):
        shapes_module._build(ShapeType.SINGLER, 0, np.zeros((1, 1)))
