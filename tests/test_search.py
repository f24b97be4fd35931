from __future__ import annotations

import logging

import pytest

from block_puzzle_search.game import SINGLER, Board, ShapeType, get_shape
from block_puzzle_search.search import FullEvalSearch, GamePath, Move


SQUARE2 = get_shape(ShapeType.SQUARE2)
SQUARE3 = get_shape(ShapeType.SQUARE3)

# A 2x2 pocket at a1 plus stray single cells; no placement here completes a line
POCKET = [(0, 0), (1, 0), (0, 1), (1, 1), (3, 0), (3, 1), (0, 5), (1, 7)]


def _free_block(make_board, size: int) -> Board:
    return make_board([(x, y) for x in range(size) for y in range(size)])


def test_empty_batch_yields_no_move() -> None:
    result = FullEvalSearch().search(Board(), {})
    assert result.move is None
    assert result.paths == []
    assert result.attempts == 0


def test_two_singlers_on_empty_board_enumerate_every_path() -> None:
    result = FullEvalSearch().search(Board(), {1: SINGLER, 2: SINGLER})
    assert len(result.paths) == 2 * 64 * 63
    assert result.candidates == 2 * (64 + 64 * 63)
    assert result.attempts == 2 * (64 + 64 * 64)
    assert all(len(p) == 2 for p in result.paths)


def test_three_singlers_count_follows_free_cells(make_board) -> None:
    # 4x4 free block: every row and column keeps a free cell, so nothing clears
    board = _free_block(make_board, 4)
    result = FullEvalSearch().search(board, {1: SINGLER, 2: SINGLER, 3: SINGLER})
    assert len(result.paths) == 6 * 16 * 15 * 14
    assert result.candidates == 6 * (16 + 16 * 15 + 16 * 15 * 14)
    orders = {p.shape_order for p in result.paths}
    assert orders == {(1, 2, 3), (1, 3, 2), (2, 1, 3), (2, 3, 1), (3, 1, 2), (3, 2, 1)}


def test_search_never_mutates_the_input_board(make_board) -> None:
    board = _free_block(make_board, 4)
    before = board.copy()
    FullEvalSearch().search(board, {1: SINGLER, 2: SQUARE2})
    assert board == before


def test_dead_end_orderings_produce_no_paths(make_board) -> None:
    board = make_board(POCKET)
    assert not board.is_game_over([SQUARE2])
    result = FullEvalSearch().search(board, {1: SQUARE2, 2: SQUARE2})
    assert result.candidates == 2
    assert result.paths == []
    assert result.move is None


def test_partial_dead_ends_are_discarded(make_board) -> None:
    board = make_board(POCKET)
    result = FullEvalSearch().search(board, {1: SQUARE2, 2: SINGLER})
    assert len(result.paths) == 8
    assert all(len(p) == 2 for p in result.paths)
    by_order = {}
    for p in result.paths:
        by_order.setdefault(p.shape_order, []).append(p)
    assert len(by_order[(1, 2)]) == 4
    assert len(by_order[(2, 1)]) == 4


def test_nothing_fits_anywhere() -> None:
    rows = ["#.#.#.#.", ".#.#.#.#"] * 4
    board = Board.from_rows(rows)
    result = FullEvalSearch().search(board, {1: SQUARE3, 2: SQUARE2})
    assert result.move is None
    assert result.candidates == 0


def test_best_move_completes_the_row(row_board) -> None:
    assert FullEvalSearch().best_move(row_board, {1: SINGLER}) == Move(1, "h1")


def test_hooks_see_branch_local_paths(make_board) -> None:
    board = _free_block(make_board, 3)
    steps = []
    completed = []

    def step_hook(candidate, path, before, after):
        assert path.candidates[-1] is candidate
        assert candidate.board_before is before
        assert candidate.board_after is after
        assert after.score - before.score == candidate.score_gain
        steps.append(len(path))
        path.stats["depth_sum"] = path.stats.get("depth_sum", 0) + len(path)

    def path_hook(path, board_at_start):
        assert board_at_start is board
        assert path.final_board is path.candidates[-1].board_after
        assert path.stats["depth_sum"] == 1 + 2
        completed.append(path)

    search = FullEvalSearch(step_hook=step_hook, path_hook=path_hook, select_hook=lambda paths: paths[-1])
    result = search.search(board, {1: SINGLER, 2: SINGLER})
    assert len(completed) == len(result.paths) == 2 * 9 * 8
    assert steps.count(1) == 2 * 9
    assert steps.count(2) == 2 * 9 * 8
    assert result.best is result.paths[-1]
    assert result.move == result.paths[-1].first.to_move()


def test_retain_boards_false_drops_snapshots(make_board) -> None:
    board = _free_block(make_board, 3)
    seen_final = []

    def path_hook(path, board_at_start):
        seen_final.append(path.final_board is not None)

    result = FullEvalSearch(path_hook=path_hook, retain_boards=False).search(board, {1: SINGLER})
    assert all(seen_final)
    for path in result.paths:
        assert path.final_board is None
        assert all(c.board_before is None and c.board_after is None for c in path.candidates)


def test_select_hook_must_return_a_known_path() -> None:
    search = FullEvalSearch(select_hook=lambda paths: GamePath())
    with pytest.raises(ValueError):
        search.search(Board(), {1: SINGLER})


def test_default_selection_prefers_score_then_first(row_board) -> None:
    result = FullEvalSearch().search(row_board, {1: SINGLER, 2: SINGLER})
    assert result.best is not None
    assert result.best.stats["score_gain"] == 12
    first_best = next(p for p in result.paths if p.stats["score_gain"] == 12)
    assert result.best is first_best


def test_search_is_deterministic(make_board) -> None:
    board = make_board(POCKET + [(5, 5), (6, 5), (5, 6)])
    shapes = {1: SINGLER, 2: SQUARE2, 3: get_shape(ShapeType.CORNER2)}
    first = FullEvalSearch().search(board, shapes)
    second = FullEvalSearch().search(board.copy(), dict(shapes))
    assert first.move == second.move
    assert [p.moves() for p in first.paths] == [p.moves() for p in second.paths]


def test_search_logs_counters(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="block_puzzle_search.search.engine"):
        FullEvalSearch().search(Board(), {1: SQUARE3})
    message = "".join(caplog.messages)
    assert "36 complete paths" in message
