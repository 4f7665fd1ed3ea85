# tests/test_grid.py
import pytest

from dungeonlayout.grid import (
    EditablePuzzle, GridInvariantError, InvalidDimension, Puzzle, SolvablePuzzle,
)
from dungeonlayout.tiles import Tile, TileKind

W = TileKind.WALL
F = TileKind.FLOOR
X = TileKind.MARKED_FLOOR
M = TileKind.MONSTER
T = TileKind.TREASURE

def make_puzzle(cls, kinds, row_targets=None, col_targets=None):
    n_rows, n_cols = len(kinds), len(kinds[0])
    tiles = [[Tile(k) for k in row] for row in kinds]
    return cls("test", row_targets or [0] * n_rows, col_targets or [0] * n_cols, tiles)

def kinds(puzzle):
    return [[t.kind for t in row] for row in puzzle.tiles]

def check_shape(p):
    assert len(p.tiles) == p.n_rows
    assert all(len(row) == p.n_cols for row in p.tiles)
    assert len(p.row_targets) == p.n_rows
    assert len(p.col_targets) == p.n_cols

def test_missing_cells_default_to_floor():
    p = SolvablePuzzle("p", [0, 0, 0], [0, 0], [[Tile(W)], []])
    check_shape(p)
    assert kinds(p) == [[W, F], [F, F], [F, F]]

def test_get_tile_out_of_bounds_is_none():
    p = make_puzzle(SolvablePuzzle, [[F, F], [F, F]])
    assert p.get_tile(-1, 0) is None
    assert p.get_tile(p.n_rows, 0) is None
    assert p.get_tile(0, p.n_cols) is None
    assert p.get_tile(1, 1).kind is F

def test_base_puzzle_refuses_edits():
    p = make_puzzle(Puzzle, [[F]])
    assert p.set_tile(0, 0, Tile(W)) is False
    assert p.tiles[0][0].kind is F

def test_solving_policy_locks_fixed_tiles():
    grid = [[F] * 5 for _ in range(5)]
    grid[2][2] = M
    s = make_puzzle(SolvablePuzzle, grid)
    assert s.set_tile(2, 2, Tile(F)) is False
    assert s.get_tile(2, 2).kind is M
    assert s.set_tile(0, 0, Tile(W)) is True
    assert s.set_tile(5, 0, Tile(W)) is False

    e = make_puzzle(EditablePuzzle, grid)
    assert e.set_tile(2, 2, Tile(F)) is True
    assert e.get_tile(2, 2).kind is F
    assert e.set_tile(-1, 0, Tile(W)) is False

def test_one_notification_per_call():
    p = make_puzzle(SolvablePuzzle, [[W, X, M], [X, W, F]])
    calls = []
    p.subscribe(lambda: calls.append(1))
    p.set_tile(0, 0, Tile(F))
    assert len(calls) == 1
    p.set_tile(0, 2, Tile(F))       # refused: no notification
    assert len(calls) == 1
    p.unmark_floors()
    assert len(calls) == 2
    p.unsolve()
    assert len(calls) == 3

def test_unsubscribe():
    p = make_puzzle(EditablePuzzle, [[F]])
    calls = []
    listener = p.subscribe(lambda: calls.append(1))
    p.unsubscribe(listener)
    p.set_tile(0, 0, Tile(W))
    assert calls == []

def test_tiles_in_rect_is_clipped_and_restartable():
    p = make_puzzle(SolvablePuzzle, [[F, F, F], [F, W, F], [F, F, F]])
    cells = [(r, c) for r, c, _ in p.tiles_in_rect(-1, 1, 3, 5)]
    assert cells == [(0, 1), (0, 2), (1, 1), (1, 2)]
    assert len(list(p)) == 9
    assert len(list(p)) == 9

def test_tiles_adjacent_to_single_cell_and_footprint():
    p = make_puzzle(SolvablePuzzle, [[F] * 4 for _ in range(4)])
    assert sorted((r, c) for r, c, _ in p.tiles_adjacent_to(0, 0)) == [(0, 1), (1, 0)]
    assert sorted((r, c) for r, c, _ in p.tiles_adjacent_to(1, 1)) == [(0, 1), (1, 0), (1, 2), (2, 1)]
    ring = sorted((r, c) for r, c, _ in p.tiles_adjacent_to(1, 1, 2, 2))
    assert ring == [(0, 1), (0, 2), (1, 0), (1, 3), (2, 0), (2, 3), (3, 1), (3, 2)]

def test_unsolve_keeps_fixed_and_is_idempotent():
    p = make_puzzle(SolvablePuzzle, [[W, M, X], [T, W, F]])
    p.unsolve()
    once = kinds(p)
    assert once == [[F, M, F], [T, F, F]]
    p.unsolve()
    assert kinds(p) == once

def test_unmark_floors_is_idempotent():
    p = make_puzzle(SolvablePuzzle, [[X, W, X], [M, X, F]])
    p.unmark_floors()
    once = kinds(p)
    assert once == [[F, W, F], [M, F, F]]
    p.unmark_floors()
    assert kinds(p) == once

def test_set_size_keeps_shape_through_any_sequence():
    p = make_puzzle(EditablePuzzle, [[W, F], [F, W]], [1, 1], [1, 1])
    for n_rows, n_cols in [(3, 4), (1, 1), (0, 2), (5, 0), (2, 3)]:
        p.set_size(n_rows, n_cols)
        check_shape(p)
        p.check_invariants()

def test_set_size_preserves_overlap_and_pads_targets():
    p = make_puzzle(EditablePuzzle, [[W, F], [F, W]], [1, 1], [1, 1])
    p.set_size(3, 3)
    assert kinds(p) == [[W, F, F], [F, W, F], [F, F, F]]
    assert p.row_targets == [1, 1, 0] and p.col_targets == [1, 1, 0]
    p.set_size(1, 2)
    assert kinds(p) == [[W, F]]
    assert p.row_targets == [1] and p.col_targets == [1, 1]

def test_set_size_auto_target():
    p = make_puzzle(EditablePuzzle, [[W, W], [F, W]], [0, 0], [0, 0])
    p.set_size(2, 3, auto_target=True)
    assert p.row_targets == [2, 1]
    assert p.col_targets == [1, 2, 0]

def test_set_size_rejects_bad_dimensions():
    p = make_puzzle(EditablePuzzle, [[F, F]])
    calls = []
    p.subscribe(lambda: calls.append(1))
    with pytest.raises(InvalidDimension):
        p.set_size(-1, 2)
    with pytest.raises(InvalidDimension):
        p.set_size(2, 1.5)
    assert calls == []
    check_shape(p)
    assert (p.n_rows, p.n_cols) == (1, 2)

def test_set_targets_resize_other_axis_once():
    p = make_puzzle(EditablePuzzle, [[F, F], [F, F]])
    calls = []
    p.subscribe(lambda: calls.append(1))
    p.set_row_targets([1, 0, 2])
    assert p.n_rows == 3 and p.row_targets == [1, 0, 2]
    p.set_col_targets([2])
    assert p.n_cols == 1 and p.col_targets == [2]
    check_shape(p)
    assert len(calls) == 2
    with pytest.raises(ValueError):
        p.set_row_targets([1, -1])

def test_update_wall_targets():
    p = make_puzzle(EditablePuzzle, [[W, F], [W, W]])
    p.update_wall_targets()
    assert p.row_targets == [1, 2] and p.col_targets == [2, 1]

def test_check_invariants_detects_corruption():
    p = make_puzzle(EditablePuzzle, [[F, F]])
    p.row_targets.append(0)
    with pytest.raises(GridInvariantError):
        p.check_invariants()

def test_copies_switch_policy_without_aliasing():
    s = make_puzzle(SolvablePuzzle, [[M, F]], [0], [0, 0])
    e = s.editable_copy()
    assert isinstance(e, EditablePuzzle)
    assert e.set_tile(0, 0, Tile(F)) is True
    assert s.get_tile(0, 0).kind is M
    e.set_size(2, 2)
    assert s.n_rows == 1 and s.row_targets == [0]
    back = e.solvable_copy()
    assert isinstance(back, SolvablePuzzle)
    assert kinds(back) == kinds(e)

def test_update_monsters_follows_dead_ends():
    # walling off (1,2) leaves (0,2) and (2,2) with one open neighbor each
    p = make_puzzle(EditablePuzzle, [[F, F, F], [W, W, F], [F, F, F]])
    p.set_tile(1, 2, Tile(W))
    changed = p.update_monsters(1, 2, monster_glyph="🐺")
    # (0,2) now has only (0,1) walkable; (2,2) only (2,1)
    assert sorted(changed) == [(0, 2), (2, 2)]
    assert p.get_tile(0, 2).kind is M and p.get_tile(0, 2).emoji == "🐺"
    assert p.get_tile(2, 2).kind is M

    calls = []
    p.subscribe(lambda: calls.append(1))
    p.set_tile(1, 2, Tile(F))
    changed = p.update_monsters(1, 2)
    assert sorted(changed) == [(0, 2), (2, 2)]
    assert p.get_tile(0, 2).kind is F and p.get_tile(2, 2).kind is F
    assert len(calls) == 2
    assert p.update_monsters(1, 2) == []
    assert len(calls) == 2

def test_update_monsters_takes_over_walled_in_treasure():
    p = make_puzzle(EditablePuzzle, [[F, T, F], [W, W, F], [F, F, F]])
    p.set_tile(0, 2, Tile(W))
    changed = p.update_monsters(0, 2)
    # (0,1) keeps only (0,0) open, (1,2) only (2,2)
    assert sorted(changed) == [(0, 1), (1, 2)]
    assert p.get_tile(0, 1).kind is M
    assert p.get_tile(1, 2).kind is M
    assert p.get_tile(0, 0).kind is F       # not next to the edit

def test_update_monsters_covers_whole_footprint():
    p = make_puzzle(EditablePuzzle, [[F, W]] * 4)
    changed = p.update_monsters(0, 1, 4, 1)
    assert changed == [(0, 0), (3, 0)]
    assert [row[0] for row in kinds(p)] == [M, F, F, M]

def test_resize_and_retarget_notify_once():
    p = make_puzzle(EditablePuzzle, [[W, F], [F, F]])
    calls = []
    p.subscribe(lambda: calls.append(1))
    p.set_size(3, 3)
    assert len(calls) == 1
    p.set_size(3, 3, auto_target=True)
    assert len(calls) == 2
    p.update_wall_targets()
    assert len(calls) == 3
