# src/dungeonlayout/engine/validation.py
# Win-state checks for a puzzle grid. Pure functions over the grid; nothing here mutates.
#
# Checks run in order and stop at the first failure:
#   1) wall counts per row, then per column, equal the targets
#   2) every monster sits in a dead end and every dead end holds a monster
#   3) (strict only) treasure sits in a 3x3 treasure room; no 2x2 floor block
#      exists unless a treasure is in its 8-neighborhood
# Without strict, check 3 is skipped: puzzles with a misplaced treasure or an
# open 2x2 hall are accepted.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from .. import config
from ..tiles import is_walkable_tile

if TYPE_CHECKING:
    from ..grid import Puzzle

logger = logging.getLogger(__name__)

XY = Tuple[int, int]

ROOM_SIZE = 3


@dataclass(frozen=True)
class SolveResult:
    solved: bool
    reason: str
    check: Optional[str] = None   # name of the failing check, None when solved

    def __bool__(self) -> bool:
        return self.solved


SOLVED = SolveResult(True, "Valid dungeon layout.")


def count_walls(puzzle: "Puzzle") -> Tuple[List[int], List[int]]:
    """Wall tally per row and per column in one pass; empty lines count 0."""
    row_counts = [0] * puzzle.n_rows
    col_counts = [0] * puzzle.n_cols
    for row, col, tile in puzzle:
        if tile.is_wall:
            row_counts[row] += 1
            col_counts[col] += 1
    return row_counts, col_counts


def is_dead_end(puzzle: "Puzzle", row: int, col: int) -> bool:
    """A non-wall cell with exactly one walkable neighbor (up/down/left/right)."""
    tile = puzzle.get_tile(row, col)
    if tile is None or tile.is_wall:
        return False
    walkable = sum(1 for _, _, t in puzzle.tiles_adjacent_to(row, col) if is_walkable_tile(t))
    return walkable == 1


def treasure_room_at(puzzle: "Puzzle", row: int, col: int) -> Optional[XY]:
    """
    Top-left corner of a treasure room containing the treasure at (row, col),
    or None. A room is a 3x3 block holding this treasure and 8 floor tiles,
    whose surrounding ring touches exactly one floor tile and no monster.
    """
    for top in range(row - ROOM_SIZE + 1, row + 1):
        for left in range(col - ROOM_SIZE + 1, col + 1):
            if not (puzzle.in_bounds(top, left)
                    and puzzle.in_bounds(top + ROOM_SIZE - 1, left + ROOM_SIZE - 1)):
                continue
            block = list(puzzle.tiles_in_rect(top, left, ROOM_SIZE, ROOM_SIZE))
            if any(not t.is_floor for r, c, t in block if (r, c) != (row, col)):
                continue
            ring = [t for _, _, t in puzzle.tiles_adjacent_to(top, left, ROOM_SIZE, ROOM_SIZE)]
            if sum(1 for t in ring if t.is_floor) != 1:
                continue
            if any(t.is_monster for t in ring):
                continue
            return (top, left)
    return None


def open_block_without_treasure(puzzle: "Puzzle") -> Optional[XY]:
    """Top-left corner of the first 2x2 all-floor block with no treasure nearby."""
    for row in range(puzzle.n_rows - 1):
        for col in range(puzzle.n_cols - 1):
            if not all(t.is_floor for _, _, t in puzzle.tiles_in_rect(row, col, 2, 2)):
                continue
            # 8-neighborhood of the block: the 4x4 square around it
            if any(t.is_treasure for _, _, t in puzzle.tiles_in_rect(row - 1, col - 1, 4, 4)):
                continue
            return (row, col)
    return None


def _check_rooms(puzzle: "Puzzle") -> Optional[SolveResult]:
    for row, col, tile in puzzle:
        if tile.is_treasure and treasure_room_at(puzzle, row, col) is None:
            return SolveResult(False, f"Some treasure is not in a treasure room: ({row}, {col}).", "treasure")
    block = open_block_without_treasure(puzzle)
    if block is not None:
        return SolveResult(False, f"Some 2x2 block of floor has no treasure nearby: {block}.", "open_blocks")
    return None


def is_solved(puzzle: "Puzzle", strict: Optional[bool] = None) -> SolveResult:
    if strict is None:
        strict = config.FLAGS.strict_rooms

    row_counts, col_counts = count_walls(puzzle)
    if row_counts != list(puzzle.row_targets):
        return SolveResult(False, "Row wall counts do not match targets.", "rows")
    if col_counts != list(puzzle.col_targets):
        return SolveResult(False, "Column wall counts do not match targets.", "cols")

    for row, col, tile in puzzle:
        dead_end = is_dead_end(puzzle, row, col)
        if tile.is_monster and not dead_end:
            return SolveResult(False, f"Some monster is not in a dead end: ({row}, {col}).", "monsters")
        if not tile.is_monster and dead_end:
            return SolveResult(False, f"Some dead end has no monster: ({row}, {col}).", "monsters")

    if strict:
        failure = _check_rooms(puzzle)
        if failure is not None:
            return failure
    else:
        logger.debug(f"{puzzle.name!r}: treasure rooms and open blocks not checked")

    return SOLVED
