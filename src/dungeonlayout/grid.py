# src/dungeonlayout/grid.py
# Puzzle grid: tiles + row/column wall targets, edit policies and change notification.

from __future__ import annotations

import copy
import logging
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .engine import validation
from .tiles import Tile, TileKind, is_fixed_tile, is_solvable_tile

logger = logging.getLogger(__name__)

Cell = Tuple[int, int, Tile]
Listener = Callable[[], None]


class InvalidDimension(ValueError):
    """A resize or target list asked for a negative or non-integer size."""


class GridInvariantError(RuntimeError):
    """Tiles and targets no longer agree with (n_rows, n_cols)."""


def _check_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimension(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidDimension(f"{name} must be >= 0, got {value}")
    return value


def checked_targets(name: str, targets: Sequence[int]) -> List[int]:
    out = list(targets)
    for value in out:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{name} must be non-negative integers, got {value!r}")
    return out


class Puzzle:
    """
    A rectangular grid of tiles plus the wall count each row and column must reach.

    The base class allows no edits; ``SolvablePuzzle`` and ``EditablePuzzle``
    decide which cells ``set_tile`` may write. Listeners registered with
    ``subscribe`` are called with no arguments once per public mutating call.
    """

    def __init__(
        self,
        name: str,
        row_targets: Sequence[int],
        col_targets: Sequence[int],
        tiles: Optional[Sequence[Sequence[Optional[Tile]]]] = None,
    ) -> None:
        self.name = name
        self.row_targets: List[int] = list(row_targets)
        self.col_targets: List[int] = list(col_targets)
        self.n_rows = len(self.row_targets)
        self.n_cols = len(self.col_targets)
        self.tiles: List[List[Tile]] = []
        self._listeners: List[Listener] = []
        self._update_tiles(tiles or [])

    # ---- Change notification ----
    def subscribe(self, listener: Listener) -> Listener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _did_change(self) -> None:
        # Called once at the end of each public mutating method, never from helpers.
        for listener in list(self._listeners):
            listener()

    # ---- Internal bulk helpers (no notification) ----
    def _update_tiles(self, new_tiles: Sequence[Sequence[Optional[Tile]]]) -> None:
        grid: List[List[Tile]] = []
        for row in range(self.n_rows):
            src = new_tiles[row] if row < len(new_tiles) else ()
            cells = []
            for col in range(self.n_cols):
                tile = src[col] if col < len(src) else None
                cells.append(tile if tile is not None else Tile(TileKind.FLOOR))
            grid.append(cells)
        self.tiles = grid

    def check_invariants(self) -> None:
        if len(self.row_targets) != self.n_rows or len(self.col_targets) != self.n_cols:
            raise GridInvariantError(
                f"targets {len(self.row_targets)}x{len(self.col_targets)} "
                f"do not match grid {self.n_rows}x{self.n_cols}"
            )
        if len(self.tiles) != self.n_rows or any(len(row) != self.n_cols for row in self.tiles):
            raise GridInvariantError(f"tile grid does not match {self.n_rows}x{self.n_cols}")

    # ---- Iteration ----
    def __iter__(self) -> Iterator[Cell]:
        return self.tiles_in_rect(0, 0, self.n_rows, self.n_cols)

    def tiles_in_rect(self, row: int, col: int, height: int, width: int) -> Iterator[Cell]:
        """Yield (row, col, tile) for the rectangle, clipped to the grid."""
        for r in range(max(0, row), min(self.n_rows, row + height)):
            for c in range(max(0, col), min(self.n_cols, col + width)):
                yield r, c, self.tiles[r][c]

    def tiles_adjacent_to(self, row: int, col: int, height: int = 1, width: int = 1) -> Iterator[Cell]:
        """
        Yield the in-bounds cells directly above, below, left and right of a
        height x width footprint whose top-left corner is (row, col).
        """
        for r in (row - 1, row + height):
            for c in range(col, col + width):
                if self.in_bounds(r, c):
                    yield r, c, self.tiles[r][c]
        for c in (col - 1, col + width):
            for r in range(row, row + height):
                if self.in_bounds(r, c):
                    yield r, c, self.tiles[r][c]

    # ---- Access ----
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.n_rows and 0 <= col < self.n_cols

    def get_tile(self, row: int, col: int) -> Optional[Tile]:
        if not self.in_bounds(row, col):
            return None
        return self.tiles[row][col]

    def can_edit_tile(self, row: int, col: int) -> bool:
        # Subclasses grant permissions.
        return False

    def set_tile(self, row: int, col: int, tile: Tile) -> bool:
        if not self.can_edit_tile(row, col):
            return False
        self.tiles[row][col] = tile
        self._did_change()
        return True

    # ---- Bulk resets ----
    def unsolve(self) -> "Puzzle":
        """Replace every non-fixed tile with plain floor; monsters and treasure stay."""
        for row, col, tile in self:
            if is_solvable_tile(tile):
                self.tiles[row][col] = Tile(TileKind.FLOOR)
        self._did_change()
        return self

    def unmark_floors(self) -> "Puzzle":
        for row, col, tile in self:
            if tile.kind is TileKind.MARKED_FLOOR:
                self.tiles[row][col] = Tile(TileKind.FLOOR)
        self._did_change()
        return self

    # ---- Validation ----
    def count_walls(self) -> Tuple[List[int], List[int]]:
        return validation.count_walls(self)

    def is_dead_end(self, row: int, col: int) -> bool:
        return validation.is_dead_end(self, row, col)

    def is_solved(self, strict: Optional[bool] = None) -> "validation.SolveResult":
        return validation.is_solved(self, strict=strict)

    # ---- Variants ----
    def _copy_as(self, cls):
        return cls(
            self.name,
            list(self.row_targets),
            list(self.col_targets),
            [[copy.copy(tile) for tile in row] for row in self.tiles],
        )

    def solvable_copy(self) -> "SolvablePuzzle":
        return self._copy_as(SolvablePuzzle)

    def editable_copy(self) -> "EditablePuzzle":
        return self._copy_as(EditablePuzzle)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, size={self.n_rows}x{self.n_cols})"


class SolvablePuzzle(Puzzle):
    """Solving mode: walls and floors toggle freely, monsters and treasure are locked."""

    def can_edit_tile(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and not is_fixed_tile(self.get_tile(row, col))


class EditablePuzzle(Puzzle):
    """Authoring mode: every in-bounds cell is writable and the grid can be resized."""

    def can_edit_tile(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col)

    def _update_wall_targets(self) -> None:
        self.row_targets, self.col_targets = self.count_walls()

    def update_wall_targets(self) -> None:
        """Make the current wall layout the puzzle's targets."""
        self._update_wall_targets()
        self._did_change()

    def _resize(self, n_rows: int, n_cols: int, auto_target: bool = False) -> None:
        _check_dimension("n_rows", n_rows)
        _check_dimension("n_cols", n_cols)
        logger.debug(f"Resizing {self.name!r} from {self.n_rows}x{self.n_cols} to {n_rows}x{n_cols}")
        self.n_rows, self.n_cols = n_rows, n_cols
        self._update_tiles(self.tiles)
        self.row_targets = (self.row_targets + [0] * n_rows)[:n_rows]
        self.col_targets = (self.col_targets + [0] * n_cols)[:n_cols]
        if auto_target:
            self._update_wall_targets()
        self.check_invariants()

    def set_size(self, n_rows: int, n_cols: int, auto_target: bool = False) -> None:
        """
        Resize the grid, keeping overlapping cells and filling new ones with floor.
        Targets are padded with 0 or truncated, or recomputed from the walls when
        ``auto_target`` is set.
        """
        self._resize(n_rows, n_cols, auto_target)
        self._did_change()

    def set_row_targets(self, row_targets: Sequence[int]) -> None:
        targets = checked_targets("row_targets", row_targets)
        self._resize(len(targets), self.n_cols)
        self.row_targets = targets
        self._did_change()

    def set_col_targets(self, col_targets: Sequence[int]) -> None:
        targets = checked_targets("col_targets", col_targets)
        self._resize(self.n_rows, len(targets))
        self.col_targets = targets
        self._did_change()

    def update_monsters(
        self,
        row: int,
        col: int,
        height: int = 1,
        width: int = 1,
        monster_glyph: Optional[str] = None,
    ) -> List[Tuple[int, int]]:
        """
        Re-check the cells around a just-edited footprint: a dead end without a
        monster gets one, a monster that is no longer in a dead end becomes floor.
        Returns the cells that changed.
        """
        changed: List[Tuple[int, int]] = []
        for r, c, tile in list(self.tiles_adjacent_to(row, col, height, width)):
            dead_end = self.is_dead_end(r, c)
            if dead_end and not tile.is_monster:
                monster = Tile(TileKind.MONSTER)
                monster.set_glyph(monster_glyph)
                self.tiles[r][c] = monster
                changed.append((r, c))
            elif tile.is_monster and not dead_end:
                self.tiles[r][c] = Tile(TileKind.FLOOR)
                changed.append((r, c))
        if changed:
            self._did_change()
        return changed
