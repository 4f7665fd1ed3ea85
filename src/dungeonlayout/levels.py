# src/dungeonlayout/levels.py
# Puzzle specification shape: {name, rowTargets, colTargets, tiles} <-> Puzzle.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

from .glyphs import graphemes, parse_tile
from .grid import EditablePuzzle, Puzzle, SolvablePuzzle, checked_targets

logger = logging.getLogger(__name__)

TileRows = Sequence[Union[str, Sequence[str]]]


def _split_rows(rows: TileRows) -> List[List[str]]:
    # A row may be one string ("m..#") or a list of glyph strings.
    out = []
    for row in rows:
        if isinstance(row, str):
            out.append(graphemes(row))
        else:
            out.append([str(g) for g in row])
    return out


@dataclass
class PuzzleSpec:
    name: str
    row_targets: List[int]
    col_targets: List[int]
    tiles: List[List[str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleSpec":
        """Accepts the camelCase keys of the file format; snake_case is tolerated."""
        try:
            row_targets = data["rowTargets"] if "rowTargets" in data else data["row_targets"]
            col_targets = data["colTargets"] if "colTargets" in data else data["col_targets"]
        except KeyError as e:
            raise ValueError(f"puzzle spec is missing {e.args[0]!r}") from None
        return cls(
            name=str(data.get("name", "")),
            row_targets=checked_targets("rowTargets", row_targets),
            col_targets=checked_targets("colTargets", col_targets),
            tiles=_split_rows(data.get("tiles", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rowTargets": list(self.row_targets),
            "colTargets": list(self.col_targets),
            "tiles": [list(row) for row in self.tiles],
        }


def load_puzzle(spec: Union[PuzzleSpec, Dict[str, Any]], editable: bool = False) -> Puzzle:
    """
    Build a puzzle from a spec. Each glyph goes through the resolver on its own;
    the grid size comes from the target lists (extra glyphs are dropped,
    missing ones become floor).
    """
    if not isinstance(spec, PuzzleSpec):
        spec = PuzzleSpec.from_dict(spec)
    cls = EditablePuzzle if editable else SolvablePuzzle
    tiles = [[parse_tile(glyph) for glyph in row] for row in spec.tiles]
    puzzle = cls(spec.name, spec.row_targets, spec.col_targets, tiles)
    logger.debug(f"Loaded {cls.__name__} {spec.name!r} ({puzzle.n_rows}x{puzzle.n_cols})")
    return puzzle


def dump_puzzle(puzzle: Puzzle, prefer_glyph: bool = False) -> PuzzleSpec:
    """Spec for a puzzle, using ASCII forms unless ``prefer_glyph`` asks for the typed glyphs."""
    rows = []
    for tile_row in puzzle.tiles:
        rows.append([(tile.glyph or tile.ascii) if prefer_glyph else tile.ascii for tile in tile_row])
    return PuzzleSpec(puzzle.name, list(puzzle.row_targets), list(puzzle.col_targets), rows)


def read_puzzle_file(path: str, editable: bool = False) -> Puzzle:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return load_puzzle(data, editable=editable)


def write_puzzle_file(puzzle: Puzzle, path: str, prefer_glyph: bool = False) -> None:
    spec = dump_puzzle(puzzle, prefer_glyph=prefer_glyph)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(spec.to_dict(), f, ensure_ascii=False, indent=2)
        f.write("\n")
