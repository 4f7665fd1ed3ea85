# src/dungeonlayout/tiles.py
# Tile taxonomy: a closed set of kinds with capability flags and default display forms.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import regex

EMOJI = regex.compile(r"\p{Emoji}")


class TileKind(Enum):
    WALL = "wall"
    FLOOR = "floor"
    MARKED_FLOOR = "marked_floor"
    ROOM_FLOOR = "room_floor"
    HALL_FLOOR = "hall_floor"
    TREASURE = "treasure"
    MONSTER = "monster"
    BOSS_MONSTER = "boss_monster"


@dataclass(frozen=True)
class Capabilities:
    walkable: bool
    solvable: bool
    fixed: bool


CAPABILITIES: Dict[TileKind, Capabilities] = {
    TileKind.WALL:         Capabilities(walkable=False, solvable=True,  fixed=False),
    TileKind.FLOOR:        Capabilities(walkable=True,  solvable=True,  fixed=False),
    TileKind.MARKED_FLOOR: Capabilities(walkable=True,  solvable=True,  fixed=False),
    TileKind.ROOM_FLOOR:   Capabilities(walkable=True,  solvable=True,  fixed=False),
    TileKind.HALL_FLOOR:   Capabilities(walkable=True,  solvable=True,  fixed=False),
    TileKind.TREASURE:     Capabilities(walkable=True,  solvable=False, fixed=True),
    TileKind.MONSTER:      Capabilities(walkable=True,  solvable=False, fixed=True),
    TileKind.BOSS_MONSTER: Capabilities(walkable=True,  solvable=False, fixed=True),
}

# (ascii, emoji, html). ASCII forms must survive a URI unescaped.
DEFAULT_DISPLAY: Dict[TileKind, Tuple[str, str, Optional[str]]] = {
    TileKind.WALL:         ("*", "🟫", None),
    TileKind.FLOOR:        (".", "⬜️", None),
    TileKind.MARKED_FLOOR: ("x", "🔳", "×"),
    TileKind.ROOM_FLOOR:   (".", "⬜️", None),
    TileKind.HALL_FLOOR:   (".", "⬜️", None),
    TileKind.TREASURE:     ("T", "💎", None),
    TileKind.MONSTER:      ("m", "🦁", None),
    TileKind.BOSS_MONSTER: ("M", "🐲", None),
}

FLOOR_KINDS = frozenset({
    TileKind.FLOOR, TileKind.MARKED_FLOOR, TileKind.ROOM_FLOOR, TileKind.HALL_FLOOR,
})
MONSTER_KINDS = frozenset({TileKind.MONSTER, TileKind.BOSS_MONSTER})
FIXED_KINDS = frozenset(k for k, caps in CAPABILITIES.items() if caps.fixed)


@dataclass
class Tile:
    """
    One grid cell. Identity is ``kind``; the remaining fields are display hints:
      - ascii: plain fallback, always available
      - emoji: pictographic form (should render square)
      - glyph: the exact symbol the author typed, when it differs from ascii
      - html:  override display form (MarkedFloor shows ``×``)
    """
    kind: TileKind
    ascii: str = ""
    emoji: str = ""
    glyph: Optional[str] = None
    html: Optional[str] = None

    def __post_init__(self) -> None:
        ascii_form, emoji_form, html_form = DEFAULT_DISPLAY[self.kind]
        self.ascii = self.ascii or ascii_form
        self.emoji = self.emoji or emoji_form
        if self.html is None:
            self.html = html_form

    @property
    def walkable(self) -> bool:
        return CAPABILITIES[self.kind].walkable

    @property
    def solvable(self) -> bool:
        return CAPABILITIES[self.kind].solvable

    @property
    def fixed(self) -> bool:
        return CAPABILITIES[self.kind].fixed

    @property
    def is_wall(self) -> bool:
        return self.kind is TileKind.WALL

    @property
    def is_floor(self) -> bool:
        return self.kind in FLOOR_KINDS

    @property
    def is_monster(self) -> bool:
        return self.kind in MONSTER_KINDS

    @property
    def is_treasure(self) -> bool:
        return self.kind is TileKind.TREASURE

    def set_glyph(self, glyph: Optional[str]) -> None:
        """
        Remember the symbol the author typed without changing the kind.
        A new ASCII-only symbol also replaces the ascii fallback; a non-ASCII
        symbol with the Emoji property replaces the pictographic form.
        """
        if not glyph:
            return
        if glyph != self.ascii:
            self.glyph = glyph
            if glyph.isascii():
                self.ascii = glyph
        # '#', '*' and digits carry the Emoji property (keycap bases) but are not pictographs.
        if not glyph.isascii() and EMOJI.search(glyph):
            self.emoji = glyph

    def display_forms(self) -> Tuple[Optional[str], str, str]:
        """(preferred, pictographic, ascii) for the rendering side to choose from."""
        return (self.html or self.glyph, self.emoji, self.ascii)


def is_walkable_tile(tile: Optional[Tile]) -> bool:
    return tile is not None and tile.walkable

def is_fixed_tile(tile: Optional[Tile]) -> bool:
    return tile is not None and tile.fixed

def is_solvable_tile(tile: Optional[Tile]) -> bool:
    return tile is not None and tile.solvable
