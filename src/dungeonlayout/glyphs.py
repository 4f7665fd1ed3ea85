# src/dungeonlayout/glyphs.py
"""
Glyph resolver: map any single user-perceived symbol to a tile kind.

Rules are tried in a fixed precedence order and the first match wins:

    Floor, Wall, Treasure, BossMonster, MarkedFloor, Monster

Each rule is a curated symbol set and/or a Unicode pattern. Sets overlap the
broad patterns on purpose ("O" is a wall even though it is an uppercase
letter, "@" is a boss before it could fall through to Monster). Anything
that matches nothing is a Monster, so every symbol resolves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

import regex

from .tiles import Tile, TileKind

logger = logging.getLogger(__name__)

GRAPHEME = regex.compile(r"\X")
VARIATION_SELECTORS = regex.compile("[\ufe0e\ufe0f]")


def graphemes(text: str) -> List[str]:
    """Split text into extended grapheme clusters (multi-codepoint emoji stay whole)."""
    return GRAPHEME.findall(text)


def _bare(glyph: str) -> str:
    return VARIATION_SELECTORS.sub("", glyph)


def _glyph_set(symbols: str) -> FrozenSet[str]:
    # Keep each symbol both as written and without emoji/text presentation selectors.
    clusters = graphemes(symbols)
    return frozenset(clusters) | frozenset(_bare(g) for g in clusters)


@dataclass(frozen=True)
class GlyphRule:
    kind: TileKind
    glyphs: FrozenSet[str] = frozenset()
    pattern: Optional[regex.Pattern] = None

    def matches(self, glyph: str) -> bool:
        if glyph in self.glyphs or _bare(glyph) in self.glyphs:
            return True
        return bool(self.pattern is not None and self.pattern.search(glyph))


FLOOR_RULE = GlyphRule(
    TileKind.FLOOR,
    _glyph_set(".·🔳🔲⬛️⬜️▪️▫️◾️◽️◼️◻️"),
    regex.compile(r"\p{White_Space}"),
)
WALL_RULE = GlyphRule(
    TileKind.WALL,
    _glyph_set("*#O◯◌⭕️🪨🟥🟧🟨🟩🟦🟪🟫"),
)
TREASURE_RULE = GlyphRule(
    TileKind.TREASURE,
    _glyph_set("tT💎👑💍🏆🥇🥈🥉🏅🎖🔮🎁📦🔑🗝"),
)
BOSS_MONSTER_RULE = GlyphRule(
    TileKind.BOSS_MONSTER,
    _glyph_set("@♚♛♔♕🦖🦕🐊🐉🐲🧊"),
    regex.compile(r"[A-SU-WYZ]"),
)
MARKED_FLOOR_RULE = GlyphRule(
    TileKind.MARKED_FLOOR,
    _glyph_set("xX×✖️╳⨯⨉❌⊘🚫💠❖"),
    regex.compile(r"[xX]"),
)
MONSTER_RULE = GlyphRule(
    TileKind.MONSTER,
    _glyph_set(
        "☺︎☹☻♜♝♞♟♖♗♘♙☃️⛄️"
        "🐶🐱🐭🐹🐰🦊🐻🐼🐻‍❄️🐨🐯🦁🐮🐷🐽🐸🐵🙈🙉🙊🐒🐔🐧🐦🐤🐣🐥🦆🦅🦉🦇🐺🐗🐴🦄"
        "🐝🪱🐛🦋🐌🐞🐜🪰🪲🪳🦟🦗🕷🕸🦂🐢🐍🦎🐙🦑🦐🦞🦀🐡🐠🐟🐬🐳🐋🦈🦭"
        "🐅🐆🦓🦍🦧🦣🐘🦛🦏🐪🐫🦒🦘🦬🐃🐂🐄🐎🐖🐏🐑🦙🐐🦌🐕🐩🦮🐕‍🦺🐈🐈‍⬛"
        "🐓🦃🦤🦚🦜🦢🦩🕊🐇🦝🦨🦡🦫🦦🦥🐁🐀🐿🦔🦠"
        "😈👿👹👺🤡👻💀☠️👽👾🤖🎃🧛🧟🧞🧜🧚🗿🛸"
    ),
    regex.compile(r"[a-su-wyz]"),
)

# Order matters: earlier rules shadow later ones.
RULES: Tuple[GlyphRule, ...] = (
    FLOOR_RULE,
    WALL_RULE,
    TREASURE_RULE,
    BOSS_MONSTER_RULE,
    MARKED_FLOOR_RULE,
    MONSTER_RULE,
)

CATCH_ALL = TileKind.MONSTER


def classify(symbol: str) -> TileKind:
    """Resolve the first grapheme of ``symbol`` to a tile kind. Never fails."""
    clusters = graphemes(symbol) if symbol else []
    if not clusters:
        return CATCH_ALL
    glyph = clusters[0]
    for rule in RULES:
        if rule.matches(glyph):
            return rule.kind
    logger.debug(f"Unrecognized glyph {glyph!r}, treating as monster")
    return CATCH_ALL


def parse_tile(symbol: str) -> Tile:
    """Build a default tile of the resolved kind and attach ``symbol`` as its display hint."""
    tile = Tile(classify(symbol))
    tile.set_glyph(symbol)
    return tile
