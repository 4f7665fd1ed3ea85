# src/dungeonlayout/render/tileset.py
from __future__ import annotations
import pygame
from functools import lru_cache
from typing import Callable, Tuple

from ..tiles import Tile, TileKind

def choose_form(tile: Tile, is_displayable: Callable[[str], bool]) -> str:
    """
    Pick what to draw for a tile: the preferred form (or the pictograph when
    there is none) if the display can show it, else the ASCII fallback.
    """
    preferred, pictographic, ascii_form = tile.display_forms()
    glyph = preferred or pictographic
    if glyph and is_displayable(glyph):
        return glyph
    return ascii_form

class FontGlyphSupport:
    """Displayability test backed by a pygame font: every codepoint needs a glyph."""
    def __init__(self, font):
        self.font = font

    def __call__(self, text: str) -> bool:
        # Variation selectors and joiners have no glyph of their own.
        core = "".join(ch for ch in text if ch not in "\u200d\ufe0e\ufe0f")
        if not core:
            return False
        try:
            metrics = self.font.metrics(core)
        except (pygame.error, UnicodeError):
            return False
        return bool(metrics) and all(m is not None for m in metrics)

def _fallback_color(kind: TileKind) -> Tuple[int, int, int, int]:
    if kind is TileKind.WALL:         return ( 80,  80,  80, 255)
    if kind is TileKind.TREASURE:     return (255, 220,   0, 255)
    if kind is TileKind.BOSS_MONSTER: return (220,  60,  60, 255)
    if kind is TileKind.MONSTER:      return (240, 140, 140, 255)
    if kind is TileKind.MARKED_FLOOR: return (200, 200, 255, 255)
    return (220, 220, 220, 255)

class Tileset:
    """
    Tiny cached tile painter:
      - Background color by tile kind
      - Glyph chosen with choose_form() against this font
      - Returns pygame.Surface of exactly (tile_size, tile_size)
    """
    def __init__(self, tile_size: int, font=None):
        self.tile_size = tile_size
        self.font = font or pygame.font.SysFont(None, max(10, tile_size * 3 // 4))
        self.supports = FontGlyphSupport(self.font)

    def text_for(self, tile: Tile) -> str:
        return choose_form(tile, self.supports)

    def surface(self, tile: Tile) -> pygame.Surface:
        return self.get(self.text_for(tile), tile.kind)

    @lru_cache(maxsize=512)
    def get(self, text: str, kind: TileKind) -> pygame.Surface:
        img = pygame.Surface((self.tile_size, self.tile_size), pygame.SRCALPHA)
        img.fill(_fallback_color(kind))
        if text.strip():
            txt = self.font.render(text, True, (0, 0, 0))
            r = txt.get_rect(center=(self.tile_size // 2, self.tile_size // 2))
            img.blit(txt, r)
        return img
