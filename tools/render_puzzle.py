#!/usr/bin/env python3
# Render a puzzle JSON file to a PNG using Pillow.
# Cells show the ASCII form of each tile; targets run along the top and left.

import argparse, os
from PIL import Image, ImageDraw, ImageFont
from dungeonlayout.levels import read_puzzle_file
from dungeonlayout.tiles import TileKind

def _fallback_color(kind):
    if kind is TileKind.WALL:
        return (80, 80, 80, 255)
    if kind is TileKind.TREASURE:
        return (255, 220, 0, 255)
    if kind is TileKind.BOSS_MONSTER:
        return (220, 60, 60, 255)
    if kind is TileKind.MONSTER:
        return (240, 140, 140, 255)
    if kind is TileKind.MARKED_FLOOR:
        return (200, 200, 255, 255)
    return (220, 220, 220, 255)

def _draw_centered(draw, box, text, font, fill):
    x0, y0, x1, y1 = box
    tw = draw.textlength(text, font=font)
    th = 8
    draw.text((x0 + (x1 - x0 - tw) / 2, y0 + (y1 - y0 - th) / 2), text, fill=fill, font=font)

def render_puzzle(path, out_png, tile_size=16, margin=0):
    puzzle = read_puzzle_file(path)
    font = ImageFont.load_default()
    w = (puzzle.n_cols + 1) * tile_size + 2 * margin
    h = (puzzle.n_rows + 1) * tile_size + 2 * margin
    canvas = Image.new("RGBA", (w, h), (255, 255, 255, 255))
    draw = ImageDraw.Draw(canvas)
    counts_rows, counts_cols = puzzle.count_walls()
    for c, target in enumerate(puzzle.col_targets):
        x0 = margin + (c + 1) * tile_size
        fill = (0, 0, 0, 255) if counts_cols[c] == target else (200, 0, 0, 255)
        _draw_centered(draw, (x0, margin, x0 + tile_size, margin + tile_size), str(target), font, fill)
    for r, target in enumerate(puzzle.row_targets):
        y0 = margin + (r + 1) * tile_size
        fill = (0, 0, 0, 255) if counts_rows[r] == target else (200, 0, 0, 255)
        _draw_centered(draw, (margin, y0, margin + tile_size, y0 + tile_size), str(target), font, fill)
    for r, c, tile in puzzle:
        x0 = margin + (c + 1) * tile_size
        y0 = margin + (r + 1) * tile_size
        box = (x0, y0, x0 + tile_size, y0 + tile_size)
        draw.rectangle((x0, y0, x0 + tile_size - 1, y0 + tile_size - 1), fill=_fallback_color(tile.kind))
        if tile.ascii.strip() and not tile.is_floor:
            _draw_centered(draw, box, tile.ascii, font, (0, 0, 0, 255))
    out_dir = os.path.dirname(out_png)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    canvas.save(out_png)

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("path", help="Puzzle JSON file")
    ap.add_argument("--out", type=str, default=None, help="PNG path (default: next to the input)")
    ap.add_argument("--tile", type=int, default=16, help="Tile size in pixels")
    args = ap.parse_args()

    out = args.out or os.path.splitext(args.path)[0] + ".png"
    try:
        render_puzzle(args.path, out, tile_size=args.tile)
    except (OSError, ValueError) as e:
        raise SystemExit(f"{args.path}: {e}")
    print(f"Wrote {out}")

if __name__ == "__main__":
    main()
