#!/usr/bin/env python3
# Minimal interactive viewer/editor for puzzle files.
# - Left click: toggle wall/floor      - Right click: toggle marked floor
# - U: unsolve   C: clear marks   E: toggle solving/authoring mode
# - T: (authoring) take targets from current walls   S: save   Esc: quit
# In authoring mode, monsters follow dead ends as walls are drawn.

import argparse, logging
import pygame
from dungeonlayout.levels import read_puzzle_file, write_puzzle_file
from dungeonlayout.grid import EditablePuzzle
from dungeonlayout.render.tileset import Tileset
from dungeonlayout.tiles import Tile, TileKind

def cell_at(pos, tile):
    x, y = pos
    return y // tile - 1, x // tile - 1

def toggle_wall(puzzle, r, c):
    cur = puzzle.get_tile(r, c)
    if cur is None:
        return
    new = Tile(TileKind.FLOOR) if cur.is_wall else Tile(TileKind.WALL)
    if puzzle.set_tile(r, c, new) and isinstance(puzzle, EditablePuzzle):
        puzzle.update_monsters(r, c)

def toggle_mark(puzzle, r, c):
    cur = puzzle.get_tile(r, c)
    if cur is None or cur.fixed:
        return
    kind = TileKind.FLOOR if cur.kind is TileKind.MARKED_FLOOR else TileKind.MARKED_FLOOR
    puzzle.set_tile(r, c, Tile(kind))

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("path", help="Puzzle JSON file")
    ap.add_argument("--tile", type=int, default=32, help="Tile size in pixels")
    ap.add_argument("--edit", action="store_true", help="Start in authoring mode")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    pygame.init()
    clock = pygame.time.Clock()
    puzzle = read_puzzle_file(args.path, editable=args.edit)

    tiles = Tileset(args.tile)
    label_font = pygame.font.SysFont(None, max(10, args.tile // 2))
    state = {"dirty": True, "status": ""}

    def on_change():
        state["dirty"] = True

    def attach(p):
        p.subscribe(on_change)
        on_change()
        return p

    def window_for(p):
        return pygame.display.set_mode(((p.n_cols + 1) * args.tile, (p.n_rows + 1) * args.tile))

    puzzle = attach(puzzle)
    screen = window_for(puzzle)
    running = True
    while running:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                running = False
            elif ev.type == pygame.MOUSEBUTTONDOWN:
                r, c = cell_at(ev.pos, args.tile)
                if ev.button == 1:
                    toggle_wall(puzzle, r, c)
                elif ev.button == 3:
                    toggle_mark(puzzle, r, c)
            elif ev.type == pygame.KEYDOWN:
                if ev.key == pygame.K_ESCAPE:
                    running = False
                elif ev.key == pygame.K_u:
                    puzzle.unsolve()
                elif ev.key == pygame.K_c:
                    puzzle.unmark_floors()
                elif ev.key == pygame.K_e:
                    puzzle.unsubscribe(on_change)
                    if isinstance(puzzle, EditablePuzzle):
                        puzzle = attach(puzzle.solvable_copy())
                    else:
                        puzzle = attach(puzzle.editable_copy())
                elif ev.key == pygame.K_t and isinstance(puzzle, EditablePuzzle):
                    puzzle.update_wall_targets()
                elif ev.key == pygame.K_s:
                    write_puzzle_file(puzzle, args.path, prefer_glyph=True)
                    print(f"[viewer] wrote {args.path}")

        if state["dirty"]:
            state["dirty"] = False
            state["status"] = puzzle.is_solved().reason

        rows, cols = puzzle.count_walls()
        screen.fill((255, 255, 255))
        for c, target in enumerate(puzzle.col_targets):
            color = (0, 0, 0) if cols[c] == target else (200, 0, 0)
            img = label_font.render(str(target), True, color)
            screen.blit(img, img.get_rect(center=((c + 1) * args.tile + args.tile // 2, args.tile // 2)))
        for r, target in enumerate(puzzle.row_targets):
            color = (0, 0, 0) if rows[r] == target else (200, 0, 0)
            img = label_font.render(str(target), True, color)
            screen.blit(img, img.get_rect(center=(args.tile // 2, (r + 1) * args.tile + args.tile // 2)))
        for r, c, tile in puzzle:
            screen.blit(tiles.surface(tile), ((c + 1) * args.tile, (r + 1) * args.tile))

        mode = "EDIT" if isinstance(puzzle, EditablePuzzle) else "SOLVE"
        pygame.display.set_caption(f"{puzzle.name} [{mode}] {state['status']}")
        pygame.display.flip()
        clock.tick(60)

    pygame.quit()

if __name__ == "__main__":
    main()
