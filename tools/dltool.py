#!/usr/bin/env python3
import argparse, logging, sys
from dungeonlayout import config
from dungeonlayout.grid import EditablePuzzle, InvalidDimension
from dungeonlayout.levels import read_puzzle_file, write_puzzle_file

def _read(path, editable=False):
    try:
        return read_puzzle_file(path, editable=editable)
    except (OSError, ValueError) as e:
        raise SystemExit(f"{path}: {e}")

def cmd_new(args):
    rows = args.rows if args.rows is not None else config.FLAGS.default_rows
    cols = args.cols if args.cols is not None else config.FLAGS.default_cols
    puzzle = EditablePuzzle(args.name, [], [])
    try:
        puzzle.set_size(rows, cols)
    except InvalidDimension as e:
        raise SystemExit(f"new: {e}")
    write_puzzle_file(puzzle, args.out)
    print(f"Wrote {args.out}")

def cmd_check(args):
    puzzle = _read(args.path)
    result = puzzle.is_solved(strict=args.strict or None)
    print(f"{puzzle.name}: {result.reason}")
    return 0 if result else 1

def cmd_targets(args):
    puzzle = _read(args.path, editable=True)
    puzzle.update_wall_targets()
    out = args.out or args.path
    write_puzzle_file(puzzle, out, prefer_glyph=True)
    print(f"rows={puzzle.row_targets} cols={puzzle.col_targets}")
    print(f"Wrote {out}")

def cmd_unsolve(args):
    puzzle = _read(args.path, editable=True)
    puzzle.unsolve()
    out = args.out or args.path
    write_puzzle_file(puzzle, out, prefer_glyph=True)
    print(f"Wrote {out}")

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument('-v', '--verbose', action='store_true')
    sub = p.add_subparsers(dest='cmd', required=True)
    p1 = sub.add_parser('new')
    p1.add_argument('--name', type=str, default='untitled')
    p1.add_argument('--rows', type=int)
    p1.add_argument('--cols', type=int)
    p1.add_argument('--out', type=str, required=True)
    p1.set_defaults(func=cmd_new)
    p2 = sub.add_parser('check')
    p2.add_argument('path')
    p2.add_argument('--strict', action='store_true', help='Also check treasure rooms and 2x2 floor blocks')
    p2.set_defaults(func=cmd_check)
    p3 = sub.add_parser('targets')
    p3.add_argument('path')
    p3.add_argument('--out', type=str)
    p3.set_defaults(func=cmd_targets)
    p4 = sub.add_parser('unsolve')
    p4.add_argument('path')
    p4.add_argument('--out', type=str)
    p4.set_defaults(func=cmd_unsolve)
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args) or 0

if __name__ == '__main__':
    sys.exit(main())
