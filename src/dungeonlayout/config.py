# src/dungeonlayout/config.py
from dataclasses import dataclass

@dataclass(frozen=True)
class RuleFlags:
    # Treasure rooms and 2x2 open blocks are only checked when strict.
    strict_rooms: bool = False
    # Size used by tooling when it creates a blank puzzle.
    default_rows: int = 8
    default_cols: int = 8

# Global flags (can be swapped by launcher)
FLAGS = RuleFlags()
