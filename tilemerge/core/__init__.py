# -*- coding: utf-8 -*-
"""
Core mechanics of the tile merge game.

It includes the grid model, the tile spawner, the move resolver and the detection of the terminal state.
"""

from .gameboard import TILE_SPAWN_PROBS, Board, Cell, spawn_tile
from .gamemove import Direction, can_move, legal_directions, resolve_move

__all__ = [
    "TILE_SPAWN_PROBS",
    "Board",
    "Cell",
    "spawn_tile",
    "Direction",
    "resolve_move",
    "can_move",
    "legal_directions",
]
