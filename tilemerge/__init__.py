# -*- coding: utf-8 -*-
"""
Sliding tile merge puzzle engine.
"""

from tilemerge.config import GameConfiguration
from tilemerge.core import Board, Direction, can_move, resolve_move, spawn_tile
from tilemerge.envs import GameState, Snapshot, TileMergeGame, apply_move, new_game, snapshot
from tilemerge.errors import ConfigurationError, GridIndexError, InvalidDirectionError

__all__ = [
    "GameConfiguration",
    "Board",
    "Direction",
    "resolve_move",
    "spawn_tile",
    "can_move",
    "GameState",
    "Snapshot",
    "TileMergeGame",
    "new_game",
    "apply_move",
    "snapshot",
    "ConfigurationError",
    "GridIndexError",
    "InvalidDirectionError",
]
