# -*- coding: utf-8 -*-
"""
Game sessions built on top of the core mechanics.

This module provides the `TileMergeGame` class, the functional interface it is built on and a buffered key input.
"""

from .buffered import KeyBuffer
from .game import GameState, Snapshot, TileMergeGame, apply_move, new_game, snapshot

__all__ = ["GameState", "Snapshot", "TileMergeGame", "new_game", "apply_move", "snapshot", "KeyBuffer"]
