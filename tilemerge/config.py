# -*- coding: utf-8 -*-
"""
Game configuration.
"""
from dataclasses import dataclass

from tilemerge.errors import ConfigurationError

DEFAULT_SIZE = 4
MIN_SIZE = 2


@dataclass(frozen=True)
class GameConfiguration:
    """
    Settings used to build a new game.

    Attributes
    ----------
    size : int
        Side of the square grid, at least 2.
    four_probability : float
        Probability for a spawned tile to be a 4 instead of a 2.
    initial_tiles : int
        Number of tiles placed on the empty grid when the game starts.
    goal : int | None
        Merged tile value that marks the game as won. ``None`` disables the win condition.
    """

    size: int = DEFAULT_SIZE
    four_probability: float = 0.11
    initial_tiles: int = 2
    goal: int | None = None

    def __post_init__(self):
        if not isinstance(self.size, int) or self.size < MIN_SIZE:
            raise ConfigurationError(f'size must be an integer >= {MIN_SIZE}, got {self.size!r}')
        if not 0.0 <= self.four_probability <= 1.0:
            raise ConfigurationError(f'four_probability must be in [0, 1], got {self.four_probability}')
        if not 0 <= self.initial_tiles <= self.size * self.size:
            raise ConfigurationError(f'initial_tiles must be in [0, {self.size * self.size}], got {self.initial_tiles}')
        if self.goal is not None and (self.goal < 4 or self.goal & (self.goal - 1)):
            raise ConfigurationError(f'goal must be a power of two >= 4, got {self.goal}')
