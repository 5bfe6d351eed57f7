"""
Grid model of the tile merge game and the tile spawner that feeds it.
"""

import logging
from typing import NamedTuple

from numpy import argwhere, asarray, int64, zeros
from numpy.random import Generator

from tilemerge.config import MIN_SIZE
from tilemerge.errors import ConfigurationError, GridIndexError

# ##>: Tile spawn probabilities (89% for 2, 11% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.89, 4: 0.11}

_logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    """
    Read-only view of one grid cell.

    Attributes
    ----------
    value : int
        Tile value, 0 when the cell is empty.
    merged : bool
        Whether the tile was produced by a merge during the move being resolved.
    """

    value: int
    merged: bool


class Board:
    """
    Square grid of tile values with a per-cell merge flag.

    Cells are addressed as ``(x, y)`` where ``x`` is the column and ``y`` the row; row 0 is the top edge and
    column 0 the left edge. The underlying arrays are indexed ``[y, x]``.

    Attributes
    ----------
    values : ndarray
        ``(size, size)`` integer array of tile values.
    merged : ndarray
        ``(size, size)`` boolean array of merge flags.
    """

    def __init__(self, size: int):
        """
        Create an empty board.

        Parameters
        ----------
        size : int
            Side of the square grid, at least 2.
        """
        if size < MIN_SIZE:
            raise ConfigurationError(f'board size must be >= {MIN_SIZE}, got {size}')
        self.size = size
        self.values = zeros((size, size), dtype=int64)
        self.merged = zeros((size, size), dtype=bool)

    @classmethod
    def from_values(cls, rows) -> 'Board':
        """
        Build a board from row-major tile values.

        Parameters
        ----------
        rows : array_like
            Square nested sequence (or array) of tile values, 0 for empty cells.

        Returns
        -------
        Board
            A board holding a copy of the given values, with every merge flag cleared.

        Raises
        ------
        ConfigurationError
            If the values are not square integers, or contain something other than 0 or a power of two >= 2.
        """
        raw = asarray(rows)
        if raw.dtype.kind not in 'iuf' or (raw != raw.astype(int64)).any():
            raise ConfigurationError('tile values must be integers')
        grid = raw.astype(int64)
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
            raise ConfigurationError(f'board must be square, got shape {grid.shape}')

        tiles = grid[grid != 0]
        if (tiles < 2).any() or (tiles & (tiles - 1)).any():
            raise ConfigurationError('tile values must be 0 or a power of two >= 2')

        board = cls(grid.shape[0])
        board.values[...] = grid
        return board

    def _check(self, x: int, y: int):
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise GridIndexError(f'cell ({x}, {y}) is outside a {self.size}x{self.size} board')

    def get(self, x: int, y: int) -> Cell:
        """Return the cell at column ``x`` and row ``y``."""
        self._check(x, y)
        return Cell(int(self.values[y, x]), bool(self.merged[y, x]))

    def set(self, x: int, y: int, value: int):
        """Store ``value`` at column ``x`` and row ``y``."""
        self._check(x, y)
        self.values[y, x] = value

    def is_empty(self, x: int, y: int) -> bool:
        """Check whether the cell at column ``x`` and row ``y`` holds no tile."""
        self._check(x, y)
        return bool(self.values[y, x] == 0)

    def is_full(self) -> bool:
        """Check whether every cell holds a tile."""
        return bool(self.values.all())

    def empty_cells(self) -> list[tuple[int, int]]:
        """Coordinates ``(x, y)`` of every empty cell, in row-major order."""
        return [(int(col), int(row)) for row, col in argwhere(self.values == 0)]

    def clear_merge_flags(self):
        """Reset the merge flag of every cell."""
        self.merged[...] = False
        _logger.debug('Merge flags cleared.')

    def copy(self) -> 'Board':
        """Return an independent copy of the board, merge flags included."""
        board = Board(self.size)
        board.values[...] = self.values
        board.merged[...] = self.merged
        return board

    def to_list(self) -> list[list[int]]:
        """Row-major tile values as nested lists."""
        return self.values.tolist()

    def __repr__(self) -> str:
        return f'Board(size={self.size}, values={self.to_list()})'


def spawn_tile(board: Board, generator: Generator, four_probability: float = TILE_SPAWN_PROBS[4]) -> bool:
    """
    Place a new tile in a random empty cell.

    Parameters
    ----------
    board : Board
        The board to fill. **Modified in-place.**
    generator : Generator
        Random number generator used for both the cell and the tile value.
    four_probability : float, optional
        Probability for the new tile to be a 4 (default 0.11).

    Returns
    -------
    bool
        True if a tile was placed, False if the board was already full.

    Notes
    -----
    - The cell is drawn uniformly among the empty cells, so the call always terminates.
    - The value is 4 when a uniform draw in [0, 1) exceeds ``1 - four_probability``, else 2.
    """
    available_cells = board.empty_cells()
    if not available_cells:
        _logger.debug('Board is full, no tile spawned.')
        return False

    # ##: Randomly choose a cell then the tile value.
    col, row = available_cells[generator.integers(len(available_cells))]
    value = 4 if generator.random() > 1.0 - four_probability else 2

    board.values[row, col] = value
    _logger.debug('Spawned %d at (%d, %d).', value, col, row)
    return True

