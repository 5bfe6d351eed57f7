"""
Move resolution and move availability for the tile merge game.
"""

import logging
from enum import Enum

from numpy import ndarray

from tilemerge.core.gameboard import Board
from tilemerge.errors import InvalidDirectionError

_logger = logging.getLogger(__name__)


class Direction(Enum):
    """The four move directions, valued by their conventional key codes."""

    UP = 'W'
    DOWN = 'S'
    LEFT = 'A'
    RIGHT = 'D'

    @classmethod
    def parse(cls, value) -> 'Direction':
        """
        Convert a direction, a key code or a direction name into a ``Direction``.

        Parameters
        ----------
        value : Direction | str
            The value to convert. Key codes and names are case-insensitive.

        Returns
        -------
        Direction
            The matching direction.

        Raises
        ------
        InvalidDirectionError
            If the value does not name one of the four directions.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            for direction in cls:
                if key in (direction.value, direction.name):
                    return direction
        raise InvalidDirectionError(f'unrecognized direction: {value!r}')


def _lines(size: int, direction: Direction) -> list[list[tuple[int, int]]]:
    """
    Index sequences ``(row, col)`` of every line along the move axis.

    Each line starts at the edge the tiles move toward and walks away from it.
    """
    outward = list(range(size))
    inward = outward[::-1]
    if direction is Direction.UP:
        return [[(y, x) for y in outward] for x in range(size)]
    if direction is Direction.DOWN:
        return [[(y, x) for y in inward] for x in range(size)]
    if direction is Direction.LEFT:
        return [[(y, x) for x in outward] for y in range(size)]
    return [[(y, x) for x in inward] for y in range(size)]


def _step(values: ndarray, merged: ndarray, source: tuple[int, int], target: tuple[int, int]) -> tuple[bool, int]:
    """
    Move the tile at ``source`` one cell toward ``target``.

    Returns
    -------
    changed : bool
        Whether a cell value changed.
    score : int
        Value of the tile created by a merge, 0 if no merge happened.
    """
    current = values[source]
    neighbour = values[target]

    # ##: Merge equal tiles, unless one of them already merged during this move.
    if neighbour != 0 and neighbour == current and not merged[source] and not merged[target]:
        values[source] = 0
        values[target] = neighbour * 2
        merged[target] = True
        return True, int(values[target])

    # ##: Slide into an empty cell.
    if neighbour == 0 and current != 0:
        values[target] = current
        values[source] = 0
        return True, 0

    return False, 0


def resolve_move(board: Board, direction) -> tuple[bool, int]:
    """
    Shift and merge every tile of the board toward one edge.

    Parameters
    ----------
    board : Board
        The board to update. **Modified in-place.**
    direction : Direction | str
        The move direction, or anything ``Direction.parse`` accepts.

    Returns
    -------
    changed : bool
        True if at least one cell value changed.
    score : int
        Sum of the values of every tile created by a merge.

    Raises
    ------
    InvalidDirectionError
        If ``direction`` is not one of the four directions.

    Notes
    -----
    - Lines are swept starting next to the target edge. Each tile then walks cell by cell toward the edge,
      sliding into empty cells and merging with an equal tile, until it reaches the edge.
    - A tile produced by a merge is flagged and cannot merge again until the flags are cleared, so a tile never
      takes part in two merges within the same move.
    - Merge flags are left set; the caller clears them once the move is complete.
    - When nothing changes, the board is left untouched.
    """
    direction = Direction.parse(direction)
    values, merged = board.values, board.merged

    changed = False
    score = 0
    for line in _lines(board.size, direction):
        for start in range(1, board.size):
            if values[line[start]] == 0:
                continue

            # ##>: Walk the tile toward the edge, one cell at a time.
            for position in range(start, 0, -1):
                moved, gained = _step(values, merged, line[position], line[position - 1])
                changed = changed or moved
                score += gained

    _logger.debug('Resolved move %s: changed=%s, score=%d.', direction.name, changed, score)
    return changed, score


def can_move(board: Board) -> bool:
    """
    Check whether any move is still possible on the board.

    Parameters
    ----------
    board : Board
        The board to check.

    Returns
    -------
    bool
        True if the board has an empty cell or two axis-adjacent tiles of equal value, False otherwise.
    """
    values = board.values
    if not values.all():
        return True

    # ##>: Board is full, compare every vertical then horizontal neighbour pair.
    return bool((values[:-1] == values[1:]).any() or (values[:, :-1] == values[:, 1:]).any())


def legal_directions(board: Board) -> list[Direction]:
    """
    Determine which directions would change the board.

    Parameters
    ----------
    board : Board
        The board to check. It is not modified.

    Returns
    -------
    list[Direction]
        Directions in ``UP, DOWN, LEFT, RIGHT`` order for which a tile can slide or merge.

    Notes
    -----
    Computed from the current values only, without resolving any move.
    """
    values = board.values

    # ##>: Compute adjacency once per axis.
    top_rows, bottom_rows = values[:-1, :], values[1:, :]
    left_cols, right_cols = values[:, :-1], values[:, 1:]
    v_can_merge = (top_rows != 0) & (top_rows == bottom_rows)
    h_can_merge = (left_cols != 0) & (left_cols == right_cols)

    mask = {
        Direction.UP: ((top_rows == 0) & (bottom_rows != 0)).any() or v_can_merge.any(),
        Direction.DOWN: ((bottom_rows == 0) & (top_rows != 0)).any() or v_can_merge.any(),
        Direction.LEFT: ((left_cols == 0) & (right_cols != 0)).any() or h_can_merge.any(),
        Direction.RIGHT: ((right_cols == 0) & (left_cols != 0)).any() or h_can_merge.any(),
    }
    return [direction for direction in Direction if mask[direction]]
