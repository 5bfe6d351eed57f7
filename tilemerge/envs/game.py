"""Game sessions: state, moves and read access for the rendering and input loop."""

import logging
from dataclasses import dataclass, field, replace
from typing import NamedTuple

from numpy import ndarray
from numpy.random import Generator, default_rng

from tilemerge.config import GameConfiguration
from tilemerge.core.gameboard import Board, spawn_tile
from tilemerge.core.gamemove import Direction, can_move, legal_directions, resolve_move

_logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """
    Everything a single game owns.

    Attributes
    ----------
    board : Board
        The grid of tiles.
    score : int
        Sum of every tile created by a merge since the game started.
    finished : bool
        True once no move remains; the game then accepts no further moves.
    won : bool
        True once a merge produces a tile of at least the configured goal. Never set when no goal is configured.
    last_move_changed_board : bool
        Whether the last requested move changed the board.
    config : GameConfiguration
        Settings the game was built with.
    generator : Generator
        Random number generator used for spawning.
    """

    board: Board
    score: int = 0
    finished: bool = False
    won: bool = False
    last_move_changed_board: bool = False
    config: GameConfiguration = field(default_factory=GameConfiguration)
    generator: Generator = field(default_factory=default_rng, repr=False)


class Snapshot(NamedTuple):
    """Read-only copy of the state handed to the caller for rendering."""

    grid: ndarray
    score: int
    finished: bool
    won: bool


def _spawn(state: GameState) -> bool:
    """Spawn one tile then decide whether the game can go on."""
    spawned = spawn_tile(state.board, state.generator, state.config.four_probability)
    if not can_move(state.board):
        state.finished = True
        _logger.info('Game finished with score %d.', state.score)
    return spawned


def new_game(size: int | None = None, config: GameConfiguration | None = None, seed: int | None = None) -> GameState:
    """
    Start a new game.

    Parameters
    ----------
    size : int, optional
        Side of the grid. Overrides the size of ``config`` when both are given.
    config : GameConfiguration, optional
        Game settings (default configuration when omitted).
    seed : int, optional
        Random number generator seed for reproducibility.

    Returns
    -------
    GameState
        A fresh state: score 0, not finished, with the configured number of initial tiles placed.

    Raises
    ------
    ConfigurationError
        If ``size`` is smaller than 2.
    """
    config = config or GameConfiguration()
    if size is not None and size != config.size:
        config = replace(config, size=size)

    state = GameState(board=Board(config.size), config=config, generator=default_rng(seed))
    for _ in range(config.initial_tiles):
        _spawn(state)

    _logger.info('New %dx%d game started.', config.size, config.size)
    return state


def apply_move(state: GameState, direction) -> bool:
    """
    Play one move.

    Parameters
    ----------
    state : GameState
        The game to update. **Modified in-place.**
    direction : Direction | str
        The move direction, or anything ``Direction.parse`` accepts.

    Returns
    -------
    bool
        True if the move changed the board, False otherwise.

    Raises
    ------
    InvalidDirectionError
        If ``direction`` is not one of the four directions.

    Notes
    -----
    - A move that changes nothing leaves the state as it was; the caller may retry another direction.
    - After a changing move, a tile is spawned, merge flags are cleared and the terminal state is re-evaluated.
    - A finished game ignores every move.
    """
    direction = Direction.parse(direction)
    if state.finished:
        _logger.debug('Move %s ignored, game is finished.', direction.name)
        state.last_move_changed_board = False
        return False

    changed, gained = resolve_move(state.board, direction)
    state.last_move_changed_board = changed
    if not changed:
        return False

    state.score += gained
    goal = state.config.goal
    if goal is not None and not state.won and (state.board.values[state.board.merged] >= goal).any():
        state.won = True
        _logger.info('Goal %d reached with score %d.', goal, state.score)

    _spawn(state)
    state.board.clear_merge_flags()
    return True


def snapshot(state: GameState) -> Snapshot:
    """Copy what the caller needs to draw the game."""
    return Snapshot(grid=state.board.values.copy(), score=state.score, finished=state.finished, won=state.won)


class TileMergeGame:
    """
    Tile merge game session.

    This class owns a single ``GameState`` and replaces it wholesale when a new game is requested.
    """

    def __init__(self, config: GameConfiguration | None = None, seed: int | None = None):
        """
        Start the first game.

        Parameters
        ----------
        config : GameConfiguration, optional
            Game settings (default configuration when omitted).
        seed : int, optional
            Random number generator seed for reproducibility.
        """
        self.config = config or GameConfiguration()
        self._state = new_game(config=self.config, seed=seed)

    @property
    def size(self) -> int:
        """Side of the grid."""
        return self.config.size

    @property
    def state(self) -> GameState:
        """The current game state."""
        return self._state

    @property
    def score(self) -> int:
        """The current score."""
        return self._state.score

    @property
    def is_finished(self) -> bool:
        """True if no more moves are possible."""
        return self._state.finished

    @property
    def is_won(self) -> bool:
        """True if the configured goal was reached."""
        return self._state.won

    @property
    def observation(self) -> ndarray:
        """Copy of the current grid values."""
        return self._state.board.values.copy()

    @property
    def legal_directions(self) -> list[Direction]:
        """Directions that would change the board."""
        return legal_directions(self._state.board)

    def snapshot(self) -> Snapshot:
        """Read-only copy of the current state."""
        return snapshot(self._state)

    def reset(self, seed: int | None = None) -> ndarray:
        """
        Discard the current game and start a new one.

        Parameters
        ----------
        seed : int, optional
            Random number generator seed for reproducibility.

        Returns
        -------
        ndarray
            The grid of the new game.
        """
        self._state = new_game(config=self.config, seed=seed)
        return self.observation

    def step(self, direction) -> tuple[ndarray, int, bool]:
        """
        Apply a move.

        Parameters
        ----------
        direction : Direction | str
            The move direction, or anything ``Direction.parse`` accepts.

        Returns
        -------
        tuple[ndarray, int, bool]
            A tuple containing:
            - The grid after the move (ndarray)
            - The score gained by this move (int)
            - Whether the game is finished (bool)
        """
        before = self._state.score
        apply_move(self._state, direction)
        return self.observation, self._state.score - before, self._state.finished

    def render(self) -> None:
        """
        Render the game board. This method prints the score and the grid to the console.
        """
        print(f'Score: {self._state.score}')
        for row in self._state.board.to_list():
            print(' \t'.join(str(value) if value else '.' for value in row))
