# -*- coding: utf-8 -*-
"""
Play the tile merge game in a terminal.
"""
import logging
import sys
from argparse import ArgumentParser
from collections.abc import Callable, Iterator
from functools import partial

from tilemerge.config import DEFAULT_SIZE, MIN_SIZE, GameConfiguration
from tilemerge.core import Direction
from tilemerge.envs import KeyBuffer, TileMergeGame
from tilemerge.errors import ConfigurationError, InvalidDirectionError

_logger = logging.getLogger(__name__)

KEY_HINTS = '   '.join(f'[{direction.value}] {direction.name.title()}' for direction in Direction)


def parse_size(value: str | None) -> int:
    """
    Read the board size argument.

    Parameters
    ----------
    value : str | None
        Raw command line value.

    Returns
    -------
    int
        The parsed size, or the default size when the value is missing, not an integer or smaller than 2.
    """
    try:
        size = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SIZE
    return size if size >= MIN_SIZE else DEFAULT_SIZE


def build_parser() -> ArgumentParser:
    """Command line arguments of the game."""
    parser = ArgumentParser(prog='tilemerge', description='Sliding tile merge puzzle.')
    parser.add_argument('size', nargs='?', default=None, help=f'Board size (default {DEFAULT_SIZE})')
    parser.add_argument('--seed', type=int, default=None, help='Seed of the first game')
    parser.add_argument('--goal', type=int, default=None, help='Tile value that wins the game')
    parser.add_argument('--buffered', action='store_true', help='Read keys in a background thread')
    parser.add_argument(
        '--log-level', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging verbosity'
    )
    return parser


def stdin_keys() -> Iterator[str]:
    """Yield every typed character of the standard input, line by line."""
    for line in sys.stdin:
        yield from line.strip()


def play(game: TileMergeGame, next_key: Callable[[], str | None]) -> bool:
    """
    Play the current game until it is finished.

    Parameters
    ----------
    game : TileMergeGame
        The game session.
    next_key : Callable[[], str | None]
        Returns the next key pressed, or None once input is exhausted.

    Returns
    -------
    bool
        True if the game reached its end, False if input ran out first.
    """
    game.render()
    print(KEY_HINTS)

    while not game.is_finished:
        key = next_key()
        if key is None:
            return False

        try:
            direction = Direction.parse(key)
        except InvalidDirectionError:
            _logger.debug('Ignored key %r.', key)
            continue

        game.step(direction)
        if game.state.last_move_changed_board:
            game.render()
            print(KEY_HINTS)

    print("You've made it!" if game.is_won else 'Game Over!')
    return True


def main(argv: list[str] | None = None, read_key: Callable[[], str | None] | None = None) -> int:
    """
    Run the game loop.

    Parameters
    ----------
    argv : list[str], optional
        Command line arguments (default ``sys.argv[1:]``).
    read_key : Callable[[], str | None], optional
        Source of keys (default: characters typed on the standard input).

    Returns
    -------
    int
        Exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    if read_key is None:
        read_key = partial(next, stdin_keys(), None)

    try:
        config = GameConfiguration(size=parse_size(args.size), goal=args.goal)
    except ConfigurationError as error:
        parser.error(str(error))
    game = TileMergeGame(config=config, seed=args.seed)

    with KeyBuffer() as buffer:
        if args.buffered:
            buffer.start(read_key)
            next_key = buffer.next_key
        else:
            next_key = read_key

        while True:
            if not play(game, next_key):
                return 0

            print('[N] New game   [P] Exit')
            key = next_key()
            while key is not None and key.upper() not in ('N', 'P'):
                key = next_key()
            if key is None or key.upper() == 'P':
                return 0

            game.reset()
