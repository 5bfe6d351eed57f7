"""
Tests for move resolution and terminal state detection.
"""

from unittest import TestCase, main

import numpy as np
from numpy.random import default_rng

from tilemerge.core.gameboard import Board
from tilemerge.core.gamemove import Direction, can_move, legal_directions, resolve_move
from tilemerge.errors import InvalidDirectionError


def random_board(generator, size: int = 4) -> Board:
    """Generate a random board of small tiles."""
    return Board.from_values(generator.choice([0, 0, 2, 4, 8], size=(size, size)))


class TestDirection(TestCase):
    """Test direction parsing."""

    def test_parse(self):
        """Key codes and names are accepted in any case."""
        self.assertIs(Direction.parse('w'), Direction.UP)
        self.assertIs(Direction.parse('S'), Direction.DOWN)
        self.assertIs(Direction.parse('left'), Direction.LEFT)
        self.assertIs(Direction.parse(Direction.RIGHT), Direction.RIGHT)

    def test_parse_invalid(self):
        """Anything else is rejected."""
        for value in ['X', '', 'north', 0, None]:
            with self.assertRaises(InvalidDirectionError):
                Direction.parse(value)


class TestResolveMove(TestCase):
    """Test shifting and merging."""

    def test_merge_left_small_board(self):
        """Two equal tiles merge into the left edge."""
        board = Board.from_values([[2, 2, 0], [0, 0, 0], [0, 0, 0]])

        changed, score = resolve_move(board, Direction.LEFT)

        self.assertTrue(changed)
        self.assertEqual(score, 4)
        self.assertEqual(board.to_list(), [[4, 0, 0], [0, 0, 0], [0, 0, 0]])

    def test_nearest_edge_merges_first(self):
        """The pair nearest the edge merges, the leftover tile slides without merging again."""
        board = Board.from_values([[2, 0, 2, 2], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        changed, score = resolve_move(board, Direction.RIGHT)

        self.assertTrue(changed)
        self.assertEqual(score, 4)
        self.assertEqual(board.to_list()[0], [0, 0, 2, 4])

    def test_four_equal_tiles(self):
        """A full line of equal tiles merges in two pairs."""
        board = Board.from_values([[2, 2, 2, 2], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        _, score = resolve_move(board, Direction.LEFT)

        self.assertEqual(score, 8)
        self.assertEqual(board.to_list()[0], [4, 4, 0, 0])

    def test_no_chained_merge(self):
        """A tile produced by a merge does not merge again within the same move."""
        board = Board.from_values([[4, 4, 8, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])

        _, score = resolve_move(board, Direction.LEFT)

        self.assertEqual(score, 8)
        self.assertEqual(board.to_list()[0], [8, 8, 0, 0])

    def test_move_up(self):
        """Columns resolve toward the top row."""
        board = Board.from_values([[2, 0, 0, 0], [2, 0, 0, 4], [4, 0, 0, 0], [4, 0, 0, 0]])

        changed, score = resolve_move(board, Direction.UP)

        self.assertTrue(changed)
        self.assertEqual(score, 12)
        np.testing.assert_array_equal(board.values[:, 0], np.array([4, 8, 0, 0]))
        np.testing.assert_array_equal(board.values[:, 3], np.array([4, 0, 0, 0]))

    def test_move_down(self):
        """Columns resolve toward the bottom row."""
        board = Board.from_values([[2, 0, 0, 0], [2, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0]])

        _, score = resolve_move(board, Direction.DOWN)

        self.assertEqual(score, 4)
        np.testing.assert_array_equal(board.values[:, 0], np.array([0, 0, 2, 4]))

    def test_merge_flags_left_set(self):
        """Merged cells stay flagged until the flags are cleared."""
        board = Board.from_values([[2, 2], [0, 0]])

        resolve_move(board, Direction.LEFT)

        self.assertTrue(board.get(0, 0).merged)
        self.assertEqual(int(board.merged.sum()), 1)

    def test_no_change(self):
        """A move that cannot change anything leaves the board untouched."""
        board = Board.from_values([[2, 4], [8, 16]])
        before = board.values.copy()

        changed, score = resolve_move(board, Direction.LEFT)

        self.assertFalse(changed)
        self.assertEqual(score, 0)
        np.testing.assert_array_equal(board.values, before)
        self.assertFalse(board.merged.any())

    def test_invalid_direction(self):
        """Unrecognized directions are rejected before touching the board."""
        board = Board.from_values([[2, 2], [0, 0]])

        with self.assertRaises(InvalidDirectionError):
            resolve_move(board, 'X')
        with self.assertRaises(ValueError):
            resolve_move(board, 3)
        self.assertEqual(board.to_list(), [[2, 2], [0, 0]])

    def test_key_code_direction(self):
        """Key codes are accepted as directions."""
        board = Board.from_values([[0, 2], [0, 0]])

        changed, _ = resolve_move(board, 'a')

        self.assertTrue(changed)
        self.assertEqual(board.to_list(), [[2, 0], [0, 0]])


class TestMoveProperties(TestCase):
    """Properties that hold for any board."""

    def test_conservation(self):
        """Moves keep the sum of tiles and score exactly the tiles created by merges."""
        generator = default_rng(1234)
        for _ in range(200):
            board = random_board(generator)
            for direction in Direction:
                moved = board.copy()
                total = moved.values.sum()
                tiles = np.count_nonzero(moved.values)

                _, score = resolve_move(moved, direction)

                # ##>: Value is conserved, one tile disappears per merge.
                self.assertEqual(moved.values.sum(), total)
                self.assertEqual(np.count_nonzero(moved.values), tiles - int(moved.merged.sum()))

                # ##>: Score is the value of the merged tiles, each merged once.
                self.assertEqual(score, int(moved.values[moved.merged].sum()))

    def test_no_change_is_identity(self):
        """An unchanged move leaves the board identical."""
        generator = default_rng(99)
        for _ in range(200):
            board = random_board(generator, size=3)
            for direction in Direction:
                moved = board.copy()
                changed, _ = resolve_move(moved, direction)
                if not changed:
                    np.testing.assert_array_equal(moved.values, board.values)

    def test_legal_directions_agree_with_resolution(self):
        """Legal directions are exactly the ones that change the board."""
        generator = default_rng(5)
        for _ in range(200):
            board = random_board(generator)
            expected = [direction for direction in Direction if resolve_move(board.copy(), direction)[0]]
            self.assertEqual(legal_directions(board), expected)


class TestTerminalDetection(TestCase):
    """Test detection of the end of the game."""

    def test_full_board_no_pairs(self):
        """A full board without equal neighbours has no move left."""
        board = Board.from_values(
            [[2, 4, 8, 16], [32, 64, 128, 256], [512, 1024, 2048, 4096], [8192, 16384, 32768, 65536]]
        )
        self.assertFalse(can_move(board))
        self.assertEqual(legal_directions(board), [])

    def test_full_board_checkerboard(self):
        """Equal values on diagonals do not count as a pair."""
        self.assertFalse(can_move(Board.from_values([[2, 4], [4, 2]])))

    def test_full_board_horizontal_pair(self):
        """A horizontal pair keeps the game going."""
        board = Board.from_values(
            [[2, 2, 8, 16], [32, 64, 128, 256], [512, 1024, 2048, 4096], [8192, 16384, 32768, 65536]]
        )
        self.assertTrue(can_move(board))

    def test_full_board_vertical_pair(self):
        """A vertical pair keeps the game going."""
        self.assertTrue(can_move(Board.from_values([[2, 4], [2, 8]])))

    def test_empty_cell(self):
        """Any empty cell keeps the game going."""
        board = Board.from_values([[2, 4, 8], [16, 32, 64], [128, 256, 0]])
        self.assertTrue(can_move(board))

    def test_legal_directions(self):
        """Legal directions are the ones where a tile can slide or merge."""
        board = Board.from_values([[2, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(legal_directions(board), [Direction.UP, Direction.DOWN, Direction.RIGHT])


if __name__ == '__main__':
    main()
