"""
Tests for the buffered key input.
"""

from functools import partial
from unittest import TestCase, main

from tilemerge.core.gamemove import Direction
from tilemerge.envs.buffered import KeyBuffer


class TestKeyBuffer(TestCase):
    """Test the bounded key queue."""

    def test_push_and_take_in_order(self):
        """Keys come out in the order they were pushed."""
        buffer = KeyBuffer(capacity=4)
        for key in 'wasd':
            self.assertTrue(buffer.push(key))

        self.assertEqual(buffer.pending, 4)
        self.assertEqual([buffer.next_key(timeout=0.1) for _ in range(4)], list('wasd'))

    def test_full_buffer_drops_keys(self):
        """Keys pushed beyond capacity are dropped."""
        buffer = KeyBuffer(capacity=2)

        self.assertTrue(buffer.push('w'))
        self.assertTrue(buffer.push('a'))
        self.assertFalse(buffer.push('s'))
        self.assertEqual(buffer.pending, 2)

    def test_invalid_capacity(self):
        """Capacity must allow at least one key."""
        with self.assertRaises(ValueError):
            KeyBuffer(capacity=0)

    def test_next_direction_skips_other_keys(self):
        """Keys that are not directions are skipped."""
        buffer = KeyBuffer()
        for key in 'x1D':
            buffer.push(key)

        self.assertIs(buffer.next_direction(timeout=0.1), Direction.RIGHT)
        self.assertEqual(buffer.pending, 0)

    def test_timeout(self):
        """Nothing arrives on an empty buffer."""
        buffer = KeyBuffer()

        self.assertIsNone(buffer.next_key(timeout=0.05))
        self.assertIsNone(buffer.next_direction(timeout=0.05))

    def test_poller_feeds_buffer(self):
        """The background poller forwards every key then stops when input runs out."""
        read_key = partial(next, iter('wxsad'), None)

        with KeyBuffer(capacity=2) as buffer:
            buffer.start(read_key)
            directions = []
            direction = buffer.next_direction()
            while direction is not None:
                directions.append(direction)
                direction = buffer.next_direction()

        self.assertEqual(directions, [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT])
        self.assertFalse(buffer.is_running)

    def test_stop_drops_pending_keys(self):
        """Stopping clears the waiting keys."""
        buffer = KeyBuffer()
        buffer.push('w')
        buffer.stop()

        self.assertEqual(buffer.pending, 0)


if __name__ == '__main__':
    main()
