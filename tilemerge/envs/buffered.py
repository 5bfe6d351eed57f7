"""
Buffered key input for the game loop.

A background poller pushes raw keys into a bounded queue while the game loop pulls them one at a time, so the
synchronous engine only ever sees a single move at a time.
"""

import logging
import threading
import time
from collections.abc import Callable
from queue import Empty, Full, Queue

from tilemerge.core.gamemove import Direction
from tilemerge.errors import InvalidDirectionError

_logger = logging.getLogger(__name__)

# ##>: Seconds between two checks of the poller state while waiting for a key.
_POLL_INTERVAL = 0.1


class KeyBuffer:
    """
    Bounded single-producer, single-consumer key queue.

    Attributes
    ----------
    capacity : int
        Maximum number of keys kept waiting. Keys pushed beyond it are dropped.
    """

    def __init__(self, capacity: int = 16):
        """
        Initialize the key buffer.

        Parameters
        ----------
        capacity : int
            Maximum number of keys kept waiting.
        """
        if capacity < 1:
            raise ValueError(f'capacity must be >= 1, got {capacity}')
        self.capacity = capacity
        self._queue: Queue = Queue(maxsize=capacity)
        self._running = False
        self._thread: threading.Thread | None = None

    def push(self, key: str) -> bool:
        """
        Queue a key without waiting.

        Returns
        -------
        bool
            True if the key was queued, False if the buffer was full and the key dropped.
        """
        try:
            self._queue.put_nowait(key)
        except Full:
            _logger.debug('Key buffer full, dropped %r.', key)
            return False
        return True

    def start(self, read_key: Callable[[], str | None]) -> None:
        """
        Start the background poller.

        Parameters
        ----------
        read_key : Callable[[], str | None]
            Blocking function returning the next key, or None once input is exhausted.
        """
        if self._running:
            return

        self._running = True
        self._thread = threading.Thread(target=self._poll_loop, args=(read_key,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background poller and drop the waiting keys."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        # ##>: Clear the queue.
        while not self._queue.empty():
            try:
                self._queue.get_nowait()
            except Empty:
                break

    def _poll_loop(self, read_key: Callable[[], str | None]) -> None:
        """Background loop that feeds the queue."""
        while self._running:
            key = read_key()
            if key is None:
                _logger.debug('Input exhausted, poller stops.')
                self._running = False
                break

            # ##>: Wait for room instead of dropping keys the player already typed.
            while self._running:
                try:
                    self._queue.put(key, timeout=_POLL_INTERVAL)
                    break
                except Full:
                    continue

    def next_key(self, timeout: float | None = None) -> str | None:
        """
        Take the next raw key.

        Parameters
        ----------
        timeout : float, optional
            Maximum time to wait, in seconds. When None, waits as long as the poller runs.

        Returns
        -------
        str | None
            The key, or None if none arrived within the timeout or the buffer is drained and the poller stopped.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = _POLL_INTERVAL if deadline is None else min(_POLL_INTERVAL, max(0.0, deadline - time.monotonic()))
            try:
                return self._queue.get(timeout=wait)
            except Empty:
                if not self._running and self._queue.empty():
                    return None
                if deadline is not None and time.monotonic() >= deadline:
                    return None

    def next_direction(self, timeout: float | None = None) -> Direction | None:
        """
        Take the next key naming a direction, skipping every other key.

        Parameters
        ----------
        timeout : float, optional
            Maximum time to wait, in seconds. When None, waits as long as the poller runs.

        Returns
        -------
        Direction | None
            The direction, or None if no direction key arrived in time.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            key = self.next_key(timeout=remaining)
            if key is None:
                return None
            try:
                return Direction.parse(key)
            except InvalidDirectionError:
                _logger.debug('Skipped key %r.', key)

    @property
    def pending(self) -> int:
        """Return the number of keys waiting in the buffer."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        """Return whether the poller thread is running."""
        return self._running

    def __enter__(self) -> 'KeyBuffer':
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
