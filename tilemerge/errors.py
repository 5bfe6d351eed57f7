"""
Error kinds raised by the tile merge engine.
"""


class InvalidDirectionError(ValueError):
    """Raised when a value that is not one of the four move directions reaches the resolver."""


class GridIndexError(IndexError):
    """Raised on an out-of-range cell access. Callers iterating within the board never trigger it."""


class ConfigurationError(ValueError):
    """Raised when a game configuration holds an unusable value."""
