"""
Error taxonomy for the game core.

Every condition is local and synchronous; the caller decides whether to
re-prompt a human or abandon the episode.
"""


class MatchboxError(Exception):
    """Base class for all game-core errors."""


class InvalidPosition(MatchboxError, ValueError):
    def __init__(self, position: object):
        super().__init__(f"Invalid position: {position!r} (expected 0-8)")
        self.position = position


class CellOccupied(MatchboxError, ValueError):
    def __init__(self, position: int):
        super().__init__(f"Position already taken: {position}")
        self.position = position


class GameOverError(MatchboxError, RuntimeError):
    def __init__(self, message: str = "Game is over"):
        super().__init__(message)


class MoveExhausted(MatchboxError, RuntimeError):
    """The agent's move pool for a position is empty and refilling is disabled."""


class PoolNotInitialized(MatchboxError, LookupError):
    """A pool was read before it was materialized. Indicates a bug."""
