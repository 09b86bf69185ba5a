"""matchbox package.

A tic-tac-toe agent that learns from its own games by re-weighting the
moves it keeps in per-position pools.

Convenience imports are exposed for common workflows.
"""

from .board import Board, Player
from .config import ExhaustionPolicy, LearningConfig
from .errors import (
    CellOccupied,
    GameOverError,
    InvalidPosition,
    MatchboxError,
    MoveExhausted,
    PoolNotInitialized,
)
from .game import Game, GameState
from .moves import legal_moves
from .registry import BoardRegistry
from .store import Outcome, ReinforcementStore, build_store
from .training import TrainingStats, train

__all__ = [
    "Board",
    "Player",
    "ExhaustionPolicy",
    "LearningConfig",
    "MatchboxError",
    "InvalidPosition",
    "CellOccupied",
    "GameOverError",
    "MoveExhausted",
    "PoolNotInitialized",
    "Game",
    "GameState",
    "legal_moves",
    "BoardRegistry",
    "Outcome",
    "ReinforcementStore",
    "build_store",
    "TrainingStats",
    "train",
]
