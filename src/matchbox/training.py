"""
Self-play training driver and outcome counters.

Both sides are played by the agent, X first, so every ply is an agent ply
and gets reinforced when the game ends.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .board import Player
from .config import LearningConfig
from .errors import MoveExhausted
from .game import Game, GameState
from .store import ReinforcementStore, build_store

DEFAULT_EPISODES = 15


@dataclass
class TrainingStats:
    games: int = 0
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    exhausted: int = 0
    # Per-episode label: "x", "o", "draw" or "exhausted"
    results: List[str] = field(default_factory=list)

    def record(self, game: Game) -> None:
        self.games += 1
        winner = game.winner()
        if game.state is GameState.WON and winner is Player.X:
            self.x_wins += 1
            label = "x"
        elif game.state is GameState.WON:
            self.o_wins += 1
            label = "o"
        elif game.state is GameState.DRAWN:
            self.draws += 1
            label = "draw"
        else:
            self.exhausted += 1
            label = "exhausted"
        self.results.append(label)

    def win_rates(self) -> Dict[str, float]:
        if self.games == 0:
            return {"x": 0.0, "o": 0.0, "draw": 0.0}
        return {
            "x": self.x_wins / self.games,
            "o": self.o_wins / self.games,
            "draw": self.draws / self.games,
        }

    def draw_rate_curve(self, window: int = 10) -> np.ndarray:
        """Moving draw rate over the episodes, ``window`` games at a time."""
        if window <= 0:
            raise ValueError("window must be positive")
        drawn = (np.asarray(self.results, dtype=object) == "draw").astype(float)
        if len(drawn) < window:
            return np.array([], dtype=float)
        return np.convolve(drawn, np.ones(window) / window, mode="valid")

    def as_metrics(self) -> Dict[str, float]:
        rates = self.win_rates()
        return {
            "games": float(self.games),
            "x_wins": float(self.x_wins),
            "o_wins": float(self.o_wins),
            "draws": float(self.draws),
            "exhausted": float(self.exhausted),
            "x_win_rate": rates["x"],
            "o_win_rate": rates["o"],
            "draw_rate": rates["draw"],
        }


def play_episode(store: ReinforcementStore, config: Optional[LearningConfig] = None) -> Game:
    game = Game(store, config)
    player = Player.X
    while not game.is_game_over():
        try:
            game.apply_move(player)
        except MoveExhausted:
            break
        player = player.opponent()
    return game


def train(
    episodes: int = DEFAULT_EPISODES,
    store: Optional[ReinforcementStore] = None,
    config: Optional[LearningConfig] = None,
) -> Tuple[ReinforcementStore, TrainingStats]:
    if episodes < 0:
        raise ValueError(f"episodes must be >= 0, got {episodes}")
    if store is None:
        store = build_store(config if config is not None else LearningConfig())
    stats = TrainingStats()
    logging.info("Training for %d episodes…", episodes)
    for i in range(episodes):
        game = play_episode(store, config)
        stats.record(game)
        logging.debug("episode=%d state=%s winner=%s plies=%d",
                      i, game.state.value, game.winner(), len(game.plies))
    logging.info(
        "Trained %d games: X=%d O=%d draws=%d exhausted=%d positions=%d",
        stats.games, stats.x_wins, stats.o_wins, stats.draws, stats.exhausted, len(store),
    )
    return store, stats
