"""
Game: the turn/outcome state machine that drives learning.

A game starts on the empty board and grows by one board per accepted
move. When a move ends the game (win, then draw, is checked), the history
is replayed once and every reinforced ply re-inserts its successor into
the pool it was drawn from. An episode stopped by move exhaustion is a
stalemate: it is replayed as a draw, so each drawn entry goes back.

Which plies are reinforced:
- agent plies (``apply_move(player)``) always;
- directed plies (``apply_move(player, position)``) only when
  ``LearningConfig.reinforce_both_players`` is set.

Turn order is not enforced; ``next_player()`` reports whose turn it would
be with X moving first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .board import Board, Player
from .config import LearningConfig
from .errors import GameOverError, MoveExhausted
from .store import Outcome, ReinforcementStore, build_store


class GameState(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAWN = "drawn"
    # Agent pool ran dry under ExhaustionPolicy.REPORT
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Ply:
    node: int
    player: Player
    successor: int
    agent: bool


class Game:
    """One episode played against a shared ``ReinforcementStore``.

    A passed-in store keeps its own registry, exhaustion policy and RNG.
    Without a config the game adopts the store's settings; an explicit
    config whose ``exhaustion`` or ``dedup`` disagrees with the store is
    rejected. ``config.seed`` is not checked against the store's RNG.
    """

    def __init__(
        self,
        store: Optional[ReinforcementStore] = None,
        config: Optional[LearningConfig] = None,
    ) -> None:
        if store is None:
            self.config = config if config is not None else LearningConfig()
            self.store = build_store(self.config)
        elif config is None:
            self.config = LearningConfig(exhaustion=store.exhaustion, dedup=store.dedup)
            self.store = store
        else:
            if config.exhaustion is not store.exhaustion or config.dedup != store.dedup:
                raise ValueError(
                    f"Config (exhaustion={config.exhaustion.value}, dedup={config.dedup}) "
                    f"does not match store (exhaustion={store.exhaustion.value}, dedup={store.dedup})"
                )
            self.config = config
            self.store = store
        self._nodes: List[int] = [self.store.root]
        self._plies: List[Ply] = []
        self._state = GameState.IN_PROGRESS
        self._winner: Optional[Player] = None

    @classmethod
    def new(
        cls,
        store: Optional[ReinforcementStore] = None,
        config: Optional[LearningConfig] = None,
    ) -> "Game":
        return cls(store, config)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def node(self) -> int:
        return self._nodes[-1]

    @property
    def board(self) -> Board:
        return self.store.board(self.node)

    @property
    def history(self) -> Tuple[Board, ...]:
        return tuple(self.store.board(n) for n in self._nodes)

    @property
    def plies(self) -> Tuple[Ply, ...]:
        return tuple(self._plies)

    def is_game_over(self) -> bool:
        return self._state is not GameState.IN_PROGRESS

    def winner(self) -> Optional[Player]:
        return self._winner

    def next_player(self) -> Player:
        return Player.X if len(self._plies) % 2 == 0 else Player.O

    def render(self) -> Tuple[Player, ...]:
        return self.board.render()

    def apply_move(self, player: Player, position: Optional[int] = None) -> Board:
        """Play one move: drawn from the agent's pool, or at ``position`` if given."""
        if self.is_game_over():
            raise GameOverError()
        if player is Player.EMPTY:
            raise ValueError("EMPTY cannot move")

        node = self.node
        agent = position is None
        if agent:
            try:
                nxt = self.store.select(node, player)
            except MoveExhausted:
                self._state = GameState.EXHAUSTED
                logging.info("Episode ended by move exhaustion after %d plies", len(self._plies))
                self._replay()
                raise
        else:
            nxt = self.store.successor(node, player, position)

        self._nodes.append(nxt)
        self._plies.append(Ply(node, player, nxt, agent))

        board = self.store.board(nxt)
        if board.is_win():
            self._state = GameState.WON
            self._winner = board.winner()
        elif board.is_draw():
            self._state = GameState.DRAWN
        if self.is_game_over():
            self._replay()
        return board

    def _replay(self) -> None:
        reinforced = 0
        for ply in self._plies:
            if not (ply.agent or self.config.reinforce_both_players):
                continue
            outcome = Outcome.for_player(self._winner, ply.player)
            self.store.reinforce(ply.node, ply.player, ply.successor, outcome)
            reinforced += 1
        logging.debug("Game over (%s, winner=%s): reinforced %d of %d plies",
                      self._state.value, self._winner, reinforced, len(self._plies))
