"""
Reinforcement store: per (node, player) move pools and the learning rule.

Teaching notes:
- A node is a stable int id for a board position. With a ``BoardRegistry``
  structurally equal boards share a node, so every path into a position
  shares its pools. Without one, each successor created while building a
  pool gets its own node and learning follows the game tree instead.
- Pools are built lazily from ``legal_moves``, one copy per successor.
- Reinforcement re-inserts the played successor: +2 on a win, +1 on a
  draw, +0 on a loss. Nothing decays; pools only grow through reinforcement.
"""
from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from .board import EMPTY_BOARD, Board, Player
from .config import ExhaustionPolicy, LearningConfig
from .errors import MoveExhausted, PoolNotInitialized
from .moves import changed_cell, legal_moves
from .pool import MovePool
from .registry import BoardRegistry


class Outcome(Enum):
    WIN = 2
    DRAW = 1
    LOSS = 0

    @property
    def copies(self) -> int:
        return self.value

    @classmethod
    def for_player(cls, winner: Optional[Player], player: Player) -> "Outcome":
        """Outcome of a finished game from ``player``'s side; ``winner=None`` is a draw."""
        if winner is None:
            return cls.DRAW
        return cls.WIN if winner is player else cls.LOSS


PoolKey = Tuple[int, Player]


class ReinforcementStore:
    def __init__(
        self,
        registry: Optional[BoardRegistry] = None,
        exhaustion: ExhaustionPolicy = ExhaustionPolicy.REFILL,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.registry = registry
        self.exhaustion = exhaustion
        self._rng = rng if rng is not None else random.Random()
        # Node table for the tree mode (no registry)
        self._boards: List[Board] = []
        self._children: Dict[PoolKey, Dict[Board, int]] = {}
        self._pools: Dict[PoolKey, MovePool] = {}
        self.root = self._node_for(EMPTY_BOARD)

    @property
    def dedup(self) -> bool:
        return self.registry is not None

    def __len__(self) -> int:
        return len(self.registry) if self.registry is not None else len(self._boards)

    def _node_for(self, board: Board) -> int:
        if self.registry is not None:
            return self.registry.intern(board)
        self._boards.append(board)
        return len(self._boards) - 1

    def board(self, node: int) -> Board:
        if self.registry is not None:
            return self.registry.board(node)
        return self._boards[node]

    def _successors(self, node: int, player: Player) -> List[int]:
        boards = legal_moves(self.board(node), player)
        if self.registry is not None:
            return [self.registry.intern(b) for b in boards]
        key = (node, player)
        children = self._children.get(key)
        if children is None:
            children = {b: self._node_for(b) for b in boards}
            self._children[key] = children
        return [children[b] for b in boards]

    def ensure_pool(self, node: int, player: Player) -> MovePool:
        key = (node, player)
        pool = self._pools.get(key)
        if pool is None:
            pool = MovePool(self._successors(node, player))
            self._pools[key] = pool
            logging.debug("Materialized pool for node %d (%s) player %s: %d moves",
                          node, self.board(node), player.name, len(pool))
        return pool

    def has_pool(self, node: int, player: Player) -> bool:
        return (node, player) in self._pools

    def pool(self, node: int, player: Player) -> MovePool:
        try:
            return self._pools[(node, player)]
        except KeyError:
            raise PoolNotInitialized(
                f"No pool for node {node} player {player.name}"
            ) from None

    def snapshot(self) -> Dict[PoolKey, Tuple[int, ...]]:
        """Copy of every materialized pool's entries."""
        return {k: p.entries() for k, p in self._pools.items()}

    def successor(self, node: int, player: Player, position: int) -> int:
        """Node reached by ``player`` marking ``position``; the pool is not drawn from."""
        target = self.board(node).place(player, position)
        self.ensure_pool(node, player)
        if self.registry is not None:
            return self.registry.intern(target)
        return self._children[(node, player)][target]

    def select(self, node: int, player: Player) -> int:
        pool = self.ensure_pool(node, player)
        if not len(pool):
            if self.exhaustion is ExhaustionPolicy.REPORT:
                logging.info("Move pool exhausted for node %d player %s", node, player.name)
                raise MoveExhausted(
                    f"No moves left for {player.name} at board {self.board(node)}"
                )
            logging.info("Move pool exhausted for node %d player %s; refilling", node, player.name)
            pool.refill(self._successors(node, player))
        return pool.draw(self._rng)

    def reinforce(self, node: int, player: Player, successor: int, outcome: Outcome) -> None:
        self.pool(node, player).add(successor, outcome.copies)

    def multiplicity(self, node: int, player: Player, successor: int) -> int:
        return self.pool(node, player).count(successor)

    def weights(self, node: int, player: Player) -> np.ndarray:
        """Multiplicity per destination cell (length 9)."""
        board = self.board(node)
        cells = [changed_cell(board, self.board(s)) for s in self.pool(node, player).entries()]
        return np.bincount(np.asarray(cells, dtype=np.int64), minlength=9)

    def policy(self, node: int, player: Player) -> np.ndarray:
        """Selection probability per cell; all zeros for an empty pool."""
        w = self.weights(node, player).astype(float)
        total = w.sum()
        return w / total if total > 0 else w


def build_store(config: LearningConfig) -> ReinforcementStore:
    """Fresh store for a ``LearningConfig``: own registry (if dedup) and own RNG."""
    return ReinforcementStore(
        registry=BoardRegistry() if config.dedup else None,
        exhaustion=config.exhaustion,
        rng=random.Random(config.seed),
    )
