"""
Board registry: interns structurally equal boards under one stable node id.

Pass a registry to a ``ReinforcementStore`` to make every path to the same
position share one set of move pools. Each store should get its own
registry; nothing here is process-global.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .board import Board


class BoardRegistry:
    def __init__(self) -> None:
        self._ids: Dict[int, int] = {}
        self._boards: List[Board] = []

    def __len__(self) -> int:
        return len(self._boards)

    def __contains__(self, board: Board) -> bool:
        return board.key in self._ids

    def find(self, board: Board) -> Optional[int]:
        return self._ids.get(board.key)

    def intern(self, board: Board) -> int:
        key = board.key
        node = self._ids.get(key)
        if node is None:
            node = len(self._boards)
            self._boards.append(board)
            self._ids[key] = node
            logging.debug("Adding board %d: %s", node, board)
        return node

    def board(self, node: int) -> Board:
        return self._boards[node]
