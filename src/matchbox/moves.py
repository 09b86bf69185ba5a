"""
Move generation: every legal successor of a board for one player.
"""
from typing import List

from .board import Board, Player
from .errors import GameOverError


def legal_moves(board: Board, player: Player) -> List[Board]:
    """Successors of ``board`` with ``player`` in each empty cell, ascending index order.

    Pure: each call builds fresh, structurally equal boards.
    """
    if board.is_terminal():
        raise GameOverError(f"No legal moves from terminal board {board}")
    return [board.place(player, i) for i in board.empty_cells()]


def changed_cell(before: Board, after: Board) -> int:
    """Index of the single cell where ``after`` differs from ``before``."""
    diff = [i for i in range(len(before.cells)) if before[i] is not after[i]]
    if len(diff) != 1:
        raise ValueError(f"Boards {before} and {after} differ in {len(diff)} cells, expected 1")
    return diff[0]
