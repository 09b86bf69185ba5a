from typing import List

import pytest
try:
    from hypothesis import given, strategies as st  # type: ignore
    HAS_HYP = True
except ModuleNotFoundError:  # pragma: no cover - test infra
    HAS_HYP = False
    import pytest as _pytest  # type: ignore
    _pytest.skip("Hypothesis not installed", allow_module_level=True)

from matchbox.board import EMPTY_BOARD, Board, Player
from matchbox.encoding import is_win_packed
from matchbox.moves import changed_cell, legal_moves


@given(st.permutations(list(range(9))))
def test_win_and_draw_exclusive_on_reachable_boards(order: List[int]):
    board = EMPTY_BOARD
    player = Player.X
    for pos in order:
        board = board.place(player, pos)
        assert not (board.is_win() and board.is_draw())
        if board.is_terminal():
            break
        player = player.opponent()
    assert board.is_terminal()


@given(st.permutations(list(range(9))), st.integers(min_value=0, max_value=8),
       st.sampled_from([Player.X, Player.O]))
def test_legal_moves_one_per_empty_cell(order: List[int], plies: int, mover: Player):
    board = EMPTY_BOARD
    player = Player.X
    for pos in order[:plies]:
        nxt = board.place(player, pos)
        if nxt.is_terminal():
            break
        board = nxt
        player = player.opponent()
    moves = legal_moves(board, mover)
    empties = board.empty_cells()
    assert len(moves) == len(empties)
    for cell, m in zip(empties, moves):
        assert changed_cell(board, m) == cell
        assert m[cell] is mover


@given(st.lists(st.sampled_from([0, 1, 2]), min_size=9, max_size=9))
def test_signed_and_packed_win_tests_agree(codes: List[int]):
    board = Board(tuple(Player.from_code(c) for c in codes))
    assert board.is_win() == is_win_packed(board.key)
    assert Board.from_string(str(board)) == board
