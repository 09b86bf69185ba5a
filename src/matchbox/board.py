"""
Board state and player marks.

Teaching notes:
- A mark's value is its signed encoding: X=+1, O=-1, empty=0. Summing a
  line gives +3 (all X), -3 (all O) or something else (mixed/partial).
- The packed 2-bit code of a mark (see ``encoding``) carries the same
  information; ``Board.key`` is the packed form of the whole board.
- A Board never changes after construction. ``place`` returns a new one.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

from .encoding import (
    CELLS,
    WIN_LINES,
    deserialize_codes,
    pack_codes,
    serialize_codes,
    unpack_codes,
)
from .errors import CellOccupied, InvalidPosition


class Player(Enum):
    X = 1
    O = -1
    EMPTY = 0

    def __str__(self) -> str:
        return {Player.X: 'X', Player.O: 'O', Player.EMPTY: ' '}[self]

    @property
    def code(self) -> int:
        """Packed 2-bit code: 00=empty, 01=X, 10=O."""
        return _CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "Player":
        try:
            return _FROM_CODE[code]
        except KeyError:
            raise ValueError(f"Invalid cell code: {code!r}") from None

    def opponent(self) -> "Player":
        if self is Player.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Player.O if self is Player.X else Player.X


_CODES = {Player.EMPTY: 0b00, Player.X: 0b01, Player.O: 0b10}
_FROM_CODE = {v: k for k, v in _CODES.items()}


@lru_cache(maxsize=None)
def _winning_mark(cells: Tuple[Player, ...]) -> Player:
    for a, b, c in WIN_LINES:
        s = cells[a].value + cells[b].value + cells[c].value
        if abs(s) == 3:
            return cells[a]
    return Player.EMPTY


@dataclass(frozen=True)
class Board:
    """Immutable snapshot of the nine cells, indexed 0-8 row-major.

    Equality and hashing are structural.
    """
    cells: Tuple[Player, ...]

    def __post_init__(self):
        cells = tuple(self.cells)
        if len(cells) != CELLS:
            raise ValueError(f"Board needs {CELLS} cells, got {len(cells)}")
        if not all(isinstance(c, Player) for c in cells):
            raise TypeError("Board cells must be Player values")
        object.__setattr__(self, 'cells', cells)

    @classmethod
    def empty(cls) -> "Board":
        return EMPTY_BOARD

    @classmethod
    def from_string(cls, board_str: str) -> "Board":
        return cls(tuple(Player.from_code(c) for c in deserialize_codes(board_str)))

    @classmethod
    def from_key(cls, key: int) -> "Board":
        return cls(tuple(Player.from_code(c) for c in unpack_codes(key)))

    @property
    def key(self) -> int:
        return pack_codes(c.code for c in self.cells)

    def __str__(self) -> str:
        return serialize_codes(c.code for c in self.cells)

    def __getitem__(self, index: int) -> Player:
        return self.cells[index]

    def place(self, player: Player, position: int) -> "Board":
        if player is Player.EMPTY:
            raise ValueError("Cannot place an EMPTY mark")
        if isinstance(position, bool) or not isinstance(position, int) \
                or not 0 <= position < CELLS:
            raise InvalidPosition(position)
        if self.cells[position] is not Player.EMPTY:
            raise CellOccupied(position)
        cells = list(self.cells)
        cells[position] = player
        return Board(tuple(cells))

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c is Player.EMPTY]

    def is_win(self) -> bool:
        return _winning_mark(self.cells) is not Player.EMPTY

    def is_draw(self) -> bool:
        # Win is checked first: a full board with a line is a win.
        if self.is_win():
            return False
        return sum(abs(c.value) for c in self.cells) == CELLS

    def is_terminal(self) -> bool:
        return self.is_win() or self.is_draw()

    def winner(self) -> Optional[Player]:
        mark = _winning_mark(self.cells)
        return None if mark is Player.EMPTY else mark

    def render(self) -> Tuple[Player, ...]:
        """The nine marks in index order, for a driver to format."""
        return self.cells


EMPTY_BOARD = Board((Player.EMPTY,) * CELLS)
