"""
Packed and string encodings of a board.

Teaching notes:
- Each cell takes a 2-bit code: 00=empty, 01=X, 10=O. Cell i lives at bits
  2*i and 2*i+1, so a whole board fits in an 18-bit int.
- The digit string uses the same codes ("100020000" = X at 0, O at 4).
- The packed key is the registry's content hash for a board.
"""
from functools import lru_cache
from typing import Iterable, Tuple

CELLS = 9
CODE_MASK = 0b11

# Rows, columns, diagonals
WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

VALID_CODES = (0b00, 0b01, 0b10)


def pack_codes(codes: Iterable[int]) -> int:
    key = 0
    n = 0
    for i, code in enumerate(codes):
        if code not in VALID_CODES:
            raise ValueError(f"Invalid cell code {code!r} at index {i}")
        key |= code << (2 * i)
        n += 1
    if n != CELLS:
        raise ValueError(f"Expected {CELLS} cells, got {n}")
    return key


def cell_code(key: int, index: int) -> int:
    return (key >> (2 * index)) & CODE_MASK


def unpack_codes(key: int) -> Tuple[int, ...]:
    if key < 0 or key >> (2 * CELLS):
        raise ValueError(f"Packed key out of range: {key}")
    codes = tuple(cell_code(key, i) for i in range(CELLS))
    if any(c not in VALID_CODES for c in codes):
        raise ValueError(f"Packed key holds an invalid cell code: {key}")
    return codes


@lru_cache(maxsize=None)
def is_win_packed(key: int) -> bool:
    """True iff some line holds three equal non-empty codes."""
    for a, b, c in WIN_LINES:
        v = cell_code(key, a)
        if v != 0 and v == cell_code(key, b) and v == cell_code(key, c):
            return True
    return False


def is_full_packed(key: int) -> bool:
    return all(cell_code(key, i) != 0 for i in range(CELLS))


def serialize_codes(codes: Iterable[int]) -> str:
    return ''.join(str(c) for c in codes)


def deserialize_codes(board_str: str) -> Tuple[int, ...]:
    raw = board_str.strip()
    if len(raw) != CELLS or any(c not in "012" for c in raw):
        raise ValueError(f"Invalid board string {board_str!r}. Must be 9 chars of 0/1/2.")
    return tuple(int(c) for c in raw)
