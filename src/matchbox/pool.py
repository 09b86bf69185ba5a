"""
Move pool: a multiset of candidate successor nodes for one (board, player).

Multiplicity is preference. Selection draws one entry uniformly at random,
so a successor with three copies is three times as likely as one with a
single copy. Drawing removes exactly the drawn instance.
"""
from __future__ import annotations

import random
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .errors import MoveExhausted


class MovePool:
    __slots__ = ('_entries',)

    def __init__(self, entries: Iterable[int] = ()) -> None:
        self._entries: List[int] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MovePool({self._entries!r})"

    def entries(self) -> Tuple[int, ...]:
        return tuple(self._entries)

    def count(self, node: int) -> int:
        return self._entries.count(node)

    def counts(self) -> Dict[int, int]:
        return dict(Counter(self._entries))

    def add(self, node: int, copies: int = 1) -> None:
        if copies < 0:
            raise ValueError(f"copies must be >= 0, got {copies}")
        self._entries.extend([node] * copies)

    def draw(self, rng: random.Random) -> int:
        if not self._entries:
            raise MoveExhausted("Move pool is empty")
        return self._entries.pop(rng.randrange(len(self._entries)))

    def refill(self, entries: Iterable[int]) -> None:
        self._entries = list(entries)
