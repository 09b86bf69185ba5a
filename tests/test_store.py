import random

import numpy as np
import pytest

from matchbox.board import EMPTY_BOARD, Board, Player
from matchbox.config import ExhaustionPolicy
from matchbox.errors import MoveExhausted, PoolNotInitialized
from matchbox.pool import MovePool
from matchbox.registry import BoardRegistry
from matchbox.store import Outcome, ReinforcementStore


class LastPick:
    """Deterministic stand-in for random.Random: always the last entry."""

    def randrange(self, n):
        return n - 1


@pytest.fixture
def store():
    return ReinforcementStore(registry=BoardRegistry(), rng=random.Random(0))


def test_pool_draw_removes_one_instance():
    pool = MovePool([3, 5, 5])
    assert pool.count(5) == 2
    assert pool.draw(LastPick()) == 5
    assert pool.count(5) == 1
    assert len(pool) == 2
    pool.add(5, 2)
    assert pool.counts() == {3: 1, 5: 3}
    with pytest.raises(ValueError):
        pool.add(3, -1)


def test_pool_draw_empty_raises():
    with pytest.raises(MoveExhausted):
        MovePool().draw(LastPick())


def test_pool_is_lazy(store):
    root = store.root
    assert not store.has_pool(root, Player.X)
    with pytest.raises(PoolNotInitialized):
        store.pool(root, Player.X)
    pool = store.ensure_pool(root, Player.X)
    assert len(pool) == 9
    # one pool per player
    assert not store.has_pool(root, Player.O)
    assert store.ensure_pool(root, Player.O) is not pool


def test_pool_starts_with_each_legal_successor_once(store):
    pool = store.ensure_pool(store.root, Player.O)
    boards = [store.board(n) for n in pool.entries()]
    assert boards == [EMPTY_BOARD.place(Player.O, i) for i in range(9)]
    assert set(pool.counts().values()) == {1}


def test_select_draws_and_removes(store):
    chosen = store.select(store.root, Player.X)
    assert store.multiplicity(store.root, Player.X, chosen) == 0
    assert len(store.pool(store.root, Player.X)) == 8


@pytest.mark.parametrize("outcome,delta", [
    (Outcome.WIN, 2),
    (Outcome.DRAW, 1),
    (Outcome.LOSS, 0),
])
def test_reinforcement_deltas(store, outcome, delta):
    chosen = store.select(store.root, Player.X)
    before = store.multiplicity(store.root, Player.X, chosen)
    store.reinforce(store.root, Player.X, chosen, outcome)
    assert store.multiplicity(store.root, Player.X, chosen) == before + delta


def test_reinforce_without_pool_is_an_internal_error(store):
    with pytest.raises(PoolNotInitialized):
        store.reinforce(store.root, Player.O, 1, Outcome.WIN)


def test_outcome_for_player():
    assert Outcome.for_player(Player.X, Player.X) is Outcome.WIN
    assert Outcome.for_player(Player.X, Player.O) is Outcome.LOSS
    assert Outcome.for_player(None, Player.O) is Outcome.DRAW
    assert [o.copies for o in (Outcome.WIN, Outcome.DRAW, Outcome.LOSS)] == [2, 1, 0]


# X to move into the last empty cell (8); no line is complete yet
ONE_MOVE_LEFT = Board.from_string("121122210")


def test_exhaustion_refill():
    registry = BoardRegistry()
    store = ReinforcementStore(registry=registry, exhaustion=ExhaustionPolicy.REFILL)
    node = registry.intern(ONE_MOVE_LEFT)
    first = store.select(node, Player.X)
    assert len(store.pool(node, Player.X)) == 0
    # refilled from the legal moves, then drawn again
    second = store.select(node, Player.X)
    assert second == first
    assert store.board(second).is_draw()
    assert len(store.pool(node, Player.X)) == 0


def test_exhaustion_report():
    registry = BoardRegistry()
    store = ReinforcementStore(registry=registry, exhaustion=ExhaustionPolicy.REPORT)
    node = registry.intern(ONE_MOVE_LEFT)
    store.select(node, Player.X)
    with pytest.raises(MoveExhausted):
        store.select(node, Player.X)
    assert len(store.pool(node, Player.X)) == 0


def test_registry_dedups_paths(store):
    a = store.successor(store.root, Player.X, 0)
    a = store.successor(a, Player.O, 4)
    b = store.successor(store.root, Player.O, 4)
    b = store.successor(b, Player.X, 0)
    assert a == b
    assert store.registry.find(Board.from_string("100020000")) == a


def test_tree_mode_keeps_paths_apart():
    store = ReinforcementStore(rng=random.Random(0))
    assert not store.dedup
    a = store.successor(store.root, Player.X, 0)
    a = store.successor(a, Player.O, 4)
    b = store.successor(store.root, Player.O, 4)
    b = store.successor(b, Player.X, 0)
    assert a != b
    assert store.board(a) == store.board(b)
    # the same move from the same node reaches the same child
    assert store.successor(store.root, Player.X, 0) == store.successor(store.root, Player.X, 0)


def test_tree_mode_pool_entries_match_successor():
    store = ReinforcementStore(rng=LastPick())
    chosen = store.select(store.root, Player.X)
    assert store.board(chosen) == EMPTY_BOARD.place(Player.X, 8)
    assert store.successor(store.root, Player.X, 8) == chosen


def test_weights_and_policy(store):
    root = store.root
    pool = store.ensure_pool(root, Player.X)
    center = store.successor(root, Player.X, 4)
    store.reinforce(root, Player.X, center, Outcome.WIN)
    w = store.weights(root, Player.X)
    assert w.tolist() == [1, 1, 1, 1, 3, 1, 1, 1, 1]
    p = store.policy(root, Player.X)
    assert np.isclose(p.sum(), 1.0)
    assert np.isclose(p[4], 3 / 11)
    assert len(pool) == 11


def test_policy_of_empty_pool_is_zero():
    registry = BoardRegistry()
    store = ReinforcementStore(registry=registry, exhaustion=ExhaustionPolicy.REPORT)
    node = registry.intern(ONE_MOVE_LEFT)
    store.select(node, Player.X)
    assert store.policy(node, Player.X).tolist() == [0.0] * 9
