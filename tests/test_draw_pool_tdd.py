from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from bingo_tracker.engine.draw_pool import DrawPool, SortMode
from bingo_tracker.errors import (
    AlreadyDrawnError,
    DuplicateError,
    EmptyPoolError,
    NotFoundError,
    OutOfRangeError,
)
from bingo_tracker.rng import create_rng


def make_pool(max_number=75, history=(), seed=1):
    return DrawPool(max_number, create_rng("py_random", seed), history)


def test_draw_random_exhausts_pool_then_fails():
    pool = make_pool(max_number=30)
    drawn = [pool.draw_random() for _ in range(30)]
    assert sorted(drawn) == list(range(1, 31))
    assert pool.available == []
    with pytest.raises(EmptyPoolError):
        pool.draw_random()
    assert len(pool) == 30


def test_mark_twice_is_rejected_without_side_effect():
    pool = make_pool()
    pool.mark_number(12)
    with pytest.raises(AlreadyDrawnError):
        pool.mark_number(12)
    assert pool.history == (12,)
    assert 12 not in pool.available


@pytest.mark.parametrize("value", [0, 76, -1])
def test_mark_out_of_range(value):
    pool = make_pool()
    with pytest.raises(OutOfRangeError):
        pool.mark_number(value)
    assert pool.history == ()
    assert len(pool.available) == 75


def test_edit_moves_old_value_back_to_pool():
    pool = make_pool(history=[5, 10])
    old = pool.edit_drawn(0, 7)
    assert old == 5
    assert pool.history == (7, 10)
    assert 5 in pool.available
    assert 7 not in pool.available
    assert pool.available == sorted(pool.available)


def test_edit_to_number_drawn_elsewhere_is_rejected():
    pool = make_pool(history=[5, 10])
    with pytest.raises(DuplicateError):
        pool.edit_drawn(0, 10)
    assert pool.history == (5, 10)
    assert 5 not in pool.available


def test_edit_to_same_value_is_a_no_op():
    pool = make_pool(history=[5, 10])
    assert pool.edit_drawn(1, 10) == 10
    assert pool.history == (5, 10)
    assert 10 not in pool.available


def test_edit_validates_range_and_position():
    pool = make_pool(history=[5])
    with pytest.raises(OutOfRangeError):
        pool.edit_drawn(0, 99)
    with pytest.raises(NotFoundError):
        pool.edit_drawn(1, 6)
    with pytest.raises(NotFoundError):
        pool.edit_drawn(-1, 6)


def test_reset_restores_full_range():
    pool = make_pool(max_number=40, history=[1, 2, 3])
    pool.reset()
    assert pool.history == ()
    assert pool.available == list(range(1, 41))


def test_history_is_validated_on_construction():
    with pytest.raises(DuplicateError):
        make_pool(history=[3, 3])
    with pytest.raises(OutOfRangeError):
        make_pool(max_number=25, history=[26])


def test_ordered_history_keeps_original_positions():
    pool = make_pool(history=[40, 3, 17])
    assert pool.ordered_history(SortMode.HISTORY) == [(0, 40), (1, 3), (2, 17)]
    assert pool.ordered_history(SortMode.ASCENDING) == [(1, 3), (2, 17), (0, 40)]


@settings(max_examples=50)
@given(
    seed=st.integers(min_value=0, max_value=10_000),
    ops=st.lists(
        st.tuples(st.sampled_from(["draw", "mark", "edit"]), st.integers(0, 60), st.integers(-5, 60)),
        max_size=80,
    ),
)
def test_pool_is_always_complement_of_history(seed, ops):
    pool = make_pool(max_number=50, seed=seed)
    for op, a, b in ops:
        try:
            if op == "draw":
                pool.draw_random()
            elif op == "mark":
                pool.mark_number(b)
            else:
                pool.edit_drawn(a, b)
        except (AlreadyDrawnError, DuplicateError, EmptyPoolError, NotFoundError, OutOfRangeError):
            pass
        assert len(set(pool.history)) == len(pool.history)
        assert pool.available == sorted(set(range(1, 51)) - set(pool.history))
