"""Tests for dayblocks/ordering.py — per-day order and reorder."""

from conftest import make_block
from dayblocks import ordering

DAY = "2024-01-02"


def _titles(blocks, day=DAY):
    return [b.id for b in ordering.partition(blocks, day)]


def _day():
    return [
        make_block("a", DAY, 0),
        make_block("b", DAY, 1),
        make_block("c", DAY, 2),
        make_block("d", DAY, 3),
        make_block("old", "2024-01-01", 0),
    ]


def test_append_counts_only_that_day():
    assert ordering.append(_day(), DAY) == 4
    assert ordering.append(_day(), "2024-01-01") == 1
    assert ordering.append(_day(), "2024-01-03") == 0


def test_partition_sorted_by_order():
    blocks = [make_block("b", DAY, 1), make_block("a", DAY, 0)]
    assert _titles(blocks) == ["a", "b"]


def test_reorder_move_down():
    blocks, changed = ordering.reorder(_day(), DAY, "a", "c")
    assert changed is True
    assert _titles(blocks) == ["b", "c", "a", "d"]
    assert sorted(b.order for b in blocks if b.date == DAY) == [0, 1, 2, 3]


def test_reorder_move_up():
    blocks, changed = ordering.reorder(_day(), DAY, "d", "b")
    assert changed is True
    assert _titles(blocks) == ["a", "d", "b", "c"]


def test_reorder_leaves_other_days_alone():
    original = _day()
    blocks, _ = ordering.reorder(original, DAY, "a", "d")
    old = [b for b in blocks if b.id == "old"][0]
    assert old is original[-1]


def test_reorder_same_id_is_noop():
    blocks = _day()
    result, changed = ordering.reorder(blocks, DAY, "b", "b")
    assert changed is False
    assert result is blocks


def test_reorder_unknown_id_is_noop():
    blocks = _day()
    assert ordering.reorder(blocks, DAY, "zzz", "a") == (blocks, False)
    assert ordering.reorder(blocks, DAY, "a", "zzz") == (blocks, False)


def test_reorder_target_on_other_day_rejected():
    blocks = _day()
    result, changed = ordering.reorder(blocks, DAY, "a", "old")
    assert changed is False
    assert _titles(result) == ["a", "b", "c", "d"]


def test_reorder_single_item_is_noop():
    blocks = [make_block("only", DAY, 0)]
    assert ordering.reorder(blocks, DAY, "only", "only") == (blocks, False)


def test_reorder_round_trip_restores_order():
    blocks, _ = ordering.reorder(_day(), DAY, "b", "d")
    assert _titles(blocks) == ["a", "c", "d", "b"]
    blocks, _ = ordering.reorder(blocks, DAY, "b", "c")
    assert _titles(blocks) == ["a", "b", "c", "d"]


def test_reorder_does_not_mutate_input():
    blocks = _day()
    ordering.reorder(blocks, DAY, "a", "d")
    assert [b.order for b in blocks] == [0, 1, 2, 3, 0]


def test_normalize_closes_gaps_and_breaks_ties():
    blocks = [
        make_block("x", DAY, 5),
        make_block("y", DAY, 2),
        make_block("z", DAY, 2),
        make_block("w", "2024-01-01", 7),
    ]
    fixed = ordering.normalize(blocks)
    assert _titles(fixed) == ["y", "z", "x"]
    assert ordering.is_dense(fixed)
    assert [b for b in fixed if b.id == "w"][0].order == 0


def test_normalize_single_day():
    blocks = [make_block("x", DAY, 3), make_block("w", "2024-01-01", 7)]
    fixed = ordering.normalize(blocks, DAY)
    assert [b.order for b in fixed] == [0, 7]


def test_is_dense():
    assert ordering.is_dense(_day())
    assert ordering.is_dense([])
    assert not ordering.is_dense([make_block("a", DAY, 1)])
    assert not ordering.is_dense([make_block("a", DAY, 0), make_block("b", DAY, 0)])
