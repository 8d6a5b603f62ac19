# tests/test_free_time.py
from datetime import datetime, timedelta, timezone

import pytest

from freetime.services.errors import InvalidRange
from freetime.services.free_time import (
    compute_mutual_free_time,
    intersect,
    intersect_sorted,
    split,
)
from freetime.services.intervals import AvailabilityWindow, TimeInterval


def dt(hh, mm=0, day=21):
    return datetime(2024, 9, day, hh, mm, tzinfo=timezone.utc)


def iv(start, end):
    return TimeInterval(start, end)


# -----------------------------
# TimeInterval
# -----------------------------
def test_interval_rejects_start_not_before_end():
    with pytest.raises(InvalidRange):
        iv(dt(10), dt(10))
    with pytest.raises(InvalidRange):
        iv(dt(11), dt(10))


def test_interval_rejects_naive_datetimes():
    with pytest.raises(InvalidRange):
        TimeInterval(datetime(2024, 9, 21, 9), datetime(2024, 9, 21, 10))


def test_interval_normalizes_other_zones_to_utc():
    plus_two = timezone(timedelta(hours=2))
    interval = TimeInterval(datetime(2024, 9, 21, 11, tzinfo=plus_two), dt(12))

    assert interval.start == dt(9)
    assert interval.start.tzinfo == timezone.utc


def test_touches_counts_shared_endpoint_and_containment():
    assert iv(dt(9), dt(10)).touches(iv(dt(10), dt(11)))
    assert iv(dt(9), dt(12)).touches(iv(dt(10), dt(11)))
    assert iv(dt(10), dt(11)).touches(iv(dt(9), dt(12)))
    assert not iv(dt(9), dt(10)).touches(iv(dt(10, 1), dt(11)))


# -----------------------------
# split
# -----------------------------
def test_split_without_blocks_returns_whole_window():
    window = iv(dt(9), dt(17))

    assert split(window, []) == [window]


def test_split_block_equal_to_window_leaves_nothing():
    window = iv(dt(9), dt(11))

    assert split(window, [iv(dt(9), dt(11))]) == []


def test_split_block_at_start():
    assert split(iv(dt(9), dt(11)), [iv(dt(9), dt(10))]) == [iv(dt(10), dt(11))]


def test_split_block_in_middle():
    result = split(iv(dt(9), dt(12)), [iv(dt(10), dt(11))])

    assert result == [iv(dt(9), dt(10)), iv(dt(11), dt(12))]


def test_split_ignores_blocks_outside_window():
    window = iv(dt(9), dt(11))
    blocks = [iv(dt(7), dt(8)), iv(dt(11), dt(12)), iv(dt(8), dt(9))]

    assert split(window, blocks) == [window]


def test_split_clamps_blocks_straddling_window_edges():
    window = iv(dt(9), dt(12))
    blocks = [iv(dt(8), dt(9, 30)), iv(dt(11, 30), dt(13))]

    assert split(window, blocks) == [iv(dt(9, 30), dt(11, 30))]


def test_split_reconstructs_window_with_disjoint_blocks():
    window = iv(dt(8), dt(18))
    blocks = [iv(dt(9), dt(10)), iv(dt(12), dt(13, 30)), iv(dt(16), dt(17))]

    free = split(window, blocks)

    pieces = sorted(free + blocks)
    assert pieces[0].start == window.start
    assert pieces[-1].end == window.end
    for left, right in zip(pieces, pieces[1:]):
        assert left.end == right.start
    for left, right in zip(free, free[1:]):
        assert left.end < right.start


def test_split_result_does_not_depend_on_block_order():
    window = iv(dt(8), dt(18))
    blocks = [iv(dt(15), dt(16)), iv(dt(9), dt(11)), iv(dt(10), dt(12))]

    expected = [iv(dt(8), dt(9)), iv(dt(12), dt(15)), iv(dt(16), dt(18))]
    assert split(window, blocks) == expected
    assert split(window, list(reversed(blocks))) == expected


def test_split_nested_block_does_not_move_cursor_back():
    window = iv(dt(9), dt(13))
    blocks = [iv(dt(9, 30), dt(12)), iv(dt(10), dt(11))]

    assert split(window, blocks) == [iv(dt(9), dt(9, 30)), iv(dt(12), dt(13))]


# -----------------------------
# intersect
# -----------------------------
def test_intersect_basic_overlap():
    assert intersect([iv(dt(9), dt(11))], [iv(dt(10), dt(12))]) == [iv(dt(10), dt(11))]


def test_intersect_touching_segments_produce_nothing():
    assert intersect([iv(dt(9), dt(10))], [iv(dt(10), dt(11))]) == []


def test_intersect_is_symmetric_in_time_ranges():
    a = [iv(dt(8), dt(9, 30)), iv(dt(10), dt(12)), iv(dt(14), dt(16))]
    b = [iv(dt(9), dt(10, 30)), iv(dt(11), dt(15))]

    assert sorted(intersect(a, b)) == sorted(intersect(b, a))


def test_intersect_never_returns_empty_or_inverted_intervals():
    a = [iv(dt(8), dt(9)), iv(dt(9), dt(10)), iv(dt(12), dt(13))]
    b = [iv(dt(9), dt(12)), iv(dt(13), dt(14))]

    for overlap in intersect(a, b):
        assert overlap.start < overlap.end


def test_intersect_sorted_matches_cross_product():
    window_a = iv(dt(8), dt(18))
    window_b = iv(dt(7), dt(16))
    a = split(window_a, [iv(dt(9), dt(10)), iv(dt(13), dt(14))])
    b = split(window_b, [iv(dt(9, 30), dt(11)), iv(dt(12), dt(13, 30)), iv(dt(15), dt(15, 30))])

    assert intersect_sorted(a, b) == intersect(a, b)
    assert intersect_sorted([], b) == []


# -----------------------------
# compute_mutual_free_time
# -----------------------------
def test_mutual_free_time_with_block_on_one_side():
    windows_a = [AvailabilityWindow(1, 100, iv(dt(9), dt(11)))]
    windows_b = [AvailabilityWindow(2, 200, iv(dt(9), dt(11)))]

    slots = compute_mutual_free_time(windows_a, [], windows_b, [iv(dt(9), dt(10))])

    assert [s.interval for s in slots] == [iv(dt(10), dt(11))]
    assert (slots[0].window_a_id, slots[0].window_b_id) == (1, 2)


def test_mutual_free_time_partial_window_overlap():
    windows_a = [AvailabilityWindow(1, 100, iv(dt(9), dt(11)))]
    windows_b = [AvailabilityWindow(2, 200, iv(dt(10), dt(12)))]

    slots = compute_mutual_free_time(windows_a, [], windows_b, [])

    assert [s.interval for s in slots] == [iv(dt(10), dt(11))]


def test_mutual_free_time_empty_when_nothing_overlaps():
    windows_a = [AvailabilityWindow(1, 100, iv(dt(9), dt(10)))]
    windows_b = [AvailabilityWindow(2, 200, iv(dt(10), dt(11)))]

    assert compute_mutual_free_time(windows_a, [], windows_b, []) == []
    assert compute_mutual_free_time([], [], windows_b, []) == []


def test_mutual_free_time_tags_every_window_pair_without_merging():
    windows_a = [
        AvailabilityWindow(1, 100, iv(dt(9), dt(12))),
        AvailabilityWindow(3, 100, iv(dt(14), dt(16))),
    ]
    windows_b = [
        AvailabilityWindow(2, 200, iv(dt(8), dt(10))),
        AvailabilityWindow(4, 200, iv(dt(10), dt(15))),
    ]
    # user A's block applies to all of A's windows
    blocks_a = [iv(dt(11), dt(12)), iv(dt(14), dt(14, 30))]

    slots = compute_mutual_free_time(windows_a, blocks_a, windows_b, [])

    assert [(s.window_a_id, s.window_b_id, s.interval) for s in slots] == [
        (1, 2, iv(dt(9), dt(10))),
        (1, 4, iv(dt(10), dt(11))),
        (3, 4, iv(dt(14, 30), dt(15))),
    ]
