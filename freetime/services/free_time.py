# freetime/services/free_time.py
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .intervals import AvailabilityWindow, MutualFreeSlot, TimeInterval

logger = logging.getLogger(__name__)


def split(window: TimeInterval, blocks: Iterable[TimeInterval]) -> list[TimeInterval]:
    """
    Subtract blocked intervals from one availability window.

    Blocks are swept in ascending start order with a cursor that never moves
    backward, so overlapping or unsorted input gives the same free segments.
    Blocks that fall outside the window are ignored; the rest are clamped to it.
    Returns chronologically ordered, non-overlapping free segments.
    """
    free_segments = []
    cursor = window.start

    for block in sorted(blocks, key=lambda b: b.start):
        if block.end <= cursor or block.start >= window.end:
            continue

        valid_start = max(block.start, cursor)
        valid_end = min(block.end, window.end)

        if cursor < valid_start:
            free_segments.append(TimeInterval(cursor, valid_start))

        cursor = max(valid_end, cursor)

    if cursor < window.end:
        free_segments.append(TimeInterval(cursor, window.end))

    return free_segments


def _overlap(a: TimeInterval, b: TimeInterval):
    overlap_start = max(a.start, b.start)
    overlap_end = min(a.end, b.end)
    if overlap_start < overlap_end:
        return TimeInterval(overlap_start, overlap_end)
    return None


def intersect(
    segments_a: Sequence[TimeInterval],
    segments_b: Sequence[TimeInterval],
) -> list[TimeInterval]:
    """
    Pairwise-intersect two lists of free segments.

    Exhaustive cross-product: O(len(a) * len(b)). Fine for the handful of
    windows/blocks a user has; use intersect_sorted for long segment lists.
    Touching segments (zero-length overlap) produce nothing.
    """
    overlaps = []
    for a in segments_a:
        for b in segments_b:
            overlap = _overlap(a, b)
            if overlap is not None:
                overlaps.append(overlap)
    return overlaps


def intersect_sorted(
    segments_a: Sequence[TimeInterval],
    segments_b: Sequence[TimeInterval],
) -> list[TimeInterval]:
    """
    Two-pointer sweep over sorted, disjoint segment lists in O(n + m).

    For inputs shaped like split() output this returns exactly what
    intersect() returns, in the same order.
    """
    overlaps = []
    i = j = 0
    while i < len(segments_a) and j < len(segments_b):
        a = segments_a[i]
        b = segments_b[j]
        overlap = _overlap(a, b)
        if overlap is not None:
            overlaps.append(overlap)
        if a.end <= b.end:
            i += 1
        else:
            j += 1
    return overlaps


def compute_mutual_free_time(
    windows_a: Sequence[AvailabilityWindow],
    blocks_a: Sequence[TimeInterval],
    windows_b: Sequence[AvailabilityWindow],
    blocks_b: Sequence[TimeInterval],
) -> list[MutualFreeSlot]:
    """
    Free time shared by two users across every pair of their windows.

    Each window is split against its user's full block list (blocks are not
    filtered per window). Results are tagged with the (window_a, window_b) ids
    that produced them and concatenated in window-pair order without merging.
    """
    slots = []

    free_b = {window.id: split(window.interval, blocks_b) for window in windows_b}

    for window_a in windows_a:
        free_a = split(window_a.interval, blocks_a)
        if not free_a:
            continue
        for window_b in windows_b:
            for overlap in intersect(free_a, free_b[window_b.id]):
                slots.append(MutualFreeSlot(window_a.id, window_b.id, overlap))

    logger.debug(
        "Mutual free time: %d window(s) x %d window(s) -> %d slot(s)",
        len(windows_a), len(windows_b), len(slots),
    )
    return slots
