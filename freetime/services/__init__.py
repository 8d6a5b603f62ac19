from .errors import IntervalError, InvalidRange, WindowNotFound, OutOfBounds
from .intervals import TimeInterval, AvailabilityWindow, BlockedInterval, MutualFreeSlot
from .free_time import split, intersect, intersect_sorted, compute_mutual_free_time
from .interval_store import IntervalStore, MemoryIntervalStore, UserLocks

__all__ = [
    "IntervalError",
    "InvalidRange",
    "WindowNotFound",
    "OutOfBounds",
    "TimeInterval",
    "AvailabilityWindow",
    "BlockedInterval",
    "MutualFreeSlot",
    "split",
    "intersect",
    "intersect_sorted",
    "compute_mutual_free_time",
    "IntervalStore",
    "MemoryIntervalStore",
    "UserLocks",
]
