# freetime/services/interval_store.py
from __future__ import annotations

import itertools
import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import Optional

from .errors import OutOfBounds, WindowNotFound
from .intervals import AvailabilityWindow, BlockedInterval, TimeInterval

logger = logging.getLogger(__name__)


class UserLocks:
    """Per-user write locks. Multi-user writes lock in ascending id order."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, user_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, *user_ids: int):
        with ExitStack() as stack:
            for user_id in sorted(set(user_ids)):
                stack.enter_context(self._lock_for(user_id))
            yield


def find_overlapping(windows, interval: TimeInterval) -> Optional[AvailabilityWindow]:
    """First window (by id) whose bounds touch the interval, or None."""
    for window in sorted(windows, key=lambda w: w.id):
        if window.interval.touches(interval):
            return window
    return None


def check_block_windows(
    blocker_window: Optional[AvailabilityWindow],
    blockee_window: Optional[AvailabilityWindow],
    blocker_id: int,
    blockee_id: int,
    interval: TimeInterval,
) -> None:
    """
    Validate a block request before anything is written.

    Only the blocker's window bounds are checked; the blockee's window is
    looked up for ownership but not for containment.
    """
    if blocker_window is None or blocker_window.user_id != blocker_id:
        raise WindowNotFound("Availability not found for blocker.")
    if blockee_window is None or blockee_window.user_id != blockee_id:
        raise WindowNotFound("Availability not found for blockee.")
    if not blocker_window.interval.contains(interval):
        raise OutOfBounds("Blocked time must be within the availability range.")


class IntervalStore:
    """
    Contract shared by the in-memory and database-backed stores.

    Subclasses implement save_availability and the block/list operations;
    writes for a given user are serialized through self.locks.
    """

    def __init__(self, locks: Optional[UserLocks] = None):
        self.locks = locks or UserLocks()

    def upsert_availability(self, user_id: int, interval: TimeInterval) -> AvailabilityWindow:
        window, _ = self.save_availability(user_id, interval)
        return window

    def save_availability(self, user_id: int, interval: TimeInterval):
        raise NotImplementedError

    def list_availability(self, user_id: int) -> list[AvailabilityWindow]:
        raise NotImplementedError

    def get_window(self, window_id: int) -> Optional[AvailabilityWindow]:
        raise NotImplementedError

    def create_block(
        self,
        blocker_id: int,
        blockee_id: int,
        blocker_window_id: int,
        blockee_window_id: int,
        interval: TimeInterval,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> tuple[BlockedInterval, BlockedInterval]:
        raise NotImplementedError

    def delete_block(self, block_id: int) -> bool:
        raise NotImplementedError

    def list_blocks_for_user(self, user_id: int) -> list[BlockedInterval]:
        raise NotImplementedError

    def list_blocks_owned_by(self, user_id: int) -> list[BlockedInterval]:
        return [b for b in self.list_blocks_for_user(user_id) if b.owner_user_id == user_id]


class MemoryIntervalStore(IntervalStore):
    """
    Dict-backed store; one instance per app or test, never module-global.

    Windows are indexed per user, so an upsert only scans the bucket guarded
    by that user's lock. Shared indexes (window id -> owner, blocks) are
    mutated and snapshotted under self._guard.
    """

    def __init__(self, locks: Optional[UserLocks] = None):
        super().__init__(locks)
        self._windows_by_user: dict[int, dict[int, AvailabilityWindow]] = {}
        self._window_owner: dict[int, int] = {}
        self._blocks: dict[int, BlockedInterval] = {}
        self._window_ids = itertools.count(1)
        self._block_ids = itertools.count(1)
        self._guard = threading.Lock()

    def _next_id(self, counter) -> int:
        with self._guard:
            return next(counter)

    def _user_windows(self, user_id) -> list[AvailabilityWindow]:
        with self._guard:
            return list(self._windows_by_user.get(user_id, {}).values())

    def save_availability(self, user_id, interval):
        with self.locks.hold(user_id):
            existing = find_overlapping(self._user_windows(user_id), interval)
            if existing is not None:
                window = AvailabilityWindow(existing.id, user_id, interval)
                created = False
            else:
                window = AvailabilityWindow(self._next_id(self._window_ids), user_id, interval)
                created = True

            with self._guard:
                self._windows_by_user.setdefault(user_id, {})[window.id] = window
                self._window_owner[window.id] = user_id

        logger.info("%s availability %s for user %s", "Created" if created else "Updated", window.id, user_id)
        return window, created

    def list_availability(self, user_id):
        return sorted(self._user_windows(user_id), key=lambda w: (w.interval.start, w.id))

    def get_window(self, window_id):
        with self._guard:
            user_id = self._window_owner.get(window_id)
            if user_id is None:
                return None
            return self._windows_by_user[user_id].get(window_id)

    def create_block(self, blocker_id, blockee_id, blocker_window_id, blockee_window_id,
                     interval, title=None, description=None):
        with self.locks.hold(blocker_id, blockee_id):
            try:
                check_block_windows(
                    self.get_window(blocker_window_id),
                    self.get_window(blockee_window_id),
                    blocker_id, blockee_id, interval,
                )
            except (WindowNotFound, OutOfBounds) as exc:
                logger.warning("Rejected block %s -> %s: %s", blocker_id, blockee_id, exc)
                raise

            blocker_side = BlockedInterval(
                id=self._next_id(self._block_ids),
                owner_user_id=blocker_id,
                owner_window_id=blocker_window_id,
                peer_user_id=blockee_id,
                peer_window_id=blockee_window_id,
                interval=interval,
                title=title,
                description=description,
            )
            blockee_side = BlockedInterval(
                id=self._next_id(self._block_ids),
                owner_user_id=blockee_id,
                owner_window_id=blockee_window_id,
                peer_user_id=blocker_id,
                peer_window_id=blocker_window_id,
                interval=interval,
                title=title,
                description=description,
            )
            with self._guard:
                self._blocks[blocker_side.id] = blocker_side
                self._blocks[blockee_side.id] = blockee_side

        logger.info(
            "Blocked %s - %s between users %s and %s (ids %s, %s)",
            interval.start.isoformat(), interval.end.isoformat(),
            blocker_id, blockee_id, blocker_side.id, blockee_side.id,
        )
        return blocker_side, blockee_side

    def delete_block(self, block_id):
        with self._guard:
            block = self._blocks.get(block_id)
        if block is None:
            return False
        with self.locks.hold(block.owner_user_id), self._guard:
            removed = self._blocks.pop(block_id, None)
        if removed is not None:
            logger.info("Unblocked slot %s", block_id)
        return removed is not None

    def list_blocks_for_user(self, user_id):
        with self._guard:
            blocks = list(self._blocks.values())
        return sorted((b for b in blocks if b.involves(user_id)), key=lambda b: b.id)
