# freetime/services/sql_store.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import timezone

from sqlalchemy import or_

from freetime.db_models import db, Availability, BlockedSlot
from .errors import OutOfBounds, WindowNotFound
from .interval_store import IntervalStore, check_block_windows, find_overlapping
from .intervals import AvailabilityWindow, BlockedInterval, TimeInterval

logger = logging.getLogger(__name__)


def _from_db(value):
    # SQLite hands DateTime(timezone=True) back naive; values were stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_window(row: Availability) -> AvailabilityWindow:
    return AvailabilityWindow(
        id=row.id,
        user_id=row.user_id,
        interval=TimeInterval(_from_db(row.start_time), _from_db(row.end_time)),
    )


def to_block(row: BlockedSlot) -> BlockedInterval:
    return BlockedInterval(
        id=row.id,
        owner_user_id=row.blocker_id,
        owner_window_id=row.blocker_availability_id,
        peer_user_id=row.blockee_id,
        peer_window_id=row.blockee_availability_id,
        interval=TimeInterval(_from_db(row.blocked_start_time), _from_db(row.blocked_end_time)),
        title=row.title,
        description=row.description,
    )


class SqlIntervalStore(IntervalStore):
    """
    Store backed by the Flask-SQLAlchemy session. Must be used inside an
    app context. Each write is one transaction: commit on success, rollback
    on any exception, so a rejected block never leaves half a pair behind.
    """

    @contextmanager
    def _transaction(self):
        try:
            yield
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def save_availability(self, user_id, interval):
        with self.locks.hold(user_id), self._transaction():
            rows = Availability.query.filter_by(user_id=user_id).all()
            by_id = {row.id: row for row in rows}
            existing = find_overlapping([to_window(row) for row in rows], interval)

            if existing is not None:
                row = by_id[existing.id]
                row.start_time = interval.start
                row.end_time = interval.end
                created = False
            else:
                row = Availability(user_id=user_id, start_time=interval.start, end_time=interval.end)
                db.session.add(row)
                created = True
            db.session.flush()
            window = AvailabilityWindow(row.id, user_id, interval)

        logger.info("%s availability %s for user %s", "Created" if created else "Updated", window.id, user_id)
        return window, created

    def list_availability(self, user_id):
        rows = (
            Availability.query
            .filter_by(user_id=user_id)
            .order_by(Availability.start_time.asc(), Availability.id.asc())
            .all()
        )
        return [to_window(row) for row in rows]

    def get_window(self, window_id):
        row = db.session.get(Availability, window_id)
        return to_window(row) if row is not None else None

    def create_block(self, blocker_id, blockee_id, blocker_window_id, blockee_window_id,
                     interval, title=None, description=None):
        with self.locks.hold(blocker_id, blockee_id), self._transaction():
            try:
                check_block_windows(
                    self.get_window(blocker_window_id),
                    self.get_window(blockee_window_id),
                    blocker_id, blockee_id, interval,
                )
            except (WindowNotFound, OutOfBounds) as exc:
                logger.warning("Rejected block %s -> %s: %s", blocker_id, blockee_id, exc)
                raise

            blocker_row = BlockedSlot(
                blocker_id=blocker_id,
                blockee_id=blockee_id,
                blocker_availability_id=blocker_window_id,
                blockee_availability_id=blockee_window_id,
                blocked_start_time=interval.start,
                blocked_end_time=interval.end,
                title=title,
                description=description,
            )
            blockee_row = BlockedSlot(
                blocker_id=blockee_id,
                blockee_id=blocker_id,
                blocker_availability_id=blockee_window_id,
                blockee_availability_id=blocker_window_id,
                blocked_start_time=interval.start,
                blocked_end_time=interval.end,
                title=title,
                description=description,
            )
            db.session.add_all([blocker_row, blockee_row])
            db.session.flush()
            pair = to_block(blocker_row), to_block(blockee_row)

        logger.info(
            "Blocked %s - %s between users %s and %s (ids %s, %s)",
            interval.start.isoformat(), interval.end.isoformat(),
            blocker_id, blockee_id, pair[0].id, pair[1].id,
        )
        return pair

    def delete_block(self, block_id):
        row = db.session.get(BlockedSlot, block_id)
        if row is None:
            return False
        with self.locks.hold(row.blocker_id), self._transaction():
            deleted = BlockedSlot.query.filter_by(id=block_id).delete()
        if deleted:
            logger.info("Unblocked slot %s", block_id)
        return bool(deleted)

    def list_blocks_for_user(self, user_id):
        rows = (
            BlockedSlot.query
            .filter(or_(BlockedSlot.blocker_id == user_id, BlockedSlot.blockee_id == user_id))
            .order_by(BlockedSlot.id.asc())
            .all()
        )
        return [to_block(row) for row in rows]

    def list_blocks_owned_by(self, user_id):
        rows = BlockedSlot.query.filter_by(blocker_id=user_id).order_by(BlockedSlot.id.asc()).all()
        return [to_block(row) for row in rows]
