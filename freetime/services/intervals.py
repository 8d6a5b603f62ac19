# freetime/services/intervals.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .errors import InvalidRange


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are rejected."""
    if not isinstance(value, datetime):
        raise InvalidRange(f"Expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise InvalidRange("Timestamps must be timezone-aware")
    return value.astimezone(timezone.utc)


@dataclass(frozen=True, order=True)
class TimeInterval:
    start: datetime
    end: datetime

    def __post_init__(self):
        start = ensure_utc(self.start)
        end = ensure_utc(self.end)
        if start >= end:
            raise InvalidRange("Start time must be before end time.")
        # frozen dataclass: write the normalized values through object.__setattr__
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    def contains(self, other: "TimeInterval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def touches(self, other: "TimeInterval") -> bool:
        """
        Inclusive "betweenness" test used when upserting availability:
        true if either endpoint of one interval falls within the closed range
        of the other. Touching endpoints count.
        """
        return (
            self.start <= other.start <= self.end
            or self.start <= other.end <= self.end
            or other.start <= self.start <= other.end
            or other.start <= self.end <= other.end
        )


@dataclass(frozen=True)
class AvailabilityWindow:
    id: int
    user_id: int
    interval: TimeInterval


@dataclass(frozen=True)
class BlockedInterval:
    id: int
    owner_user_id: int
    owner_window_id: int
    peer_user_id: int
    peer_window_id: int
    interval: TimeInterval
    title: Optional[str] = None
    description: Optional[str] = None

    def involves(self, user_id: int) -> bool:
        return user_id in (self.owner_user_id, self.peer_user_id)

    def window_for(self, user_id: int) -> Optional[int]:
        """The window id on this user's side of the record."""
        if user_id == self.owner_user_id:
            return self.owner_window_id
        if user_id == self.peer_user_id:
            return self.peer_window_id
        return None


@dataclass(frozen=True)
class MutualFreeSlot:
    window_a_id: int
    window_b_id: int
    interval: TimeInterval
