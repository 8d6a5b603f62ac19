# freetime/services/errors.py


class IntervalError(Exception):
    """Base class for validation failures raised by the interval core."""


class InvalidRange(IntervalError, ValueError):
    """A submitted interval has start >= end (or unusable timestamps)."""


class WindowNotFound(IntervalError, LookupError):
    """An availability window id is unknown or belongs to another user."""


class OutOfBounds(IntervalError):
    """A block's interval is not contained in its owning window."""
