"""Exceptions raised by the FSRS scheduler."""


class FsrsError(Exception):
    """Base class for scheduler errors."""


class NonUtcDatetimeError(FsrsError, ValueError):
    """A review timestamp was naive or not in UTC."""

    def __init__(self, value):
        super().__init__(f"Review datetime must be UTC, got {value!r}")
        self.value = value


class InvalidParametersError(FsrsError, ValueError):
    """A custom parameter vector has the wrong shape."""


class UnknownCardStateError(FsrsError, ValueError):
    """A card carries a state the scheduler has no transition for."""
