"""Error types raised by the flights core."""


class FlightsError(Exception):
    """Base class for all errors reported by the flights package."""


class NoTraceData(FlightsError):
    """The trace is empty or holds no usable point."""


class OutOfOrderTimestamp(FlightsError):
    """A trace point is older than the point before it."""

    def __init__(self, index: int, previous: float, current: float):
        self.index = index
        self.previous = previous
        self.current = current
        super().__init__(
            f"timestamp {current} at index {index} precedes {previous}"
        )


class MissingEmissionsFactor(FlightsError):
    """The emissions table has no usable factor for a required bracket."""
