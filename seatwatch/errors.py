"""Error kinds raised by the extraction pipeline, the snapshot store and the aggregator."""


class SeatWatchError(Exception):
    pass


class ParseError(SeatWatchError):
    """Displayed text (clock time, price) could not be parsed."""


class RowNotFoundError(SeatWatchError):
    """No result row satisfies the match criteria, or no criteria were given."""


class PairingError(SeatWatchError):
    """Itinerary segments cannot be paired into legs."""


class StoreReadError(SeatWatchError):
    """A persisted snapshot could not be read back."""


class DataUnavailableError(SeatWatchError):
    """There are no usable snapshots to aggregate."""
