"""Error kinds raised by the BusTrack pipeline."""


class BusTrackError(Exception):
    """Base class for BusTrack errors."""
    pass


class SourceUnavailable(BusTrackError):
    """A static GTFS table is missing or unreadable."""
    pass


class InvalidTableName(BusTrackError, ValueError):
    """A table outside the supported GTFS set was requested."""
    pass


class FeedFetchFailure(BusTrackError):
    """A realtime feed could not be fetched or parsed."""
    pass


class CacheReadFailure(BusTrackError):
    """A cache file exists but could not be read or parsed."""
    pass


class InvalidInput(BusTrackError, ValueError):
    """Rejected query input."""

    def __init__(self, error, text: str = ""):
        self.error = error  # query_input.InputError
        self.text = text
        super().__init__(f"{error.name.lower().replace('_', ' ')}: {text!r}")
