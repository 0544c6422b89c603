"""
Error types raised inside the SeaChart engine.

FetchFailed is the only one meant to cross a module boundary: the data-fetch
layer raises it and the layer controller records it on the layer state.
The others are caught where they occur and turned into a safe default.
"""


class SeaChartError(Exception):
    """Base class for engine errors."""


class FetchFailed(SeaChartError):
    """Network, HTTP or decoding failure while fetching a resource."""

    def __init__(self, resource: str, cause: object):
        self.resource = resource
        self.cause = cause
        super().__init__(f"Failed to fetch {resource}: {cause}")


class ParseSkipped(SeaChartError):
    """A single malformed harbor record."""


class PersistenceUnavailable(SeaChartError):
    """Durable storage could not be read or written."""


class GeolocationUnavailable(SeaChartError):
    """The user's position could not be determined."""
