"""Custom exceptions for the :mod:`star_population` package."""


class StarPopulationError(Exception):
    """Base exception for star population errors."""


class DataNotAvailableError(StarPopulationError):
    """Track data is missing or structurally incomplete."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TrackIOError(StarPopulationError, OSError):
    """Reading or writing track files failed."""


class DownloadError(StarPopulationError, ConnectionError):
    """Fetching the track archive failed."""


class CacheSerializationError(StarPopulationError):
    """Writing the binary track cache failed."""


class CacheDeserializationError(StarPopulationError):
    """The binary track cache could not be decoded."""


class TrackStoreUnavailableError(StarPopulationError):
    """A previous attempt to build the shared track store failed."""


class NormalizingZeroVectorError(StarPopulationError, ValueError):
    """A zero-length vector cannot be turned into a direction."""


__all__ = [
    "StarPopulationError",
    "DataNotAvailableError",
    "TrackIOError",
    "DownloadError",
    "CacheSerializationError",
    "CacheDeserializationError",
    "TrackStoreUnavailableError",
    "NormalizingZeroVectorError",
]
