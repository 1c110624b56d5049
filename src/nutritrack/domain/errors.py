"""Error types raised by NutriTrack services."""


class NutriTrackError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecognitionError(NutriTrackError):
    """The estimation service could not identify a supported dish."""


class AnalysisFailure(NutriTrackError):
    """Calling or parsing the estimation service failed."""


class PersistenceReadFailure(NutriTrackError):
    """Stored meals could not be read back."""


class TipFailure(NutriTrackError):
    """The daily tip could not be generated."""
