from __future__ import annotations


class DetectorError(Exception):
    """Base class for failures raised by the analysis pipeline."""


class ValidationError(DetectorError):
    """Input was rejected before any remote call was issued."""


class RemoteCallError(DetectorError):
    """The language-model API could not be reached or returned an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(RemoteCallError):
    """The completion payload is missing a field or carries one of the wrong type."""


class ConfigurationError(DetectorError):
    """A configured resource, such as the embedding reference file, cannot be used."""
