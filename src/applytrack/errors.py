"""Exception hierarchy shared by the AI core, the actions and the storage layer."""

from __future__ import annotations


class ApplyTrackError(Exception):
    """Base class for all applytrack errors."""


class ProviderError(ApplyTrackError):
    """A provider call could not produce text."""

    def __init__(self, vendor: str, message: str, http_status: int | None = None):
        self.vendor = vendor
        self.message = message
        self.http_status = http_status
        super().__init__(f"[{vendor}] {message}")


class ConfigurationError(ProviderError):
    """Missing or unusable credential. Raised before any network call."""


class ProviderCallError(ProviderError):
    """Non-success HTTP status or transport failure."""


class EmptyResponseError(ProviderError):
    """Success status but the expected content field is missing or empty."""


class DownstreamParseError(ApplyTrackError):
    """Structured text returned by a provider did not parse as expected."""

    def __init__(self, message: str, raw_text: str = ""):
        self.raw_text = raw_text
        super().__init__(message)


class GenerationError(ApplyTrackError):
    """An action could not generate its document."""


class ProfileIncompleteError(ApplyTrackError):
    """The user profile lacks a field the action needs."""


class MissingJobDescriptionError(ApplyTrackError):
    """The application has neither a job description nor insights."""


class ApplicationNotFoundError(ApplyTrackError):
    def __init__(self, application_id: str):
        self.application_id = application_id
        super().__init__(f"Application not found: {application_id}")


class ScrapeError(ApplyTrackError):
    """The job posting page could not be fetched."""
