"""Custom exceptions for the campaign insights pipeline."""


class InsightsError(Exception):
    """Base exception for campaign insights errors."""

    pass


class ConfigLoadError(InsightsError):
    """Failed to load settings configuration."""

    pass


class ValidationError(InsightsError):
    """Request rejected before any upstream call.

    Raised for an inverted date range, an unknown account or audience list,
    or an account with no API key configured.
    """

    pass


class UpstreamError(InsightsError):
    """Upstream API returned a non-success response or a malformed payload."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        self.message = message
        prefix = f"Mailchimp API error ({status})" if status else "Mailchimp API error"
        super().__init__(f"{prefix}: {message}")
