"""
India Disaster Response - Error Types
"""


class DisasterResponseError(Exception):
    """Base class for application errors."""


class ConfigurationError(DisasterResponseError):
    """No usable provider or service credentials are configured."""


class ValidationError(DisasterResponseError):
    """Input was rejected before any external call was made."""


class RecipientValidationError(ValidationError):
    """No valid recipient numbers remain after filtering."""


class ReportValidationError(ValidationError):
    """A report is missing required fields or carries invalid values."""


class ImageRejectedError(DisasterResponseError):
    """The image verifier judged an attached photo not to show a real emergency."""

    def __init__(self, reason: str, warnings=None):
        super().__init__(reason)
        self.reason = reason
        self.warnings = warnings or []


class ProviderError(DisasterResponseError):
    """An SMS provider call failed."""


class VerificationServiceError(DisasterResponseError):
    """The AI verification service failed, timed out, or is not configured."""


class PersistenceError(DisasterResponseError):
    """The report store could not save or load a report."""
