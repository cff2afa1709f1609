"""Exception hierarchy for templatepub."""

from typing import Any


class TemplatepubError(Exception):
    """Base class for all templatepub errors."""


class ConfigError(TemplatepubError):
    """Invalid or missing configuration."""


class ServiceError(TemplatepubError):
    """Base class for template service communication errors."""


class NetworkError(ServiceError):
    """Transport level failure talking to the template service."""


class APIError(ServiceError):
    """Template service answered with an unexpected status code."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class ProtocolError(ServiceError):
    """Template service answered with a body we cannot interpret."""

    def __init__(self, message: str, response_data: Any = None) -> None:
        super().__init__(message)
        self.response_data = response_data


class PublishCancelledError(TemplatepubError):
    """A publish task was interrupted because its batch was shut down."""


class StorageError(TemplatepubError):
    """Staging storage upload or delete failed."""


class FeedbackProvidedError(TemplatepubError):
    """Failure the user has already been told about.

    The CLI exits non-zero without printing anything else for these.
    """


class TemplatePublishFailedError(FeedbackProvidedError):
    """At least one template failed to publish."""

    def __init__(self, failed: list[str] | None = None, result: Any = None) -> None:
        self.failed = failed or []
        self.result = result
        names = ", ".join(self.failed) if self.failed else "unknown"
        super().__init__(f"Template publish failed: {names}")


__all__ = [
    "TemplatepubError",
    "ConfigError",
    "ServiceError",
    "NetworkError",
    "APIError",
    "ProtocolError",
    "PublishCancelledError",
    "StorageError",
    "FeedbackProvidedError",
    "TemplatePublishFailedError",
]
