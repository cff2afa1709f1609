from .errors import (
    APIError,
    ConfigError,
    FeedbackProvidedError,
    NetworkError,
    ProtocolError,
    PublishCancelledError,
    ServiceError,
    StorageError,
    TemplatepubError,
    TemplatePublishFailedError,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
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
