"""Template validation service client package."""

from .client import (
    PUBLISH_ENDPOINT,
    STATUS_ENDPOINT_TEMPLATE,
    TemplateServiceClient,
    create_template_service_client,
)


__all__ = [
    "PUBLISH_ENDPOINT",
    "STATUS_ENDPOINT_TEMPLATE",
    "TemplateServiceClient",
    "create_template_service_client",
]
