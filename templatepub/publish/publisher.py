"""Publishing of a single template artifact."""

from typing import Any

from templatepub.core.errors import (
    APIError,
    ProtocolError,
    PublishCancelledError,
    ServiceError,
)
from templatepub.core.structlog_logger import StructlogMixin
from templatepub.publish.models import (
    Artifact,
    PublishOutcome,
    TemplateValidated,
    TrackingHandle,
)
from templatepub.publish.poller import StatusPoller
from templatepub.service.client import TemplateServiceClient


STATUS_LINK_REL = "activator/templates/status"


def find_status_link(data: dict[str, Any]) -> str | None:
    """Return ``_links[STATUS_LINK_REL].href`` if the response carries it."""
    links = data.get("_links")
    if not isinstance(links, dict):
        return None
    status = links.get(STATUS_LINK_REL)
    if not isinstance(status, dict):
        return None
    href = status.get("href")
    return href if isinstance(href, str) and href else None


class ArtifactPublisher(StructlogMixin):
    """Publishes one artifact and waits for the service's verdict."""

    def __init__(
        self,
        client: TemplateServiceClient,
        poller: StatusPoller,
        download_base_url: str,
    ):
        super().__init__()
        self.client = client
        self.poller = poller
        self.download_base_url = download_base_url.rstrip("/")

    def download_url(self, artifact: Artifact) -> str:
        return f"{self.download_base_url}/{artifact.remote_key}"

    def tracking_handle(self, data: dict[str, Any]) -> TrackingHandle:
        """Build the tracking handle from a publish response body.

        Raises:
            ProtocolError: If the body has no template id
        """
        template_id = data.get("uuid")
        if not isinstance(template_id, str) or not template_id:
            raise ProtocolError("Publish response has no uuid", response_data=data)
        status_url = find_status_link(data) or self.client.status_url_for(template_id)
        return TrackingHandle(id=template_id, status_url=status_url)

    def publish(self, artifact: Artifact) -> PublishOutcome:
        """Publish ``artifact`` and poll it to a terminal status.

        Never raises for per-artifact failures; they become failed outcomes.
        """
        log = self.logger.bind(template=artifact.name)
        try:
            data = self.client.publish(self.download_url(artifact))
            handle = self.tracking_handle(data)
            log.info("template_submitted", template_id=handle.id)
            status = self.poller.poll(handle)
        except APIError as e:
            log.error(
                "template_publish_request_failed",
                status_code=e.status_code,
                body=e.response_body,
            )
            return PublishOutcome.failed(artifact, str(e))
        except (ServiceError, PublishCancelledError) as e:
            self.log_error_with_context(
                "template_publish_error", e, template=artifact.name
            )
            return PublishOutcome.failed(artifact, str(e))

        if isinstance(status, TemplateValidated):
            return PublishOutcome.succeeded(artifact, status.id)
        return PublishOutcome.failed(
            artifact,
            "\n".join(status.errors)
            or f"Template {status.id} failed validation without details",
        )
