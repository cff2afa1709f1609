"""Status polling for published templates."""

from typing import Any

import requests

from templatepub.core.errors import ProtocolError
from templatepub.core.structlog_logger import StructlogMixin
from templatepub.publish.models import (
    TemplateFailed,
    TemplatePending,
    TemplateStatus,
    TemplateValidated,
    TrackingHandle,
)
from templatepub.publish.scheduler import DelayScheduler
from templatepub.service.client import TemplateServiceClient


DEFAULT_POLL_INTERVAL = 2.0

# Marker phrases of the legacy HTML status page
PENDING_MARKER = "This template is being processed."
VALIDATED_MARKER = "This template was published successfully!"
FAILED_MARKER = "This template failed to publish."
SECTION_END_MARKER = "</article>"


def extract_errors(body: str) -> list[str]:
    """Extract error lines from a legacy failure page.

    Takes the lines after the failure marker up to the closing article tag,
    trimmed, without empty lines and without paragraph tags.
    """
    lines = iter(body.split("\n"))
    for line in lines:
        if FAILED_MARKER in line:
            break

    errors = []
    for line in lines:
        if SECTION_END_MARKER in line:
            break
        stripped = line.strip()
        if stripped:
            errors.append(stripped.replace("<p>", "").replace("</p>", ""))
    return errors


def parse_json_status(template_id: str, data: Any) -> TemplateStatus:
    """Map a structured status document to a template status."""
    if not isinstance(data, dict):
        raise ProtocolError("Status response is not a JSON object", response_data=data)

    status = data.get("status")
    if status == "pending":
        return TemplatePending(id=template_id)
    if status == "validated":
        return TemplateValidated(id=template_id)
    if status == "failed":
        errors = data.get("errors", [])
        if not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
            raise ProtocolError(
                "Status response errors must be a list of strings", response_data=data
            )
        return TemplateFailed(id=template_id, errors=errors)
    raise ProtocolError(f"Unknown template status: {status!r}", response_data=data)


def parse_html_status(template_id: str, body: str) -> TemplateStatus:
    """Map a legacy HTML status page to a template status."""
    if PENDING_MARKER in body:
        return TemplatePending(id=template_id)
    if VALIDATED_MARKER in body:
        return TemplateValidated(id=template_id)
    if FAILED_MARKER in body:
        return TemplateFailed(id=template_id, errors=extract_errors(body))
    raise ProtocolError("Status page contains no known status marker")


def parse_status_response(
    template_id: str, response: requests.Response
) -> TemplateStatus:
    """Interpret a status response, JSON first, legacy HTML otherwise."""
    content_type = response.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(f"Invalid JSON status response: {e}") from e
        return parse_json_status(template_id, data)
    return parse_html_status(template_id, response.text)


class StatusPoller(StructlogMixin):
    """Polls a template's status until it is validated or failed."""

    def __init__(
        self,
        client: TemplateServiceClient,
        scheduler: DelayScheduler,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int | None = None,
    ):
        super().__init__()
        self.client = client
        self.scheduler = scheduler
        self.interval = interval
        self.max_attempts = max_attempts

    def check(self, handle: TrackingHandle) -> TemplateStatus:
        """Issue a single status request, without waiting."""
        response = self.client.get_status(handle.status_url)
        return parse_status_response(handle.id, response)

    def poll(self, handle: TrackingHandle) -> TemplateValidated | TemplateFailed:
        """Wait for a terminal status.

        Every status request is preceded by the poll interval.

        Raises:
            PublishCancelledError: If the scheduler is closed while waiting
            ServiceError: On transport or protocol failures
        """
        attempts = 0
        while True:
            if self.max_attempts is not None and attempts >= self.max_attempts:
                self.logger.warning(
                    "status_poll_attempts_exhausted",
                    template_id=handle.id,
                    attempts=attempts,
                )
                return TemplateFailed(
                    id=handle.id,
                    errors=[
                        f"Template {handle.id} still pending after "
                        f"{attempts} status checks"
                    ],
                )

            self.scheduler.wait(self.interval)
            attempts += 1
            status = self.check(handle)
            self.logger.debug(
                "template_status_checked",
                template_id=handle.id,
                state=status.state,
                attempt=attempts,
            )
            if status.is_terminal:
                return status  # type: ignore[return-value]
