"""HTTP client for the template validation service."""

from types import TracebackType
from typing import Any
from urllib.parse import urljoin

import requests
from requests.auth import HTTPBasicAuth

from templatepub.config.models import PublishConfig
from templatepub.core.errors import APIError, NetworkError, ProtocolError
from templatepub.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)

PUBLISH_ENDPOINT = "/activator/template/publish"
STATUS_ENDPOINT_TEMPLATE = "/activator/template/status/{template_id}"
STATUS_ACCEPT = "application/json,text/html;q=0.9"


class TemplateServiceClient:
    """Client for the template publish and status endpoints.

    One client (and its underlying session) is shared by every publish task
    of a batch; it must be closed when the batch is over.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        request_timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self.session = session or requests.Session()
        self.session.auth = HTTPBasicAuth(username, password)
        self.session.headers.update({"user-agent": "templatepub"})

    def _get_full_url(self, path: str) -> str:
        """Resolve a service path (or absolute URL) against the base URL."""
        return urljoin(self.base_url + "/", path)

    def status_url_for(self, template_id: str) -> str:
        """Default status path for a template id."""
        return STATUS_ENDPOINT_TEMPLATE.format(template_id=template_id)

    def _handle_publish_response(self, response: requests.Response) -> Any:
        """Return the JSON body of a publish response or raise."""
        if response.status_code != 200:
            raise APIError(
                f"Publish request failed with status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            content_preview = response.text[:200] if response.text else "(empty)"
            raise ProtocolError(
                "Template service returned invalid JSON response. "
                f"Content-Type: {response.headers.get('content-type', 'unknown')}, "
                f"Content preview: {content_preview}"
            ) from e

    def publish(self, download_url: str) -> dict[str, Any]:
        """Ask the service to fetch and publish the archive at ``download_url``.

        Returns:
            The decoded JSON body of the publish response

        Raises:
            APIError: If the service does not answer 200
            ProtocolError: If the body is not a JSON object
            NetworkError: On transport failures
        """
        try:
            response = self.session.post(
                self._get_full_url(PUBLISH_ENDPOINT),
                data={"url": download_url},
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error: {e}") from e

        data = self._handle_publish_response(response)
        if not isinstance(data, dict):
            raise ProtocolError(
                "Publish response is not a JSON object", response_data=data
            )
        return data

    def get_status(self, status_url: str) -> requests.Response:
        """Fetch the status page of a template, preferring JSON.

        Raises:
            APIError: On an HTTP error status
            NetworkError: On transport failures
        """
        try:
            response = self.session.get(
                self._get_full_url(status_url),
                headers={"accept": STATUS_ACCEPT},
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error: {e}") from e

        if response.status_code >= 400:
            raise APIError(
                f"Status request failed with status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "TemplateServiceClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def create_template_service_client(config: PublishConfig) -> TemplateServiceClient:
    """Factory function to create a template service client from configuration.

    Raises:
        ConfigError: If no credentials are configured for the publish host
    """
    username, password = config.credentials()
    logger.debug(
        "template_service_client_created",
        host=config.publish_host,
        username=username,
    )
    return TemplateServiceClient(
        config.service_base_url,
        username,
        password,
        request_timeout=config.request_timeout,
    )
