"""Tests for publishing a single template artifact."""

from unittest.mock import Mock, patch

import pytest
import requests

from templatepub.core.errors import PublishCancelledError
from templatepub.publish.models import (
    Artifact,
    TemplateFailed,
    TemplateValidated,
    TrackingHandle,
)
from templatepub.publish.poller import StatusPoller
from templatepub.publish.publisher import ArtifactPublisher, find_status_link
from tests.helpers import make_response


ARTIFACT = Artifact(
    name="play-scala", remote_key="play/templates/abc123/play-scala.zip"
)


@pytest.fixture
def mock_poller():
    poller = Mock(spec=StatusPoller)
    poller.poll.return_value = TemplateValidated(id="uuid-1")
    return poller


@pytest.fixture
def publisher(service_client, mock_poller):
    return ArtifactPublisher(
        service_client, mock_poller, "http://downloads.typesafe.com/"
    )


class TestFindStatusLink:
    def test_nested_link(self):
        data = {
            "uuid": "u",
            "_links": {"activator/templates/status": {"href": "/status/u"}},
        }
        assert find_status_link(data) == "/status/u"

    @pytest.mark.parametrize(
        "data",
        [
            {"uuid": "u"},
            {"uuid": "u", "_links": []},
            {"uuid": "u", "_links": {"self": {"href": "/x"}}},
            {"uuid": "u", "_links": {"activator/templates/status": {}}},
            {"uuid": "u", "_links": {"activator/templates/status": {"href": 3}}},
        ],
    )
    def test_missing_link(self, data):
        assert find_status_link(data) is None


class TestArtifactPublisher:
    """Test publish request handling and outcome mapping."""

    def test_posts_download_url_as_form_field(self, publisher, service_client):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            publisher.publish(ARTIFACT)

        args, kwargs = mock_post.call_args
        assert args[0] == "https://typesafe.com/activator/template/publish"
        assert kwargs["data"] == {
            "url": "http://downloads.typesafe.com/play/templates/abc123/play-scala.zip"
        }

    def test_validated_gives_success_outcome(
        self, publisher, service_client, mock_poller
    ):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(
                json_data={
                    "uuid": "uuid-1",
                    "_links": {
                        "activator/templates/status": {
                            "href": "https://typesafe.com/custom/status/uuid-1"
                        }
                    },
                }
            )

            outcome = publisher.publish(ARTIFACT)

        assert outcome.success
        assert outcome.template_id == "uuid-1"
        assert outcome.artifact_name == "play-scala"
        assert outcome.remote_key == ARTIFACT.remote_key
        mock_poller.poll.assert_called_once_with(
            TrackingHandle(
                id="uuid-1", status_url="https://typesafe.com/custom/status/uuid-1"
            )
        )

    def test_missing_links_falls_back_to_default_status_url(
        self, publisher, service_client, mock_poller
    ):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            publisher.publish(ARTIFACT)

        handle = mock_poller.poll.call_args.args[0]
        assert handle.status_url == "/activator/template/status/uuid-1"

    def test_failed_status_joins_errors(self, publisher, service_client, mock_poller):
        mock_poller.poll.return_value = TemplateFailed(
            id="uuid-1", errors=["Error one", "Error two"]
        )
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert outcome.error == "Error one\nError two"

    def test_failure_text_is_not_trimmed(
        self, publisher, service_client, mock_poller
    ):
        mock_poller.poll.return_value = TemplateFailed(
            id="uuid-1", errors=["  [error] x", "    at line 3  "]
        )
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            outcome = publisher.publish(ARTIFACT)

        assert outcome.error == "  [error] x\n    at line 3  "

    def test_failed_status_without_errors(self, publisher, service_client, mock_poller):
        mock_poller.poll.return_value = TemplateFailed(id="uuid-1", errors=[])
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert "uuid-1" in outcome.error

    def test_non_200_is_failure_without_polling(
        self, publisher, service_client, mock_poller
    ):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(status_code=403, text="Forbidden")

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert "403" in outcome.error
        mock_poller.poll.assert_not_called()

    def test_created_status_is_not_accepted(self, publisher, service_client):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(
                status_code=201, json_data={"uuid": "uuid-1"}
            )

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success

    def test_malformed_json_is_failure(self, publisher, service_client, mock_poller):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(text="<html>oops</html>")

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert "invalid JSON" in outcome.error
        mock_poller.poll.assert_not_called()

    def test_missing_uuid_is_failure(self, publisher, service_client, mock_poller):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"id": "nope"})

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert "uuid" in outcome.error
        mock_poller.poll.assert_not_called()

    def test_network_error_is_failure(self, publisher, service_client):
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.side_effect = requests.exceptions.ConnectionError("refused")

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert "Network error" in outcome.error

    def test_cancelled_poll_is_failure(self, publisher, service_client, mock_poller):
        mock_poller.poll.side_effect = PublishCancelledError("shut down")
        with patch.object(service_client.session, "post") as mock_post:
            mock_post.return_value = make_response(json_data={"uuid": "uuid-1"})

            outcome = publisher.publish(ARTIFACT)

        assert not outcome.success
        assert outcome.error == "shut down"
