"""Tests for the S3 staging store."""

from unittest.mock import Mock

import pytest
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from templatepub.config.models import StorageConfig
from templatepub.core.errors import StorageError
from templatepub.publish.models import Artifact
from templatepub.storage.staging import (
    DELETE_BATCH_SIZE,
    StagingStore,
    artifacts_for,
    staging_key,
    template_dir,
)


def client_error(operation: str) -> ClientError:
    return ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, operation
    )


@pytest.fixture
def s3():
    client = Mock()
    client.delete_objects.return_value = {"Deleted": []}
    return client


@pytest.fixture
def store(s3):
    return StagingStore(StorageConfig(bucket="test-bucket"), s3_client=s3)


class TestKeyLayout:
    @pytest.mark.parametrize(
        "prefix, expected",
        [
            ("play/templates", "play/templates/abc123/"),
            ("/play/templates/", "play/templates/abc123/"),
            ("", "abc123/"),
        ],
    )
    def test_template_dir(self, prefix, expected):
        assert template_dir(prefix, "abc123") == expected

    def test_staging_key(self):
        assert (
            staging_key("play/templates/abc123/", "play-scala")
            == "play/templates/abc123/play-scala.zip"
        )

    def test_artifacts_for(self):
        assert artifacts_for("p/abc/", ["a", "b"]) == [
            Artifact(name="a", remote_key="p/abc/a.zip"),
            Artifact(name="b", remote_key="p/abc/b.zip"),
        ]

    def test_store_uses_configured_prefix(self):
        store = StagingStore(
            StorageConfig(bucket="b", key_prefix="/custom/"), s3_client=Mock()
        )

        assert store.template_dir("rev") == "custom/rev/"


class TestUpload:
    def test_uploads_each_archive(self, store, s3, tmp_path):
        scala = tmp_path / "play-scala.zip"
        java = tmp_path / "play-java.zip"
        scala.write_bytes(b"zip")
        java.write_bytes(b"zip")

        artifacts = store.upload([scala, java], "abc123")

        assert artifacts == [
            Artifact(
                name="play-scala", remote_key="play/templates/abc123/play-scala.zip"
            ),
            Artifact(
                name="play-java", remote_key="play/templates/abc123/play-java.zip"
            ),
        ]
        s3.upload_file.assert_any_call(
            str(scala), "test-bucket", "play/templates/abc123/play-scala.zip"
        )
        assert s3.upload_file.call_count == 2

    def test_missing_archive(self, store, s3, tmp_path):
        with pytest.raises(StorageError, match="not found"):
            store.upload([tmp_path / "missing.zip"], "abc123")

        s3.upload_file.assert_not_called()

    def test_upload_failed(self, store, s3, tmp_path):
        archive = tmp_path / "play-scala.zip"
        archive.write_bytes(b"zip")
        s3.upload_file.side_effect = S3UploadFailedError(
            "Failed to upload play-scala.zip to test-bucket/play-scala.zip: "
            "An error occurred (NoSuchBucket) when calling the PutObject operation"
        )

        with pytest.raises(StorageError, match="Failed to upload"):
            store.upload([archive], "abc123")


class TestDelete:
    def test_single_request_for_small_batch(self, store, s3):
        store.delete(["a.zip", "b.zip"])

        s3.delete_objects.assert_called_once_with(
            Bucket="test-bucket",
            Delete={"Objects": [{"Key": "a.zip"}, {"Key": "b.zip"}], "Quiet": True},
        )

    def test_splits_into_batches(self, store, s3):
        keys = [f"k{i}.zip" for i in range(DELETE_BATCH_SIZE + 1)]

        store.delete(keys)

        assert s3.delete_objects.call_count == 2
        first, second = s3.delete_objects.call_args_list
        assert len(first.kwargs["Delete"]["Objects"]) == DELETE_BATCH_SIZE
        assert second.kwargs["Delete"]["Objects"] == [{"Key": keys[-1]}]

    def test_empty_key_list(self, store, s3):
        store.delete([])

        s3.delete_objects.assert_not_called()

    def test_per_key_errors(self, store, s3):
        s3.delete_objects.return_value = {
            "Errors": [{"Key": "a.zip", "Code": "AccessDenied", "Message": "denied"}]
        }

        with pytest.raises(StorageError, match="a.zip: denied"):
            store.delete(["a.zip"])

    def test_client_error(self, store, s3):
        s3.delete_objects.side_effect = client_error("DeleteObjects")

        with pytest.raises(StorageError, match="test-bucket"):
            store.delete(["a.zip"])
