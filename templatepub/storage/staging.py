"""S3 staging location for template archives."""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from templatepub.config.models import StorageConfig
from templatepub.core.errors import StorageError
from templatepub.core.structlog_logger import get_struct_logger
from templatepub.publish.models import Artifact


logger = get_struct_logger(__name__)

# S3 DeleteObjects accepts at most this many keys per request
DELETE_BATCH_SIZE = 1000
ARCHIVE_SUFFIX = ".zip"


def template_dir(key_prefix: str, revision: str) -> str:
    """Staging directory (with trailing slash) for one source revision."""
    prefix = key_prefix.strip("/")
    return f"{prefix}/{revision}/" if prefix else f"{revision}/"


def staging_key(directory: str, artifact_name: str) -> str:
    return f"{directory}{artifact_name}{ARCHIVE_SUFFIX}"


def artifacts_for(directory: str, names: Iterable[str]) -> list[Artifact]:
    """Artifacts for templates already staged under ``directory``."""
    return [
        Artifact(name=name, remote_key=staging_key(directory, name)) for name in names
    ]


class StagingStore:
    """Uploads template archives to, and removes them from, the staging bucket."""

    def __init__(self, config: StorageConfig, s3_client: Any | None = None):
        self.config = config
        self._s3 = s3_client

    @property
    def s3(self) -> Any:
        if self._s3 is None:
            self._s3 = boto3.client(
                "s3",
                region_name=self.config.region,
                endpoint_url=self.config.endpoint_url,
            )
        return self._s3

    def template_dir(self, revision: str) -> str:
        return template_dir(self.config.key_prefix, revision)

    def upload(self, archives: Sequence[Path], revision: str) -> list[Artifact]:
        """Upload zip archives; each archive's stem becomes the artifact name.

        Raises:
            StorageError: If an archive is missing or an upload fails
        """
        directory = self.template_dir(revision)
        artifacts = []
        for archive in archives:
            if not archive.is_file():
                raise StorageError(f"Template archive not found: {archive}")
            artifact = Artifact(
                name=archive.stem, remote_key=staging_key(directory, archive.stem)
            )
            logger.info(
                "template_archive_uploading",
                archive=str(archive),
                bucket=self.config.bucket,
                key=artifact.remote_key,
            )
            try:
                self.s3.upload_file(
                    str(archive), self.config.bucket, artifact.remote_key
                )
            except (BotoCoreError, ClientError, S3UploadFailedError) as e:
                raise StorageError(
                    f"Failed to upload {archive} to s3://{self.config.bucket}/"
                    f"{artifact.remote_key}: {e}"
                ) from e
            artifacts.append(artifact)
        return artifacts

    def delete(self, keys: Sequence[str]) -> None:
        """Batch delete staged keys.

        Raises:
            StorageError: If S3 rejects the request or reports per-key errors
        """
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start : start + DELETE_BATCH_SIZE]
            try:
                response = self.s3.delete_objects(
                    Bucket=self.config.bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            except (BotoCoreError, ClientError) as e:
                raise StorageError(
                    f"Failed to delete staged templates from {self.config.bucket}: {e}"
                ) from e

            errors = response.get("Errors") or []
            if errors:
                details = ", ".join(
                    f"{err.get('Key')}: {err.get('Message', err.get('Code'))}"
                    for err in errors
                )
                raise StorageError(f"Failed to delete staged templates: {details}")
            logger.debug(
                "staged_templates_deleted", bucket=self.config.bucket, keys=batch
            )


def create_staging_store(config: StorageConfig) -> StagingStore:
    """Create a staging store for the configured bucket."""
    return StagingStore(config)
