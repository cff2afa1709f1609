"""Top-level template publish workflow.

Staged artifacts are published concurrently, the staging location is always
cleaned up afterwards, and a failed batch surfaces as
``TemplatePublishFailedError`` once cleanup is done.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from templatepub.config.models import PublishConfig
from templatepub.core.errors import StorageError
from templatepub.core.structlog_logger import get_struct_logger
from templatepub.protocols import StagingStoreProtocol
from templatepub.publish.cleanup import CleanupManager
from templatepub.publish.coordinator import PublishCoordinator
from templatepub.publish.models import Artifact, BatchResult
from templatepub.publish.poller import StatusPoller
from templatepub.publish.publisher import ArtifactPublisher
from templatepub.publish.scheduler import DelayScheduler
from templatepub.service.client import (
    TemplateServiceClient,
    create_template_service_client,
)
from templatepub.storage.staging import artifacts_for


logger = get_struct_logger(__name__)


@dataclass
class PublishSession:
    """Resources shared by every publish task of one batch."""

    client: TemplateServiceClient
    scheduler: DelayScheduler
    coordinator: PublishCoordinator


@contextmanager
def publish_session(
    config: PublishConfig,
    client: TemplateServiceClient | None = None,
    scheduler: DelayScheduler | None = None,
) -> Iterator[PublishSession]:
    """Acquire the shared client and scheduler for one batch.

    Both are released when the block exits, whatever the outcome. A client
    passed in is owned by the session from then on.
    """
    client = client or create_template_service_client(config)
    scheduler = scheduler or DelayScheduler()
    try:
        poller = StatusPoller(
            client,
            scheduler,
            interval=config.poll_interval,
            max_attempts=config.max_poll_attempts,
        )
        publisher = ArtifactPublisher(client, poller, config.download_base_url)
        coordinator = PublishCoordinator(
            publisher,
            scheduler,
            timeout=config.batch_timeout,
            max_workers=config.max_workers,
        )
        yield PublishSession(
            client=client, scheduler=scheduler, coordinator=coordinator
        )
    finally:
        scheduler.close()
        client.close()


def publish_templates(
    artifacts: Sequence[Artifact],
    config: PublishConfig,
    store: StagingStoreProtocol,
    client: TemplateServiceClient | None = None,
    scheduler: DelayScheduler | None = None,
) -> BatchResult:
    """Publish staged artifacts, then remove them from staging.

    Raises:
        TemplatePublishFailedError: After cleanup, if any artifact failed
        ConfigError: If no credentials are configured (before any request)
        StorageError: If cleanup failed for an otherwise successful batch
    """
    cleanup = CleanupManager(store)
    logger.info("publishing_templates", templates=[a.name for a in artifacts])
    try:
        with publish_session(config, client, scheduler) as session:
            result = session.coordinator.run(artifacts)
    except Exception:
        cleanup.cleanup_after_error(artifacts)
        raise

    cleanup.finish(artifacts, result.success, result.failed_names, result=result)
    return result


def upload_and_publish(
    archives: Sequence[Path],
    revision: str,
    config: PublishConfig,
    store: StagingStoreProtocol,
    upload: bool = True,
) -> BatchResult:
    """Stage template archives for ``revision`` and publish them.

    Credentials are resolved before anything is uploaded. With
    ``upload=False`` the archives are assumed to be staged already.
    """
    client = create_template_service_client(config)
    expected = artifacts_for(
        store.template_dir(revision), [archive.stem for archive in archives]
    )

    if upload:
        logger.info("uploading_templates", revision=revision, count=len(archives))
        try:
            artifacts = store.upload(archives, revision)
        except StorageError:
            client.close()
            CleanupManager(store).cleanup_after_error(expected)
            raise
    else:
        artifacts = expected

    return publish_templates(artifacts, config, store, client=client)
