"""Removal of staged template archives after a publish batch."""

from collections.abc import Iterable

from templatepub.core.errors import StorageError, TemplatePublishFailedError
from templatepub.core.structlog_logger import StructlogMixin
from templatepub.protocols import StagingStoreProtocol
from templatepub.publish.models import Artifact, BatchResult


class CleanupManager(StructlogMixin):
    """Deletes staged archives and turns a failed batch into a build failure."""

    def __init__(self, store: StagingStoreProtocol):
        super().__init__()
        self.store = store

    def cleanup(self, artifacts: Iterable[Artifact]) -> None:
        """Delete every artifact's staged object.

        Raises:
            StorageError: If the staging store could not delete the objects
        """
        keys = [artifact.remote_key for artifact in artifacts]
        self.logger.info("staging_cleanup_started", keys=len(keys))
        if not keys:
            return
        try:
            self.store.delete(keys)
        except StorageError as e:
            self.log_error_with_context("staging_cleanup_failed", e, keys=keys)
            raise
        self.logger.info("staging_cleanup_finished", keys=len(keys))

    def cleanup_after_error(self, artifacts: Iterable[Artifact]) -> None:
        """Clean up while another error is propagating.

        A cleanup failure is logged by ``cleanup`` and does not replace the
        error the caller is about to re-raise.
        """
        try:
            self.cleanup(artifacts)
        except StorageError:
            self.logger.warning("staging_cleanup_skipped_after_error")

    def finish(
        self,
        artifacts: Iterable[Artifact],
        success: bool,
        failed: list[str] | None = None,
        result: BatchResult | None = None,
    ) -> None:
        """Clean up, then raise ``TemplatePublishFailedError`` if publish failed.

        A publish failure takes precedence over a cleanup failure; the
        cleanup failure is still logged.
        """
        try:
            self.cleanup(artifacts)
        except StorageError:
            if not success:
                raise TemplatePublishFailedError(failed, result=result) from None
            raise

        if not success:
            raise TemplatePublishFailedError(failed, result=result)
