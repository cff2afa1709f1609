"""Concurrent publishing of a batch of template artifacts."""

import concurrent.futures
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor

from templatepub.core.structlog_logger import StructlogMixin
from templatepub.publish.models import Artifact, BatchResult, PublishOutcome
from templatepub.publish.publisher import ArtifactPublisher
from templatepub.publish.scheduler import DelayScheduler


DEFAULT_BATCH_TIMEOUT = 3600.0


class PublishCoordinator(StructlogMixin):
    """Fans publishing out over all artifacts and reduces the outcomes.

    Each artifact is published by its own task; a single timeout bounds the
    whole batch. When the timeout hits, outcomes of finished tasks are kept,
    unfinished artifacts are reported as timed out and the scheduler is
    closed so their poll loops stop.
    """

    def __init__(
        self,
        publisher: ArtifactPublisher,
        scheduler: DelayScheduler,
        timeout: float = DEFAULT_BATCH_TIMEOUT,
        max_workers: int | None = None,
    ):
        super().__init__()
        self.publisher = publisher
        self.scheduler = scheduler
        self.timeout = timeout
        self.max_workers = max_workers

    def _worker_count(self, artifact_count: int) -> int:
        if self.max_workers is None:
            return artifact_count
        return min(self.max_workers, artifact_count)

    def _collect(
        self,
        artifact: Artifact,
        future: Future[PublishOutcome],
        unfinished: set[Future[PublishOutcome]],
    ) -> PublishOutcome:
        if future in unfinished:
            return PublishOutcome.failed(
                artifact, f"Publish timed out after {self.timeout:g} seconds"
            )
        error = future.exception()
        if error is not None:
            self.log_error_with_context(
                "template_publish_task_crashed", error, template=artifact.name
            )
            return PublishOutcome.failed(artifact, f"Unexpected error: {error}")
        return future.result()

    def run(self, artifacts: Iterable[Artifact]) -> BatchResult:
        """Publish every artifact and return one outcome per artifact."""
        artifact_list = list(artifacts)
        if not artifact_list:
            self.logger.info("publish_batch_empty")
            return BatchResult()

        self.logger.info("publish_batch_started", templates=len(artifact_list))
        executor = ThreadPoolExecutor(
            max_workers=self._worker_count(len(artifact_list)),
            thread_name_prefix="templatepub-publish",
        )
        timed_out = False
        try:
            futures = [
                (artifact, executor.submit(self.publisher.publish, artifact))
                for artifact in artifact_list
            ]
            _done, not_done = concurrent.futures.wait(
                [future for _, future in futures], timeout=self.timeout
            )
            if not_done:
                timed_out = True
                self.logger.error(
                    "publish_batch_timed_out",
                    timeout=self.timeout,
                    unfinished=len(not_done),
                )
                self.scheduler.close()
                for future in not_done:
                    future.cancel()

            outcomes = [
                self._collect(artifact, future, not_done)
                for artifact, future in futures
            ]
        finally:
            executor.shutdown(wait=not timed_out, cancel_futures=True)

        result = BatchResult(outcomes=outcomes, timed_out=timed_out)
        self.log_outcomes(result)
        return result

    def log_outcomes(self, result: BatchResult) -> None:
        for outcome in result.outcomes:
            if outcome.success:
                self.logger.info(
                    "template_published",
                    template=outcome.artifact_name,
                    template_id=outcome.template_id,
                )
            else:
                self.logger.error(
                    "template_publish_failed",
                    template=outcome.artifact_name,
                    error=outcome.error,
                )

    def publish_all(self, artifacts: Iterable[Artifact]) -> bool:
        """True if and only if every artifact was published successfully."""
        return self.run(artifacts).success
