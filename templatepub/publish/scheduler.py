"""Shared delay scheduler for publish tasks."""

import threading
from types import TracebackType

from templatepub.core.errors import PublishCancelledError


class DelayScheduler:
    """Timer shared by every poll loop of a batch.

    ``wait`` blocks the calling task for the given delay without spinning.
    Closing the scheduler wakes every waiting task, which then raises
    ``PublishCancelledError``.
    """

    def __init__(self) -> None:
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def wait(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless the scheduler is closed first.

        Raises:
            PublishCancelledError: If the scheduler is or becomes closed
        """
        if self._closed.wait(timeout=seconds):
            raise PublishCancelledError("Publish batch was shut down")

    def close(self) -> None:
        self._closed.set()

    def __enter__(self) -> "DelayScheduler":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
