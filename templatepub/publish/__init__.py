"""Concurrent publish, poll and cleanup of template artifacts."""

from .cleanup import CleanupManager
from .coordinator import PublishCoordinator
from .models import (
    Artifact,
    BatchResult,
    PublishOutcome,
    TemplateFailed,
    TemplatePending,
    TemplateStatus,
    TemplateValidated,
    TrackingHandle,
)
from .poller import StatusPoller, extract_errors
from .publisher import ArtifactPublisher
from .scheduler import DelayScheduler


__all__ = [
    "Artifact",
    "ArtifactPublisher",
    "BatchResult",
    "CleanupManager",
    "DelayScheduler",
    "PublishCoordinator",
    "PublishOutcome",
    "StatusPoller",
    "TemplateFailed",
    "TemplatePending",
    "TemplateStatus",
    "TemplateValidated",
    "TrackingHandle",
    "extract_errors",
]
