"""Staging storage for template archives."""

from .staging import (
    StagingStore,
    artifacts_for,
    create_staging_store,
    staging_key,
    template_dir,
)


__all__ = [
    "StagingStore",
    "artifacts_for",
    "create_staging_store",
    "staging_key",
    "template_dir",
]
