"""Protocol definitions for templatepub collaborators."""

from .storage_protocols import StagingStoreProtocol


__all__ = ["StagingStoreProtocol"]
