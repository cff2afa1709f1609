"""Configuration package for templatepub."""

from .models import PublishConfig, StorageConfig
from .user_config import load_config


__all__ = ["PublishConfig", "StorageConfig", "load_config"]
