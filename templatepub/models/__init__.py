"""Shared model base classes."""

from .base import TemplatepubBaseModel


__all__ = ["TemplatepubBaseModel"]
