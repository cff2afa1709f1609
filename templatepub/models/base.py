"""Base model for all templatepub Pydantic models.

This module provides a base model class that enforces strict, immutable
models across templatepub.
"""

from pydantic import BaseModel, ConfigDict


class TemplatepubBaseModel(BaseModel):
    """Base model class for all templatepub Pydantic models.

    Models are immutable once created: artifacts, handles, statuses and
    outcomes are shared between publish tasks and the aggregation step.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        frozen=True,
    )
