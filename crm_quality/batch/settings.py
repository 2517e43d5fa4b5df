"""
Runtime settings for cleansing jobs, read from the environment.
"""

import os
from typing import Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from crm_quality.core.dedup import DEFAULT_DEDUP_KEYS
from crm_quality.core.errors import ConfigurationError


class RunnerSettings(BaseModel):
    """
    Cleansing job settings.

    Attributes:
        checkpoint_interval: Persist progress every N records (and on the last record of a batch)
        dedup_keys: Job-wide duplicate detection key fields, in priority order
        batch_size: Records per batch when run() splits a record list
    """

    checkpoint_interval: int = Field(100, ge=1)
    dedup_keys: Tuple[str, ...] = DEFAULT_DEDUP_KEYS
    batch_size: int = Field(500, ge=1)

    @field_validator("dedup_keys")
    @classmethod
    def check_dedup_keys(cls, v):
        keys = tuple(k.strip() for k in v if k and k.strip())
        if not keys:
            raise ValueError("at least one dedup key is required")
        return keys

    @classmethod
    def from_env(cls) -> "RunnerSettings":
        """
        Build settings from CRM_QUALITY_CHECKPOINT_INTERVAL, CRM_QUALITY_DEDUP_KEYS
        and CRM_QUALITY_BATCH_SIZE, falling back to defaults.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        values = {}
        if os.getenv("CRM_QUALITY_CHECKPOINT_INTERVAL"):
            values["checkpoint_interval"] = os.getenv("CRM_QUALITY_CHECKPOINT_INTERVAL")
        if os.getenv("CRM_QUALITY_DEDUP_KEYS"):
            values["dedup_keys"] = tuple(os.getenv("CRM_QUALITY_DEDUP_KEYS", "").split(","))
        if os.getenv("CRM_QUALITY_BATCH_SIZE"):
            values["batch_size"] = os.getenv("CRM_QUALITY_BATCH_SIZE")

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid runner settings: {e}") from e
