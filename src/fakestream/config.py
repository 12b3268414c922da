"""
Stream configuration, loaded from constructor arguments or FAKESTREAM_* env vars.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StreamConfig(BaseSettings):
    """
    Settings for a fake stream.

    Notes
    -----
    - ``num_partitions`` is how many partitions logically divide the global
      record stream; every partition consumer must agree on it.
    - ``staging_dir`` defaults to the system temp directory.
    """
    model_config = SettingsConfigDict(
        env_prefix="FAKESTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    topic_name: str = "fakeStream"
    num_partitions: int = Field(default=2, ge=1)
    batch_size: int = Field(default=10, ge=1, description="Default max messages per fetch.")

    archive_path: Optional[Path] = None
    staging_dir: Optional[Path] = None

    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    def _normalize_log_level(cls, v):
        return str(v).strip().upper()


def get_num_partitions(config: StreamConfig) -> int:
    """Partition count for a configured stream."""
    return config.num_partitions
