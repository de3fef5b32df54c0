from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class WriterSettings(BaseSettings):
    """Environment configuration, read from ``CLOUDWATCH_WRITER_*`` variables."""

    LOG_GROUP_NAME: str
    LOG_STREAM_NAME: str
    REGION: Optional[str] = None  # None -> boto3 default region resolution
    BATCH_INTERVAL: float = 5.0  # seconds

    model_config = SettingsConfigDict(
        env_prefix="CLOUDWATCH_WRITER_",
        env_file=".env",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> WriterSettings:
    return WriterSettings()
