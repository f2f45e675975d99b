"""Runtime settings for a harvest run."""
from pathlib import Path

from pydantic import BaseModel, field_validator


DEFAULT_BASE_URL = "https://api-my.sa.gov.ge"
DEFAULT_DATA_DIR = Path("data")


class HarvestSettings(BaseModel):
    """Where to fetch from and where to cache to."""
    base_url: str = DEFAULT_BASE_URL
    data_dir: Path = DEFAULT_DATA_DIR
    timeout: float | None = None  # seconds, None waits forever

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL is an absolute http(s) origin."""
        if not v.startswith(("http://", "https://")):
            raise ValueError('base_url must start with http:// or https://')
        return v.rstrip("/")

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Ensure timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError('timeout must be positive')
        return v
