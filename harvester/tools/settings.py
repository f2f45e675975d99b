"""Load HarvestSettings from the environment (and a .env file, if present)."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from harvester.models.settings import DEFAULT_BASE_URL, DEFAULT_DATA_DIR, HarvestSettings


def load_settings(
    base_url: Optional[str] = None,
    data_dir: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> HarvestSettings:
    """
    Build settings; explicit arguments win over environment variables.

    Environment:
        HARVESTER_BASE_URL: API origin
        HARVESTER_DATA_DIR: cache root directory
        HARVESTER_TIMEOUT: request timeout in seconds (unset = no timeout)
    """
    load_dotenv()

    env_timeout = os.getenv("HARVESTER_TIMEOUT")
    if timeout is None and env_timeout:
        timeout = float(env_timeout)

    return HarvestSettings(
        base_url=base_url or os.getenv("HARVESTER_BASE_URL", DEFAULT_BASE_URL),
        data_dir=data_dir or Path(os.getenv("HARVESTER_DATA_DIR", str(DEFAULT_DATA_DIR))),
        timeout=timeout,
    )
