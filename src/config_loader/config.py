"""
Configuration management for the configuration loader.

Loads settings from environment variables (prefix ``CONFIG_LOADER_``) with
sensible defaults. A ``.env`` file at the project root is honoured.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


class LoaderSettings(BaseSettings):
    """Configuration settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix='CONFIG_LOADER_', extra='ignore')

    # Document store layout
    CONFIG_INDEX_NAME: str = 'searchguard'
    CONFIG_DOC_TYPE: str = 'sg'

    # Blocking load
    LOAD_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    # HTTP store adapter
    STORE_URL: str = 'http://localhost:9200'
    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, le=300)

    # Logging
    LOG_LEVEL: str = 'INFO'


@lru_cache
def get_settings() -> LoaderSettings:
    """Cached settings singleton."""
    return LoaderSettings()
