"""Runtime settings, read from the environment.

  VARIANTS_DATABASE_URL  SQLAlchemy URL (default: sqlite file under data/)
  VARIANTS_TABLE_PREFIX  prefix of the catalog tables (default: ps_)
  VARIANTS_LOG_LEVEL     log level used by the CLI (default: WARNING)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="VARIANTS_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    database_url: str = Field(
        default=f"sqlite:///{_DATA_DIR / 'variants.db'}",
        description="SQLAlchemy database URL",
    )
    table_prefix: str = Field(default="ps_", description="Catalog table prefix")
    log_level: str = Field(default="WARNING", description="CLI log level")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()
