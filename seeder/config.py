"""Runtime configuration — environment variables (and ``.env``) into pydantic models."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError


# ---------------------------------------------------------------------------
# Seed content
# ---------------------------------------------------------------------------
class SeedContent(BaseModel):
    """Fixed values written into every generated row."""

    # Demo fixture only. Every seeded account shares this password.
    fixture_password: str = Field("thehobbyproject", min_length=1)
    organization_description: str = "A rabble rousing business description"
    listing_title: str = "A fun all inclusive activity"
    listing_capacity: int = Field(10, ge=0)
    listing_equipment: list[str] = Field(
        default_factory=lambda: ["Water Bottle", "Mat", "Towel"]
    )
    max_schedule_offset_days: int = Field(255, ge=0)


# ---------------------------------------------------------------------------
# Application settings
# ---------------------------------------------------------------------------
class Settings(BaseModel):
    database_url: str = Field(..., min_length=1)
    log_level: str = "INFO"
    log_to_database: bool = False
    sql_echo: bool = False
    seed: SeedContent = Field(default_factory=SeedContent)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


# env var -> Settings field
_ENV_FIELDS = {
    "LOG_LEVEL": "log_level",
    "LOG_TO_DATABASE": "log_to_database",
    "SQL_ECHO": "sql_echo",
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from the process environment.

    When ``environ`` is omitted, ``.env`` is loaded first and ``os.environ``
    is read. Raises ``ConfigurationError`` if ``DATABASE_URL`` is absent or
    any value fails validation.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    database_url = environ.get("DATABASE_URL", "").strip()
    if not database_url:
        raise ConfigurationError("DATABASE_URL is not set")

    values: dict = {"database_url": database_url}
    for env_name, field_name in _ENV_FIELDS.items():
        if env_name in environ:
            values[field_name] = environ[env_name]

    seed_values = {}
    if "SEED_FIXTURE_PASSWORD" in environ:
        seed_values["fixture_password"] = environ["SEED_FIXTURE_PASSWORD"]

    try:
        values["seed"] = SeedContent(**seed_values)
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
