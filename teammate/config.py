"""Runtime settings read from ``TEAMMATE_*`` environment variables.

A ``.env`` file in the working directory is honoured via python-dotenv.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from teammate.engine.team_balance import MIN_TEAM_SIZE
from teammate.recent_log import DEFAULT_CAPACITY, RecentLogHandler, configure_logging


logger = logging.getLogger(__name__)

_ENV_FIELDS: dict[str, str] = {
    "participants_csv": "TEAMMATE_PARTICIPANTS_CSV",
    "teams_csv": "TEAMMATE_TEAMS_CSV",
    "store_path": "TEAMMATE_STORE_PATH",
    "team_size": "TEAMMATE_TEAM_SIZE",
    "scoring_workers": "TEAMMATE_SCORING_WORKERS",
    "log_capacity": "TEAMMATE_LOG_CAPACITY",
    "log_level": "TEAMMATE_LOG_LEVEL",
}


class Settings(BaseModel):
    """File locations and engine knobs."""

    participants_csv: str = "participants_sample.csv"
    teams_csv: str = "formed_teams.csv"
    store_path: str = "teammate_data.json"
    team_size: int = Field(default=5, ge=MIN_TEAM_SIZE)
    scoring_workers: int | None = Field(default=None, ge=1)
    log_capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"unknown log level {v!r}")
        return v


def load_settings(use_dotenv: bool = True) -> Settings:
    """Build Settings from the environment.

    Raises:
        ValueError: If a variable is set to an invalid value; the message
            names the offending variable.
    """
    if use_dotenv:
        load_dotenv()

    raw: dict[str, str] = {}
    for field_name, env_name in _ENV_FIELDS.items():
        value = os.getenv(env_name, "").strip()
        if value:
            raw[field_name] = value

    try:
        settings = Settings(**raw)
    except ValidationError as exc:
        bad = ", ".join(
            _ENV_FIELDS.get(str(err["loc"][0]), str(err["loc"][0])) for err in exc.errors()
        )
        raise ValueError(f"Invalid TeamMate configuration ({bad}): {exc}") from exc

    logger.info(
        "Settings: team_size=%d participants=%s teams=%s",
        settings.team_size, settings.participants_csv, settings.teams_csv,
    )
    return settings


def setup_logging(settings: Settings) -> RecentLogHandler:
    """Install the in-memory log buffer at the configured level and capacity."""
    return configure_logging(capacity=settings.log_capacity, level=settings.log_level)
