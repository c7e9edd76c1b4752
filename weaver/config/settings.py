"""
Runtime settings for weaver.

Values come from the process environment, optionally seeded from a ``.env``
file. Existing environment variables always win over the file.

Environment variables:
    FABRIC_BIN_FOLDER          Directory holding the Fabric binaries.
    WEAVER_TEMPLATE_DIR        Directory of YAML config templates.
    WEAVER_LOG_LEVEL           DEBUG, INFO, WARNING, ERROR or CRITICAL.
    WEAVER_LOG_DIR             Directory for rotating log files.
    WEAVER_POLL_INTERVAL       Seconds between commit-readiness checks.
    WEAVER_POLL_MAX_ATTEMPTS   Maximum readiness checks before giving up.
    WEAVER_POLL_MAX_DURATION   Maximum seconds spent polling.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from weaver.errors import ConfigurationError

logger = logging.getLogger(__name__)

PACKAGE_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"

ENV_MAP: Dict[str, str] = {
    "bin_dir": "FABRIC_BIN_FOLDER",
    "template_dir": "WEAVER_TEMPLATE_DIR",
    "log_level": "WEAVER_LOG_LEVEL",
    "log_dir": "WEAVER_LOG_DIR",
    "poll_interval": "WEAVER_POLL_INTERVAL",
    "poll_max_attempts": "WEAVER_POLL_MAX_ATTEMPTS",
    "poll_max_duration": "WEAVER_POLL_MAX_DURATION",
}


class WeaverSettings(BaseModel):
    """Validated weaver settings."""
    bin_dir: Optional[Path] = None
    template_dir: Path = PACKAGE_TEMPLATE_DIR
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: Optional[Path] = None
    poll_interval: float = Field(gt=0, default=30.0)
    poll_max_attempts: Optional[int] = Field(ge=1, default=None)
    poll_max_duration: Optional[float] = Field(gt=0, default=None)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("poll_max_attempts", "poll_max_duration", "bin_dir", "log_dir", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def settings_from_env(environ: Mapping[str, str] = None) -> WeaverSettings:
    """Build settings from an environment mapping (``os.environ`` by default)."""
    environ = os.environ if environ is None else environ
    values = {field: environ[var] for field, var in ENV_MAP.items() if environ.get(var, "").strip()}
    try:
        return WeaverSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid weaver settings: {e.error_count()} error(s)",
            {"errors": [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]},
        ) from e


def load_settings(env_file: Optional[Path] = None) -> WeaverSettings:
    """
    Load settings, reading ``env_file`` (or ``./.env``) first if present.

    Raises:
        ConfigurationError: an explicit ``env_file`` is missing or a value
            fails validation.
    """
    if env_file is not None:
        env_file = Path(env_file)
        if not env_file.exists():
            raise ConfigurationError(f"Env file not found: {env_file}", {"path": str(env_file)})
        load_dotenv(env_file, override=False)
        logger.debug(f"Loaded .env from {env_file}")
    else:
        default = Path.cwd() / ".env"
        if default.exists():
            load_dotenv(default, override=False)
            logger.debug(f"Loaded .env from {default}")
    return settings_from_env()
