"""
Runtime settings for userdesk.

Values come from the environment, optionally seeded from a .env file.
"""
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_QUERY_TIMEOUT_SECONDS = 10.0

_TRUE_VALUES = ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Runtime settings.

    Attributes:
        query_timeout_seconds: Upper bound on a single remote query
        eager_abort: Cancel superseded data source calls instead of only
                     discarding their results
        rules_path: Optional YAML file replacing the default field rules
        log_level: Logging level name
        log_format: "json" or "text"
    """

    query_timeout_seconds: float = Field(DEFAULT_QUERY_TIMEOUT_SECONDS, gt=0)
    eager_abort: bool = False
    rules_path: Path | None = None
    log_level: str = "INFO"
    log_format: str = Field("json", pattern="^(json|text)$")


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional .env file; existing environment variables win

    Environment variables:
        USERDESK_QUERY_TIMEOUT, USERDESK_EAGER_ABORT, USERDESK_RULES_PATH,
        LOG_LEVEL, LOG_FORMAT
    """
    if env_file is not None and os.path.exists(env_file):
        load_dotenv(env_file, override=False)

    rules_path = os.getenv("USERDESK_RULES_PATH")

    return Settings(
        query_timeout_seconds=float(os.getenv("USERDESK_QUERY_TIMEOUT", str(DEFAULT_QUERY_TIMEOUT_SECONDS))),
        eager_abort=os.getenv("USERDESK_EAGER_ABORT", "false").lower() in _TRUE_VALUES,
        rules_path=Path(rules_path) if rules_path else None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),
    )
