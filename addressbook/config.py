import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_STORE = "data/addressbook.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass
class Settings:
    """Runtime settings, read from ADDRESSBOOK_* environment variables."""
    api_base_url: str = DEFAULT_BASE_URL
    timeout: float = 15.0
    max_retries: int = 0
    store_path: Path = Path(DEFAULT_STORE)
    log_level: str = "INFO"
    discard_stale_responses: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment.

        Raises:
            ValueError: If a numeric setting or the log level is malformed.
        """
        log_level = os.getenv("ADDRESSBOOK_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"ADDRESSBOOK_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )
        return cls(
            api_base_url=os.getenv("ADDRESSBOOK_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout=_env_number("ADDRESSBOOK_TIMEOUT", "15", float),
            max_retries=_env_number("ADDRESSBOOK_MAX_RETRIES", "0", int),
            store_path=Path(os.getenv("ADDRESSBOOK_STORE", DEFAULT_STORE)),
            log_level=log_level,
            discard_stale_responses=_env_bool("ADDRESSBOOK_DISCARD_STALE"),
        )
