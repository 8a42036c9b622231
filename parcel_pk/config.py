import logging
import os
from dataclasses import dataclass
from typing import Final

from dotenv import find_dotenv, load_dotenv

from .base import DEFAULT_TIMEOUT

ENV_PREFIX: Final = "PARCEL_PK_"
DEFAULT_USER_AGENT: Final = "Mozilla/5.0 (compatible; ParcelPk/1.0)"


@dataclass(frozen=True)
class Settings:
    request_timeout: float = DEFAULT_TIMEOUT
    refresh_interval: int = 0
    log_level: str = "WARNING"
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build the settings from `PARCEL_PK_*` environment variables

        Values from a `.env` file are loaded first unless `dotenv` is False;
        variables already set in the environment take precedence.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        request_timeout = _read_number("REQUEST_TIMEOUT", float, DEFAULT_TIMEOUT)
        if request_timeout <= 0:
            raise ValueError(f"{ENV_PREFIX}REQUEST_TIMEOUT must be positive")

        refresh_interval = _read_number("REFRESH_INTERVAL", int, 0)
        if refresh_interval < 0:
            raise ValueError(f"{ENV_PREFIX}REFRESH_INTERVAL must not be negative")

        log_level = (os.getenv(ENV_PREFIX + "LOG_LEVEL") or "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL: unknown level {log_level!r}")

        return cls(
            request_timeout=request_timeout,
            refresh_interval=refresh_interval,
            log_level=log_level,
            user_agent=os.getenv(ENV_PREFIX + "USER_AGENT") or DEFAULT_USER_AGENT,
        )


def _read_number(name, kind, default):
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name}: invalid value {raw!r}") from None
