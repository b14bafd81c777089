# config.py
# Strict environment loader for the Loop integration (no fallbacks for secrets or dates)

import os
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from loop_integration.kms_utils import kms_decrypt_wrapped

DEFAULT_BASE_URL = "https://api.loop.us/v1"
DEFAULT_TIMEOUT = 30
DEFAULT_LIMIT = 50
DATE_FORMAT = "%Y-%m-%d"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class LoopSettings:
    api_key: str
    base_url: str
    timeout: int
    start_date: str
    end_date: str
    limit: int
    max_workers: Optional[int]
    log_level: str

    def with_dates(self, start_date: Optional[str], end_date: Optional[str]) -> "LoopSettings":
        """Return a copy with the date range overridden (None keeps the current value)."""
        start, end = validate_date_range(start_date or self.start_date, end_date or self.end_date)
        return replace(self, start_date=start, end_date=end)

    def describe(self) -> Dict[str, Any]:
        """For diagnostics/logging. Never includes the token."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "limit": self.limit,
            "max_workers": self.max_workers,
        }


# ---------------- Helpers ----------------------------------------------------

def _req(env: Mapping[str, str], name: str) -> str:
    v = env.get(name)
    if not v:
        raise ConfigError(f"Missing required environment variable: {name}")
    return v


def _positive_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def parse_date(value: str, name: str = "date") -> str:
    """Validate a YYYY-MM-DD date and return it normalised."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).strftime(DATE_FORMAT)
    except (AttributeError, ValueError):
        raise ConfigError(f"{name} must be a date in YYYY-MM-DD format, got {value!r}")


def validate_date_range(start_date: str, end_date: str):
    start = parse_date(start_date, "start date")
    end = parse_date(end_date, "end date")
    if start > end:
        raise ConfigError(f"start date {start} is after end date {end}")
    return start, end


# ---------------- Public API -------------------------------------------------

def load_settings(environ: Optional[Mapping[str, str]] = None) -> LoopSettings:
    """
    Build settings from the process environment (or the given mapping).
    API_KEY may be KMS-wrapped as ENCRYPTED(...); it is decrypted here.
    Raises ConfigError on any missing or malformed value.
    """
    env = os.environ if environ is None else environ

    try:
        api_key = kms_decrypt_wrapped(_req(env, "API_KEY"), env.get("KMS_KEY_ARN") or None)
    except ValueError as e:
        raise ConfigError(f"Unable to read API_KEY: {e}")
    if not api_key:
        raise ConfigError("API_KEY decrypted to an empty value")

    start_date, end_date = validate_date_range(
        _req(env, "SHIPMENTS_START_DATE"),
        _req(env, "SHIPMENTS_END_DATE"),
    )

    log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    log_level = LOG_LEVEL_ALIASES.get(log_level, log_level)
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return LoopSettings(
        api_key=api_key,
        base_url=(env.get("LOOP_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        timeout=_positive_int(env, "HTTP_TIMEOUT", DEFAULT_TIMEOUT),
        start_date=start_date,
        end_date=end_date,
        limit=_positive_int(env, "SHIPMENTS_LIMIT", DEFAULT_LIMIT),
        max_workers=_positive_int(env, "ENRICH_MAX_WORKERS", None),
        log_level=log_level,
    )
