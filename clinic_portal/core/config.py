import os
from urllib.parse import urlparse

import pytz
from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: str) -> list[str]:
    raw = value if value is not None else default
    return [item.strip() for item in raw.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)

CLINIC_API_BASE_URL = os.getenv("CLINIC_API_BASE_URL", "http://localhost:3000/api").rstrip("/")
CLINIC_API_TIMEOUT_SECONDS = float(os.getenv("CLINIC_API_TIMEOUT_SECONDS", "10"))

# Slot labels and the backend's preferredDateTime are zone-less wall-clock values in this zone.
CLINIC_TIMEZONE = os.getenv("CLINIC_TIMEZONE", "Asia/Manila")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), "http://localhost:3000")


def get_clinic_timezone():
    return pytz.timezone(CLINIC_TIMEZONE)


def validate_runtime_config() -> None:
    if CLINIC_TIMEZONE not in pytz.all_timezones_set:
        raise RuntimeError(f"CLINIC_TIMEZONE '{CLINIC_TIMEZONE}' is not a known timezone.")

    parsed = urlparse(CLINIC_API_BASE_URL)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise RuntimeError("CLINIC_API_BASE_URL must be an absolute http(s) URL.")

    if CLINIC_API_TIMEOUT_SECONDS <= 0:
        raise RuntimeError("CLINIC_API_TIMEOUT_SECONDS must be positive.")
