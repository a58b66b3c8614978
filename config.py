# config.py - Runtime configuration (API base URL, request timeout, log dir)
#
# Single place for loading configuration. The API client and main.py import
# from here instead of defining config logic themselves.

import logging
import os
import sys
from pathlib import Path

from file_utils import atomic_write_json, load_json_object

logger = logging.getLogger(__name__)

# Environment variables (highest priority)
API_URL_ENV = "CALIBRATION_DASHBOARD_API_URL"
TIMEOUT_ENV = "CALIBRATION_DASHBOARD_TIMEOUT"

CONFIG_FILE_NAME = "config.json"

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 30.0


def get_app_base_dir() -> Path:
    """Directory containing the app (install dir when frozen, script dir when run from source)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent


def get_config_path() -> Path:
    return get_app_base_dir() / CONFIG_FILE_NAME


def get_log_dir() -> Path:
    return get_app_base_dir() / "logs"


def _normalize_url(url: str) -> str:
    return url.strip().rstrip("/")


def load_api_base_url(config_path: Path | None = None) -> str:
    """
    Load the backend base URL.
    Order: API_URL_ENV > config.json "api_base_url" > DEFAULT_API_BASE_URL.
    """
    env_url = os.environ.get(API_URL_ENV)
    if env_url and env_url.strip():
        return _normalize_url(env_url)

    data = load_json_object(config_path or get_config_path())
    raw = data.get("api_base_url")
    if raw and isinstance(raw, str) and raw.strip():
        return _normalize_url(raw)

    return DEFAULT_API_BASE_URL


def _parse_timeout(raw, source: str) -> float | None:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid request timeout %r from %s; using default %ss", raw, source, DEFAULT_TIMEOUT_SECONDS)
        return None
    if value <= 0:
        logger.warning("Request timeout must be positive (%r from %s); using default", raw, source)
        return None
    return value


def load_request_timeout(config_path: Path | None = None) -> float:
    """
    Load the per-request timeout in seconds.
    Order: TIMEOUT_ENV > config.json "request_timeout_seconds" > DEFAULT_TIMEOUT_SECONDS.
    """
    env_raw = os.environ.get(TIMEOUT_ENV)
    if env_raw and env_raw.strip():
        value = _parse_timeout(env_raw.strip(), TIMEOUT_ENV)
        if value is not None:
            return value

    data = load_json_object(config_path or get_config_path())
    if "request_timeout_seconds" in data:
        value = _parse_timeout(data["request_timeout_seconds"], CONFIG_FILE_NAME)
        if value is not None:
            return value

    return DEFAULT_TIMEOUT_SECONDS


def persist_api_base_url(url: str, config_path: Path | None = None) -> Path:
    """Save url as "api_base_url" in config.json, keeping any other keys. Returns the file written."""
    path = Path(config_path or get_config_path())
    data = load_json_object(path)
    data["api_base_url"] = _normalize_url(url)
    atomic_write_json(path, data)
    logger.info("Saved API base URL %s to %s", data["api_base_url"], path)
    return path
