# config.py
import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from auth_helpers import DEFAULT_REDIRECT_URI

REQUIRED_VARS = ("CLIENT_ID", "TENANT_ID", "SUBSCRIPTION_ID")
TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    """Startup configuration, built once and passed to each step."""
    client_id: str
    tenant_id: str
    subscription_id: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    login_timeout: Optional[float] = None
    request_timeout: Optional[float] = None
    show_token: bool = False
    log_level: str = "WARNING"


def _get(environ, name):
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_seconds(environ, name) -> Optional[float]:
    raw = _get(environ, name)
    if raw is None:
        return None
    try:
        seconds = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}")
    if seconds <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return seconds


def _parse_flag(environ, name) -> bool:
    raw = (environ.get(name) or "").strip().lower()
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False
    raise ConfigError(f"{name} must be true or false, got {raw!r}")


def _parse_level(environ) -> str:
    level = (_get(environ, "LOG_LEVEL") or "WARNING").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"LOG_LEVEL is not a logging level: {level!r}")
    return level


def load_settings(environ=None, dotenv: bool = True) -> Settings:
    # Load secrets from .env
    if dotenv:
        load_dotenv()
    if environ is None:
        environ = os.environ

    missing = [name for name in REQUIRED_VARS if _get(environ, name) is None]
    if missing:
        raise ConfigError("Missing required setting(s): " + ", ".join(missing))

    return Settings(
        client_id=_get(environ, "CLIENT_ID"),
        tenant_id=_get(environ, "TENANT_ID"),
        subscription_id=_get(environ, "SUBSCRIPTION_ID"),
        redirect_uri=_get(environ, "REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        login_timeout=_parse_seconds(environ, "LOGIN_TIMEOUT"),
        request_timeout=_parse_seconds(environ, "REQUEST_TIMEOUT"),
        show_token=_parse_flag(environ, "SHOW_TOKEN"),
        log_level=_parse_level(environ),
    )
