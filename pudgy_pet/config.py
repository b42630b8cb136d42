"""
Runtime settings for the Pudgy Pet service, read from the environment.
"""

import os
from dataclasses import dataclass

DEFAULT_AI_BASE_URL = "https://0xecb625ec1121a9e2afca79fbb767ce8455b56c4e.gaia.domains/v1"
DEFAULT_AI_MODEL = "gaia"
DEFAULT_AI_TIMEOUT = 10.0
DEFAULT_KEY_PREFIX = "pudgy:"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class Settings:
    """Service configuration. Use ``Settings.from_env()`` in production."""

    kv_rest_url: str | None = None
    kv_rest_token: str | None = None
    key_prefix: str = DEFAULT_KEY_PREFIX

    ai_enabled: bool = True
    ai_base_url: str = DEFAULT_AI_BASE_URL
    ai_model: str = DEFAULT_AI_MODEL
    ai_api_key: str | None = None
    ai_timeout: float = DEFAULT_AI_TIMEOUT

    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            kv_rest_url=os.getenv("KV_REST_API_URL") or None,
            kv_rest_token=os.getenv("KV_REST_API_TOKEN") or None,
            key_prefix=os.getenv("PUDGY_KEY_PREFIX", DEFAULT_KEY_PREFIX),
            ai_enabled=_env_bool("PUDGY_AI_ENABLED", True),
            ai_base_url=os.getenv("PUDGY_AI_BASE_URL", DEFAULT_AI_BASE_URL),
            ai_model=os.getenv("PUDGY_AI_MODEL", DEFAULT_AI_MODEL),
            ai_api_key=os.getenv("PUDGY_AI_API_KEY") or None,
            ai_timeout=_env_float("PUDGY_AI_TIMEOUT", DEFAULT_AI_TIMEOUT),
            log_level=os.getenv("PUDGY_LOG_LEVEL", "INFO"),
            host=os.getenv("PUDGY_HOST", DEFAULT_HOST),
            port=_env_int("PUDGY_PORT", DEFAULT_PORT),
        )
