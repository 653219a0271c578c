"""Environment configuration.

Environment variables:
    MONICA_API_KEY: API key sent as a bearer token
    MONICA_BASE_URL: API root (default https://openapi.monica.im)
    MONICA_MODEL: default chat model
    MONICA_TIMEOUT: read timeout in seconds
    MONICA_CONNECT_TIMEOUT: connect timeout in seconds
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .models import DEFAULT_MODEL

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONNECT_TIMEOUT",
    "MonicaConfig",
    "get_config",
]

DEFAULT_BASE_URL = "https://openapi.monica.im"
DEFAULT_TIMEOUT = 60.0
DEFAULT_CONNECT_TIMEOUT = 10.0


@dataclass
class MonicaConfig:
    api_key: str
    base_url: str
    model: str
    timeout: float
    connect_timeout: float

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


def _parse_seconds(value: str, default: float) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return default
    return seconds if seconds > 0 else default


def get_config() -> MonicaConfig:
    return MonicaConfig(
        api_key=os.environ.get("MONICA_API_KEY", ""),
        base_url=os.environ.get("MONICA_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        model=os.environ.get("MONICA_MODEL", DEFAULT_MODEL),
        timeout=_parse_seconds(os.environ.get("MONICA_TIMEOUT", ""), DEFAULT_TIMEOUT),
        connect_timeout=_parse_seconds(
            os.environ.get("MONICA_CONNECT_TIMEOUT", ""), DEFAULT_CONNECT_TIMEOUT
        ),
    )
