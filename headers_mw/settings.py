"""Environment-driven configuration for the headers middleware."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Tuple

from .options import HeaderOptions

LOGGER = logging.getLogger("headers_mw.settings")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-integer %s=%r", name, value)
        return default


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.environ.get(name) or ""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_mapping(name: str) -> Dict[str, str]:
    raw = os.environ.get(name)
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.warning("Ignoring malformed JSON in %s: %s", name, exc)
        return {}
    if not isinstance(data, dict):
        LOGGER.warning("Ignoring %s: expected a JSON object, got %s", name, type(data).__name__)
        return {}
    return {str(k): "" if v is None else str(v) for k, v in data.items()}


@dataclass
class Settings:
    """Derive header middleware configuration from the environment."""

    custom_request_headers: Dict[str, str] = field(default_factory=lambda: _env_mapping("HEADERS_CUSTOM_REQUEST"))
    custom_response_headers: Dict[str, str] = field(default_factory=lambda: _env_mapping("HEADERS_CUSTOM_RESPONSE"))

    allow_credentials: bool = field(default_factory=lambda: _env_bool("HEADERS_CORS_ALLOW_CREDENTIALS", False))
    allow_headers: Tuple[str, ...] = field(default_factory=lambda: _env_list("HEADERS_CORS_ALLOW_HEADERS"))
    allow_methods: Tuple[str, ...] = field(default_factory=lambda: _env_list("HEADERS_CORS_ALLOW_METHODS"))
    allow_origin: str = field(default_factory=lambda: os.environ.get("HEADERS_CORS_ALLOW_ORIGIN", "").strip())
    expose_headers: Tuple[str, ...] = field(default_factory=lambda: _env_list("HEADERS_CORS_EXPOSE_HEADERS"))
    max_age: int = field(default_factory=lambda: _env_int("HEADERS_CORS_MAX_AGE", 0))

    def to_options(self) -> HeaderOptions:
        return HeaderOptions(
            custom_request_headers=self.custom_request_headers,
            custom_response_headers=self.custom_response_headers,
            access_control_allow_credentials=self.allow_credentials,
            access_control_allow_headers=self.allow_headers,
            access_control_allow_methods=self.allow_methods,
            access_control_allow_origin=self.allow_origin,
            access_control_expose_headers=self.expose_headers,
            access_control_max_age=self.max_age,
        )


settings = Settings()


__all__ = ["settings", "Settings"]
