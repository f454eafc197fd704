"""Connection settings resolution."""

from __future__ import annotations

import os
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from hass_rest.core.errors import ConfigurationError

URL_VARIABLE = "HA_URL"
TOKEN_VARIABLE = "HA_TOKEN"
TIMEOUT_VARIABLE = "HA_TIMEOUT_SECONDS"
VERIFY_SSL_VARIABLE = "HA_VERIFY_SSL"

DEFAULT_TIMEOUT_SECONDS = 10.0

_FALSE_VALUES = {"0", "false", "no", "off"}


class ConnectionSettings(BaseModel):
    """Everything a single call needs to reach Home Assistant."""

    url: str
    token: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    verify_ssl: bool = True

    class Config:
        frozen = True
        extra = "ignore"

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return value

    @field_validator("timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    def __repr__(self) -> str:
        return (
            f"ConnectionSettings(url={self.url!r}, token='***', "
            f"timeout_seconds={self.timeout_seconds}, verify_ssl={self.verify_ssl})"
        )

    __str__ = __repr__


def _from_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def resolve_settings(
    url: str | None = None,
    token: str | None = None,
    *,
    timeout_seconds: float | None = None,
    verify_ssl: bool | None = None,
    load_env_file: bool = True,
) -> ConnectionSettings:
    """Build connection settings, preferring explicit arguments over the environment.

    Empty strings count as missing. When both ``url`` and ``token`` are given
    the environment is left alone entirely and unspecified options keep their
    defaults. Otherwise the missing values are read from ``HA_URL`` and
    ``HA_TOKEN`` (optionally seeded from a ``.env`` file), together with
    ``HA_TIMEOUT_SECONDS`` and ``HA_VERIFY_SSL``.
    """

    url = url or None
    token = token or None
    use_env = url is None or token is None

    if use_env and load_env_file:
        load_dotenv(find_dotenv(usecwd=True))

    if url is None:
        url = _from_env(URL_VARIABLE)
        if url is None:
            raise ConfigurationError(f"{URL_VARIABLE} is required")
    if token is None:
        token = _from_env(TOKEN_VARIABLE)
        if token is None:
            raise ConfigurationError(f"{TOKEN_VARIABLE} is required")

    data: dict[str, Any] = {"url": url, "token": token}

    if timeout_seconds is None and use_env:
        raw_timeout = _from_env(TIMEOUT_VARIABLE)
        if raw_timeout is not None:
            try:
                timeout_seconds = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{TIMEOUT_VARIABLE} must be a number, got {raw_timeout!r}"
                ) from exc
    if timeout_seconds is not None:
        data["timeout_seconds"] = timeout_seconds

    if verify_ssl is None and use_env:
        raw_verify = _from_env(VERIFY_SSL_VARIABLE)
        if raw_verify is not None:
            verify_ssl = raw_verify.lower() not in _FALSE_VALUES
    if verify_ssl is not None:
        data["verify_ssl"] = verify_ssl

    try:
        return ConnectionSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid Home Assistant configuration: {exc}") from exc
