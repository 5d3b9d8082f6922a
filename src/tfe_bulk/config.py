"""Runtime settings loaded from the process environment.

Example:
    >>> settings = load_settings({"TFE_TOKEN": "secret"})
    >>> settings.address
    'https://app.terraform.io'
"""

from __future__ import annotations

import os
from typing import Mapping
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

TOKEN_ENV_VAR = "TFE_TOKEN"
ADDRESS_ENV_VAR = "TFE_ADDRESS"
TIMEOUT_ENV_VAR = "TFE_BULK_TIMEOUT"
PAGE_SIZE_ENV_VAR = "TFE_BULK_PAGE_SIZE"

DEFAULT_ADDRESS = "https://app.terraform.io"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 20


class ConfigError(RuntimeError):
    """Raised when required settings are missing or malformed."""


class Settings(BaseModel):
    """Connection settings for the Terraform API.

    Attributes:
        token: API token sent as a bearer credential.
        address: Base URL of Terraform Cloud or a Terraform Enterprise host.
        timeout_seconds: Per-request timeout.
        page_size: Items requested per page for listings.

    Example:
        >>> Settings(token="t", address="https://tfe.example.com/").address
        'https://tfe.example.com'
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    address: str = DEFAULT_ADDRESS
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100)

    @field_validator("address", mode="before")
    @classmethod
    def normalize_address(cls, value: object) -> object:
        if value is None:
            return DEFAULT_ADDRESS
        if not isinstance(value, str):
            return value
        normalized = value.strip().rstrip("/")
        if not normalized:
            return DEFAULT_ADDRESS
        if "://" not in normalized:
            normalized = f"https://{normalized}"
        parsed = urlparse(normalized)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"unsupported address: {value!r}")
        return normalized


def _optional(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name, "").strip()
    return value or None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Validated ``Settings``.

    Raises:
        ConfigError: When the token is missing or a value fails validation.
    """
    env = os.environ if environ is None else environ
    token = env.get(TOKEN_ENV_VAR, "")
    if not token:
        raise ConfigError(f"Environment variable '{TOKEN_ENV_VAR}' not found")
    payload: dict[str, object] = {"token": token}
    address = _optional(env, ADDRESS_ENV_VAR)
    if address is not None:
        payload["address"] = address
    timeout = _optional(env, TIMEOUT_ENV_VAR)
    if timeout is not None:
        payload["timeout_seconds"] = timeout
    page_size = _optional(env, PAGE_SIZE_ENV_VAR)
    if page_size is not None:
        payload["page_size"] = page_size
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in exc.errors()
        )
        raise ConfigError(f"invalid settings: {fields}") from exc
