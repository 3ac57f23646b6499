"""Client configuration for pysensi."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pysensi._constants import BASE_URL
from pysensi.exceptions import SensiConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise SensiConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class SensiConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        Sensi account email.
    password : str
        Sensi account password.
    base_url : str
        Service base URL.
    polling_retry_count : int
        Consecutive poll failures tolerated before polling stops for good.
        The counter resets on every successful poll.
    polling_retry_delay : float
        Seconds to wait before re-polling after a failure.  ``0`` re-polls
        immediately.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.  Must exceed the
        server's long-poll hold time.
    api_trace_enabled : bool
        Log every request/response pair (redacted) at DEBUG level.
    """

    username: str
    password: str
    base_url: str = BASE_URL
    polling_retry_count: int = 5
    polling_retry_delay: float = 0.0
    request_timeout: float = 120.0
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.username or not self.password:
            raise SensiConfigError("username and password are required")
        if self.polling_retry_count < 0:
            raise SensiConfigError("polling_retry_count must be >= 0")
        if self.polling_retry_delay < 0:
            raise SensiConfigError("polling_retry_delay must be >= 0")
        if self.request_timeout <= 0:
            raise SensiConfigError("request_timeout must be > 0")
        # Endpoint paths are appended verbatim.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> SensiConfig:
        """Create configuration from environment variables.

        Reads ``SENSI_USERNAME``, ``SENSI_PASSWORD`` and the optional
        ``SENSI_*`` variables below.  Explicit keyword arguments override
        environment values.

        Raises
        ------
        SensiConfigError
            If a numeric variable cannot be parsed or required values are
            missing.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SENSI_USERNAME": "username",
            "SENSI_PASSWORD": "password",
            "SENSI_BASE_URL": "base_url",
        }
        config_kwargs: dict[str, Any] = {"username": "", "password": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "SENSI_POLLING_RETRY_COUNT": ("polling_retry_count", int),
            "SENSI_POLLING_RETRY_DELAY": ("polling_retry_delay", float),
            "SENSI_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, kind) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, kind)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("SENSI_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
