"""
Configuration Management for the Pinned-Node Client Shim

Provides validated configuration with defaults tuned for fault-injection
runs. Supports environment variable overrides.

Design:
- Immutable after validation
- Fail-fast on invalid configuration
- Type-safe with dataclasses
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from cqlshim.core import constants as C
from cqlshim.core.errors import ConfigurationError
from cqlshim.core.types import Err, Ok, Result

_ENV_PREFIX = "CQLSHIM_"


def _env(name: str, default: str) -> str:
    return os.getenv(_ENV_PREFIX + name, default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ShimConfig:
    """
    Root configuration for connections, retries and outcome wrapping.

    Delays are in milliseconds, matching the constants module.
    """

    port: int = C.CQL_NATIVE_PORT
    connect_timeout_s: float = C.CONNECT_TIMEOUT_S
    reconnect_delay_ms: int = C.RECONNECT_DELAY_MS
    protocol_version: Optional[int] = None

    await_open_attempts: int = C.AWAIT_OPEN_ATTEMPTS
    await_open_interval_ms: int = C.AWAIT_OPEN_INTERVAL_MS

    max_query_retries: int = C.MAX_QUERY_RETRIES
    unavailable_backoff_ms: int = C.UNAVAILABLE_BACKOFF_MS

    no_host_throttle_ms: int = C.NO_HOST_THROTTLE_MS

    log_level: str = "INFO"
    log_json: bool = True

    @classmethod
    def default(cls) -> ShimConfig:
        return cls()

    @classmethod
    def from_env(cls) -> Result[ShimConfig, str]:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with CQLSHIM_.
        Example: CQLSHIM_PORT, CQLSHIM_AWAIT_OPEN_ATTEMPTS
        """
        try:
            protocol = _env("PROTOCOL_VERSION", "")
            return Ok(cls(
                port=int(_env("PORT", str(C.CQL_NATIVE_PORT))),
                connect_timeout_s=float(_env("CONNECT_TIMEOUT_S", str(C.CONNECT_TIMEOUT_S))),
                reconnect_delay_ms=int(_env("RECONNECT_DELAY_MS", str(C.RECONNECT_DELAY_MS))),
                protocol_version=int(protocol) if protocol else None,
                await_open_attempts=int(_env("AWAIT_OPEN_ATTEMPTS", str(C.AWAIT_OPEN_ATTEMPTS))),
                await_open_interval_ms=int(
                    _env("AWAIT_OPEN_INTERVAL_MS", str(C.AWAIT_OPEN_INTERVAL_MS))
                ),
                max_query_retries=int(_env("MAX_QUERY_RETRIES", str(C.MAX_QUERY_RETRIES))),
                unavailable_backoff_ms=int(
                    _env("UNAVAILABLE_BACKOFF_MS", str(C.UNAVAILABLE_BACKOFF_MS))
                ),
                no_host_throttle_ms=int(_env("NO_HOST_THROTTLE_MS", str(C.NO_HOST_THROTTLE_MS))),
                log_level=_env("LOG_LEVEL", "INFO").upper(),
                log_json=_env_bool("LOG_JSON", True),
            ))
        except (ValueError, TypeError) as e:
            return Err(f"Configuration error: {e}")

    def validate(self) -> Result[None, str]:
        """Validate configuration invariants."""
        if not 1 <= self.port <= 65535:
            return Err(f"port must be in 1..65535, got {self.port}")
        if self.await_open_attempts < 1:
            return Err("await_open_attempts must be >= 1")
        if self.connect_timeout_s <= 0:
            return Err("connect_timeout_s must be > 0")
        if self.max_query_retries < 0:
            return Err("max_query_retries must be >= 0")
        for name in (
            "reconnect_delay_ms",
            "await_open_interval_ms",
            "unavailable_backoff_ms",
            "no_host_throttle_ms",
        ):
            if getattr(self, name) < 0:
                return Err(f"{name} must be >= 0")
        return Ok(None)

    @classmethod
    def load(cls) -> ShimConfig:
        """
        Load from the environment and validate.

        Raises:
            ConfigurationError: If a variable is malformed or a value is out of range
        """
        loaded = cls.from_env()
        if loaded.is_err():
            raise ConfigurationError.invalid(loaded.error)
        config = loaded.unwrap()
        checked = config.validate()
        if checked.is_err():
            raise ConfigurationError.invalid(checked.error)
        return config
