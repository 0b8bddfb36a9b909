"""Service configuration read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class ServiceConfig:
    """Configuration of the HTTP service.

    Attributes:
        host: Interface to bind to (CPAMM_HOST, default 0.0.0.0)
        port: Port to bind to (CPAMM_PORT, default 8000)
        debug: Enable reload mode (CPAMM_DEBUG, default false)
        log_level: Minimum log level name (CPAMM_LOG_LEVEL, default INFO)
        log_json: Render logs as JSON lines (CPAMM_LOG_JSON, default false)
        base_symbol: Symbol of the base currency (CPAMM_BASE_SYMBOL)
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    base_symbol: str = "BASE"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServiceConfig:
        env = os.environ if environ is None else environ
        return cls(
            host=env.get("CPAMM_HOST", cls.host),
            port=int(env.get("CPAMM_PORT", str(cls.port))),
            debug=env.get("CPAMM_DEBUG", "false").lower() in _TRUTHY,
            log_level=env.get("CPAMM_LOG_LEVEL", cls.log_level).upper(),
            log_json=env.get("CPAMM_LOG_JSON", "false").lower() in _TRUTHY,
            base_symbol=env.get("CPAMM_BASE_SYMBOL", cls.base_symbol),
        )


# Default configuration instance
DEFAULT_SERVICE_CONFIG = ServiceConfig()
