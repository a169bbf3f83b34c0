# =============================================================================
# core/settings.py  —  Environment configuration
# =============================================================================
#
# All configuration comes from environment variables.  main.py calls
# load_dotenv() first, so a local .env file works too:
#
#   USPS_CLIENT_ID=...
#   USPS_CLIENT_SECRET=...
#   PORT=3000
#
# Settings is frozen and built once at start-up.  A bad value fails fast
# with the variable named, instead of surfacing on the first tool call.
# =============================================================================

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.http import DEFAULT_TIMEOUT

TRANSPORTS = ("http", "stdio")


@dataclass(frozen=True)
class Settings:
    usps_client_id: str = ""
    usps_client_secret: str = ""
    usps_base_url: str = "https://apis.usps.com"
    http_timeout: float = DEFAULT_TIMEOUT

    transport: str = "http"
    host: str = "0.0.0.0"
    port: int = 3000
    path: str = "/mcp"

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build Settings from `environ` (defaults to os.environ).

        Raises:
            ValueError: If a numeric variable isn't a finite positive
                number, MCP_TRANSPORT isn't one of TRANSPORTS, or LOG_LEVEL
                isn't a logging level name.
        """
        env = os.environ if environ is None else environ

        transport = env.get("MCP_TRANSPORT", cls.transport).strip().lower()
        if transport not in TRANSPORTS:
            raise ValueError(
                f"MCP_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}"
            )

        log_level = env.get("LOG_LEVEL", cls.log_level).strip().upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

        return cls(
            usps_client_id=env.get("USPS_CLIENT_ID", ""),
            usps_client_secret=env.get("USPS_CLIENT_SECRET", ""),
            usps_base_url=env.get("USPS_BASE_URL", cls.usps_base_url).rstrip("/"),
            http_timeout=_number(env, "HTTP_TIMEOUT_SECONDS", cls.http_timeout, float),
            transport=transport,
            host=env.get("HOST", cls.host),
            port=_number(env, "PORT", cls.port, int),
            path=env.get("MCP_PATH", cls.path),
            log_level=log_level,
        )


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a finite positive number, got {raw!r}")
    return value
