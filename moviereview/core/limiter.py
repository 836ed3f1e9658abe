from __future__ import annotations

"""
Movie Review API — HTTP Rate Limiting (SlowAPI)
===============================================

Highlights
----------
- **User/IP aware** keying: per-user once auth sets `request.state.user_id`,
  else per-client-IP (X-Forwarded-For / X-Real-IP / client.host).
- **Exemptions**: health/docs paths, configurable trusted IPs.
- **Test/CI friendly**: `RATE_LIMIT_ENABLED=false` disables the limiter outright;
  `RATE_LIMIT_TEST_BYPASS=1` exempts requests and is re-read per request.
- **Backends**: `settings.RATELIMIT_STORAGE_URI` (e.g. Redis) or in-memory.

Environment
-----------
RATE_LIMIT_ENABLED           default: "true"
RATELIMIT_STRATEGY           default: "moving-window"
RATE_LIMIT_SKIP_PATHS        default: "/healthz,/readyz,/docs,/openapi.json,/favicon.ico"
RATE_LIMIT_TRUSTED_IPS       default: "" (comma separated)
RATE_LIMIT_NAMESPACE         default: "" (e.g., "pytest-<runid>")
RATE_LIMIT_TEST_BYPASS       default: "" (truthy to bypass in tests/CI)

Usage
-----
    @router.post("/login")
    @rate_limit("10/minute")
    async def login(request: Request, response: Response, ...): ...

Decorated endpoints must accept `request: Request` and `response: Response`.
"""

import os
from typing import Callable, List, Optional, Set

from dotenv import load_dotenv
from loguru import logger
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request

from moviereview.core.config import settings

# ──────────────────────────────────────────────────────────────
# ⚙️ Environment & defaults
# ──────────────────────────────────────────────────────────────
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() == "true"
DEFAULT_LIMIT = (settings.DEFAULT_RATE_LIMIT or "100/minute").strip()
STORAGE_URI = settings.ratelimit_storage
STRATEGY = os.getenv("RATELIMIT_STRATEGY", "moving-window").strip()

SKIP_PATHS: List[str] = [
    p.strip()
    for p in os.getenv(
        "RATE_LIMIT_SKIP_PATHS",
        "/healthz,/readyz,/docs,/openapi.json,/favicon.ico",
    ).split(",")
    if p.strip()
]

TRUSTED_IPS: Set[str] = {ip.strip() for ip in os.getenv("RATE_LIMIT_TRUSTED_IPS", "").split(",") if ip.strip()}

NAMESPACE = os.getenv("RATE_LIMIT_NAMESPACE", "").strip()


# ──────────────────────────────────────────────────────────────
# 🧠 Keying & exemptions
# ──────────────────────────────────────────────────────────────
def _client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        ip = xff.split(",")[0].strip()
        if ip:
            return ip
    xri = request.headers.get("x-real-ip")
    if xri:
        return xri.strip()
    return get_remote_address(request) or "unknown"


def _with_namespace(key: str) -> str:
    return f"{NAMESPACE}:{key}" if NAMESPACE else key


def get_user_rate_limit_key(request: Request) -> str:
    """`user:<id>` when auth ran first, else `ip:<addr>` (namespaced when set)."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return _with_namespace(f"user:{user_id}")
    return _with_namespace(f"ip:{_client_ip(request)}")


def _path_is_skipped(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix) for prefix in SKIP_PATHS)


def should_exempt_request(request: Optional[Request]) -> bool:
    """
    Exempt a request when:
      - the global switch is off, or
      - the test bypass is on, or
      - the path is skipped or the client IP is trusted.
    """
    # Re-read env at request time so tests can toggle without re-importing.
    if os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() != "true":
        return True
    if os.getenv("RATE_LIMIT_TEST_BYPASS", "").strip().lower() in _TRUTHY:
        return True
    if request is None:
        return False
    if _path_is_skipped(request.url.path):
        return True
    return _client_ip(request) in TRUSTED_IPS


# ──────────────────────────────────────────────────────────────
# 🧰 Limiter instance
# ──────────────────────────────────────────────────────────────
def _build_default_limits() -> List[str]:
    return [chunk.strip() for chunk in DEFAULT_LIMIT.split(",") if chunk.strip()]


limiter = Limiter(
    key_func=get_user_rate_limit_key,
    default_limits=_build_default_limits(),
    headers_enabled=True,
    enabled=RATE_LIMIT_ENABLED,
    storage_uri=STORAGE_URI,
    strategy=STRATEGY,
)
logger.info(
    "RateLimiter ready | enabled={} | default={} | storage={} | ns={}",
    RATE_LIMIT_ENABLED, _build_default_limits(), STORAGE_URI.split("://")[0], NAMESPACE or "-",
)


# ──────────────────────────────────────────────────────────────
# 🎛 Decorators
# ──────────────────────────────────────────────────────────────
def _exempt_when(request: Optional[Request] = None) -> bool:
    return should_exempt_request(request)


def _chain(decorators: List[Callable]) -> Callable:
    def _apply(fn: Callable) -> Callable:
        for deco in reversed(decorators):
            fn = deco(fn)
        return fn
    return _apply


def rate_limit(*limits: str) -> Callable:
    """Apply per-route limits, e.g. `@rate_limit("5/second", "100/minute")`."""
    selected = list(limits) if limits else _build_default_limits()
    return _chain([limiter.limit(value, exempt_when=_exempt_when) for value in selected])


def rate_limit_exempt() -> Callable:
    """Explicitly exempt a route from limiting."""
    return limiter.exempt


# ──────────────────────────────────────────────────────────────
# 🔧 Installer
# ──────────────────────────────────────────────────────────────
def install_rate_limiter(app) -> None:
    """Expose the limiter on `app.state` and add the middleware unless disabled."""
    app.state.limiter = limiter
    if not RATE_LIMIT_ENABLED:
        logger.info("RateLimiter disabled by env; middleware not installed")
        return
    app.add_middleware(SlowAPIMiddleware)


__all__ = [
    "limiter",
    "rate_limit",
    "rate_limit_exempt",
    "install_rate_limiter",
    "get_user_rate_limit_key",
    "should_exempt_request",
]
