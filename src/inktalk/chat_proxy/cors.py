from __future__ import annotations

from typing import Mapping, Sequence

from .config import ProxyConfig

ALLOWED_METHODS = "POST,OPTIONS"
DEFAULT_ALLOW_HEADERS = "Content-Type"


def resolve_origin(origin: str | None, allowed: Sequence[str]) -> str:
    """Echo an allow-listed origin, otherwise fall back to the first entry.

    The fallback only keeps browsers on unknown origins from being served a
    matching header; the upstream key is protected either way.
    """
    if origin and origin in allowed:
        return origin
    return allowed[0]


def cors_headers(
    origin: str | None, request_headers: Mapping[str, str], cfg: ProxyConfig
) -> dict[str, str]:
    requested = request_headers.get("access-control-request-headers")
    return {
        "Access-Control-Allow-Origin": resolve_origin(origin, cfg.allowed_origins),
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": requested or DEFAULT_ALLOW_HEADERS,
        "Access-Control-Max-Age": str(cfg.cors_max_age_s),
        "Vary": "Origin, Access-Control-Request-Headers",
        "Content-Type": "application/json",
    }
