from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def _rate_limit_storage_uri() -> str | None:
    return os.getenv("RATE_LIMIT_REDIS_URL") or os.getenv("REDIS_URL") or None


def _get_client_ip(request: Request) -> str:
    """Client IP, honouring the first hop of X-Forwarded-For behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[0]
    return get_remote_address(request)


def _default_limits() -> list[str]:
    if os.getenv("RATE_LIMIT_DISABLED", "").strip().lower() in {"1", "true", "yes"}:
        return []
    return [os.getenv("RATE_LIMIT_DEFAULT", "120/minute")]


def build_limiter() -> Limiter:
    storage_uri = _rate_limit_storage_uri()
    if storage_uri:
        return Limiter(key_func=_get_client_ip, default_limits=_default_limits(), storage_uri=storage_uri)
    return Limiter(key_func=_get_client_ip, default_limits=_default_limits())


limiter = build_limiter()

# Payment and OTP endpoints get a tighter budget than browsing
PAYMENT_RATE_LIMIT = os.getenv("RATE_LIMIT_PAYMENT", "20/minute")
OTP_RATE_LIMIT = os.getenv("RATE_LIMIT_OTP", "5/minute")

__all__ = ["limiter", "build_limiter", "PAYMENT_RATE_LIMIT", "OTP_RATE_LIMIT"]
