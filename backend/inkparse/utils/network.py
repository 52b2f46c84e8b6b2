from __future__ import annotations

from fastapi import Request


def get_client_ip(request: Request | None) -> str:
    """Best-effort client IP extraction (for log context only).

    Prefer X-Forwarded-For (left-most) then fall back to the socket peer.
    """
    if request is None:
        return ""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return ""


def declared_content_length(request: Request) -> int | None:
    """Content-Length header as an int, or None when absent or garbled."""
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
