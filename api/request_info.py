"""
Helpers for reading client details off an incoming request.
"""

from __future__ import annotations

import uuid

from fastapi import Request


def remote_ip(request: Request) -> str | None:
    """First X-Forwarded-For hop when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def request_id(request: Request) -> str:
    """Per-request UUID, shared by every analytics event of the request."""
    rid = getattr(request.state, "request_id", None)
    if rid is None:
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
    return rid
