from __future__ import annotations

from circuitbox.http.client import (
    UpstreamStatusError,
    error_type_for,
    is_breakable_http_error,
    retry_after_headers,
    send_request,
)

__all__ = [
    "UpstreamStatusError",
    "error_type_for",
    "is_breakable_http_error",
    "retry_after_headers",
    "send_request",
]
