"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Every error body carries an ``error`` key:

- Request validation (400): {"error": "Invalid request", "details": [{"field": ..., "message": ...}]}
- Domain errors (400/404/500): {"error": "msg"} or {"error": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "error" not in body:
        return str(body)[:300]

    error = body["error"]
    details = body.get("details")
    if isinstance(details, list) and details:
        return " | ".join(f"{d.get('field', '?')}: {d.get('message', d)}" for d in details)

    if isinstance(error, dict):
        return " | ".join(f"{k}: {v}" for k, v in error.items())
    return str(error)
