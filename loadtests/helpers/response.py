"""Response helpers for lending load tests.

The lending API answers with two error shapes:

- Request schema errors (422 from FastAPI): {"detail": [{"loc": [...], "msg": "..."}]}
- Domain errors (400/404/409/422): {"error": "msg"} or {"error": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

# Rejections a correct engine produces when administrators race for the
# same items: business-rule failures (422) and write conflicts (409).
CONTENTION_STATUSES = frozenset({409, 422})


def extract_error_detail(response: Response) -> str:
    """Compact, human-readable error text for Locust failures and log lines."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        return " | ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg', err)}" for err in detail
        )

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return " | ".join(f"{field}: {messages}" for field, messages in error.items())
    if error is not None:
        return str(error)

    return str(body)[:300]


def is_contention_rejection(response: Response) -> bool:
    """True when the response is a stock or write-conflict rejection, not a bug."""
    if response.status_code not in CONTENTION_STATUSES:
        return False
    detail = extract_error_detail(response)
    return any(marker in detail for marker in ("Insufficient stock", "not in stock", "already decided", "version"))
