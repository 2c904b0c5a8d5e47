"""DRF exception handler producing the API error envelope.

Framework-level failures (authentication, throttling, malformed input,
unsupported methods) are rendered with the same shape the order views
use for domain errors::

    {
        "success": false,
        "message": "...",
        "type": "not_authenticated",
        "errors": [{"code": "not_authenticated", "detail": "..."}]
    }
"""

from __future__ import annotations

from typing import Any, Dict, List

import structlog
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response | None:
    response = exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten(getattr(exc, "detail", response.data))
    error_type = errors[0]["code"] if errors else "error"
    message = errors[0]["detail"] if errors else str(exc)

    logger.warning(
        "api.request_failed",
        status_code=response.status_code,
        error_type=error_type,
    )

    response.data = {
        "success": False,
        "message": message,
        "type": error_type,
        "errors": errors,
    }
    return response


def _flatten(detail: Any, field: str | None = None) -> List[Dict[str, str]]:
    if isinstance(detail, dict):
        flattened: List[Dict[str, str]] = []
        for key, value in detail.items():
            flattened.extend(_flatten(value, None if key == "detail" else key))
        return flattened
    if isinstance(detail, list):
        flattened = []
        for item in detail:
            flattened.extend(_flatten(item, field))
        return flattened

    code = getattr(detail, "code", None) or "error"
    entry = {"code": str(code), "detail": str(detail)}
    if field:
        entry["field"] = field
    return [entry]
