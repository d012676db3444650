"""Payload dumps of vendor traffic, enabled with DEBUG_LOG_PAYLOADS.

Everything goes to the ``debug.payloads`` logger so it can be routed or
silenced apart from the application logs.
"""

import json
import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional

from ..config import settings

logger = logging.getLogger("debug.payloads")

# Inline image payloads are large and useless in logs
_BASE64_DATA_URL = re.compile(r"(data:[\w.+-]+/[\w.+-]+;base64,)[A-Za-z0-9+/=]{32,}")
_SECRET_KEYS = {"api_key", "authorization", "x-api-key"}
_BANNER_WIDTH = 60


def _clip(text: str) -> str:
    """Apply DEBUG_LOG_MAX_LENGTH (0 keeps everything)."""
    limit = settings.DEBUG_LOG_MAX_LENGTH
    if limit <= 0 or len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more chars]"


def _to_json(obj: Any, indent: Optional[int] = 2) -> str:
    try:
        return json.dumps(obj, ensure_ascii=False, indent=indent, default=str)
    except (TypeError, ValueError) as e:
        return f"<unserializable {type(obj).__name__}: {e}>"


def _redact(payload: Any) -> Any:
    """Drop credentials and elide base64 image data."""
    if isinstance(payload, dict):
        redacted = {}
        for key, value in payload.items():
            if key.lower() in _SECRET_KEYS:
                redacted[key] = "***"
            elif key == "data" and isinstance(value, str) and len(value) > 64:
                redacted[key] = f"<{len(value)} base64 chars>"
            else:
                redacted[key] = _redact(value)
        return redacted
    if isinstance(payload, list):
        return [_redact(item) for item in payload]
    if isinstance(payload, str):
        return _BASE64_DATA_URL.sub(r"\1<elided>", payload)
    return payload


def _dump(marker: str, title: str, lines: list) -> None:
    rule = marker * _BANNER_WIDTH
    header = f"[{datetime.now().isoformat()}] {title}"
    logger.info("\n".join(["", rule, header, rule, *lines, rule]))


def log_vendor_request(
    request_id: str,
    provider_id: str,
    payload: Dict[str, Any],
) -> None:
    """Log the outbound request body sent to a vendor."""
    if not settings.DEBUG_LOG_PAYLOADS:
        return

    _dump(
        ">",
        f"VENDOR REQUEST ({provider_id}): {request_id}",
        [
            f"Model: {payload.get('model')}",
            f"Stream: {bool(payload.get('stream'))}",
            f"Body:\n{_clip(_to_json(_redact(payload)))}",
        ],
    )


def log_vendor_response(
    request_id: str,
    provider_id: str,
    body: Optional[Any] = None,
) -> None:
    """Log a non-streaming vendor reply."""
    if not settings.DEBUG_LOG_PAYLOADS:
        return

    lines = [] if body is None else [f"Body:\n{_clip(_to_json(_redact(body)))}"]
    _dump("<", f"VENDOR RESPONSE ({provider_id}): {request_id}", lines)


def log_vendor_event(
    request_id: str,
    event_index: int,
    event: Dict[str, Any],
) -> None:
    """Log one raw vendor stream event on a single line."""
    if not settings.DEBUG_LOG_PAYLOADS:
        return

    event_type = event.get("type") or event.get("object") or "unknown"
    logger.debug(
        f"[{request_id}] Stream #{event_index} ({event_type}): {_clip(_to_json(event, indent=None))}"
    )
