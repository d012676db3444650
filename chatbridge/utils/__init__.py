"""Utility modules."""

from .debug_logger import (
    log_vendor_event,
    log_vendor_request,
    log_vendor_response,
)

__all__ = [
    "log_vendor_event",
    "log_vendor_request",
    "log_vendor_response",
]
