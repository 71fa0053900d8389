"""Request/response payloads exchanged with callers of the reconciliation service."""

from __future__ import annotations

from .schema import ContactPayload, IdentifyPayload, IdentifyResponsePayload

__all__ = [
    "ContactPayload",
    "IdentifyPayload",
    "IdentifyResponsePayload",
]
