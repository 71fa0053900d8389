"""Public domain model surface."""

from __future__ import annotations

from .contact import Contact, utcnow
from .enums import LinkRole

__all__ = [
    "Contact",
    "LinkRole",
    "utcnow",
]
