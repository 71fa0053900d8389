"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LinkRole(StrEnum):
    """Position of a contact record inside its identity group."""

    ROOT = "root"
    MEMBER = "member"
