"""Reconciliation service configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_int
from .errors import ConfigurationError

DEFAULT_MAX_ATTEMPTS: Final[int] = 3


@dataclass(slots=True, frozen=True)
class ReconciliationConfig:
    # attempts per request, including the first; conflicts beyond this propagate
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        max_attempts=optional_env_int("CONTACTLINK_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
    )
