"""Pydantic models describing the identify request and response payloads."""

from __future__ import annotations

import re
from typing import Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from contactlink.domain.reconciliation import ConsolidatedContact, IdentifyRequest

EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\d+$")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ContactLinkBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IdentifyPayload(ContactLinkBaseModel):
    """Incoming identify request. Phone numbers may arrive as JSON numbers."""

    email: str | None = None
    phone: str | None = Field(
        default=None,
        validation_alias=AliasChoices("phone", "phoneNumber"),
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, value: object) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        return _blank_to_none(value)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is not None and not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        if value is not None and not PHONE_PATTERN.match(value):
            raise ValueError("Phone number should contain only digits")
        return value

    @model_validator(mode="after")
    def require_identifier(self) -> IdentifyPayload:
        if self.email is None and self.phone is None:
            raise ValueError("At least one of email or phone must be provided")
        return self

    def to_request(self) -> IdentifyRequest:
        return IdentifyRequest(email=self.email, phone=self.phone)


class ContactPayload(ContactLinkBaseModel):
    primary_id: int = Field(serialization_alias="primaryId")
    emails: list[str]
    phones: list[str]
    member_ids: list[int] = Field(serialization_alias="memberIds")


class IdentifyResponsePayload(ContactLinkBaseModel):
    contact: ContactPayload

    @classmethod
    def from_consolidated(cls, consolidated: ConsolidatedContact) -> IdentifyResponsePayload:
        return cls(
            contact=ContactPayload(
                primary_id=consolidated.primary_id,
                emails=list(consolidated.emails),
                phones=list(consolidated.phones),
                member_ids=list(consolidated.member_ids),
            )
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
