"""Validation of identify payloads."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from contactlink.adapters.api import IdentifyPayload, IdentifyResponsePayload
from contactlink.domain.reconciliation import ConsolidatedContact, IdentifyRequest


def test_payload_accepts_both_identifiers() -> None:
    parsed = IdentifyPayload.model_validate({"email": "a@x.com", "phone": "100"})

    assert parsed.to_request() == IdentifyRequest(email="a@x.com", phone="100")


def test_payload_accepts_numeric_phone_number_alias() -> None:
    parsed = IdentifyPayload.model_validate({"phoneNumber": 123456})

    assert parsed.phone == "123456"
    assert parsed.email is None


def test_payload_treats_blank_values_as_missing() -> None:
    parsed = IdentifyPayload.model_validate({"email": "  ", "phone": " 100 "})

    assert parsed.to_request() == IdentifyRequest(phone="100")


def test_payload_ignores_unknown_fields() -> None:
    parsed = IdentifyPayload.model_validate({"email": "a@x.com", "name": "Ada"})

    assert parsed.to_request() == IdentifyRequest(email="a@x.com")


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "At least one of email or phone must be provided"),
        ({"email": "", "phone": None}, "At least one of email or phone must be provided"),
        ({"email": "not-an-email"}, "Invalid email format"),
        ({"email": "a @x.com"}, "Invalid email format"),
        ({"phone": "12-34"}, "Phone number should contain only digits"),
        ({"phoneNumber": "+4412"}, "Phone number should contain only digits"),
    ],
)
def test_payload_rejects_invalid_input(payload: dict[str, object], message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        IdentifyPayload.model_validate(payload)


def test_payload_rejects_boolean_phone() -> None:
    with pytest.raises(ValidationError):
        IdentifyPayload.model_validate({"phone": True})


def test_response_serializes_with_public_field_names() -> None:
    consolidated = ConsolidatedContact(
        primary_id=1,
        emails=("a@x.com", "b@x.com"),
        phones=("100",),
        member_ids=(2,),
    )

    body = json.loads(IdentifyResponsePayload.from_consolidated(consolidated).to_json())

    assert body == {
        "contact": {
            "primaryId": 1,
            "emails": ["a@x.com", "b@x.com"],
            "phones": ["100"],
            "memberIds": [2],
        }
    }
