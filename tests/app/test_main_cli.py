from __future__ import annotations

import json

import pytest

from contactlink import main as main_module
from contactlink.domain.reconciliation import (
    ConsolidatedContact,
    ContactNotFoundError,
    IdentifyRequest,
    ReconciliationResult,
    ResolutionKind,
)

GROUP = ConsolidatedContact(
    primary_id=1,
    emails=("a@x.com", "b@x.com"),
    phones=("100",),
    member_ids=(2,),
)


def test_main_cli_identify_prints_group(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: list[IdentifyRequest] = []

    def fake_identify(request: IdentifyRequest) -> ReconciliationResult:
        captured.append(request)
        return ReconciliationResult(contact=GROUP, kind=ResolutionKind.SINGLE)

    monkeypatch.setattr(main_module, "identify_contact", fake_identify)

    main_module.main(["identify", "--email", "b@x.com", "--phone", "100"])

    assert captured == [IdentifyRequest(email="b@x.com", phone="100")]
    assert json.loads(capsys.readouterr().out) == {
        "contact": {
            "primaryId": 1,
            "emails": ["a@x.com", "b@x.com"],
            "phones": ["100"],
            "memberIds": [2],
        }
    }


def test_main_cli_identify_with_phone_only(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: list[IdentifyRequest] = []

    def fake_identify(request: IdentifyRequest) -> ReconciliationResult:
        captured.append(request)
        return ReconciliationResult(contact=GROUP, kind=ResolutionKind.SINGLE)

    monkeypatch.setattr(main_module, "identify_contact", fake_identify)

    main_module.main(["identify", "--phone", "100"])

    assert captured == [IdentifyRequest(phone="100")]


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["identify"], "At least one of email or phone must be provided"),
        (["identify", "--email", "nope"], "Invalid email format"),
        (["identify", "--phone", "12ab"], "Phone number should contain only digits"),
    ],
)
def test_main_cli_invalid_identify_input(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    argv: list[str],
    message: str,
) -> None:
    def fake_identify(*_: object, **__: object) -> None:
        raise AssertionError("identify_contact should not be called")

    monkeypatch.setattr(main_module, "identify_contact", fake_identify)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(argv)

    assert excinfo.value.code == 2
    assert message in capsys.readouterr().err


def test_main_cli_show(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(main_module, "lookup_contact", lambda contact_id: GROUP)

    main_module.main(["show", "2"])

    assert json.loads(capsys.readouterr().out)["contact"]["primaryId"] == 1


def test_main_cli_show_unknown_contact_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_lookup(contact_id: int) -> ConsolidatedContact:
        raise ContactNotFoundError(contact_id)

    monkeypatch.setattr(main_module, "lookup_contact", fake_lookup)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["show", "42"])

    assert excinfo.value.code == 1


def test_main_cli_migrate(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    monkeypatch.setattr(main_module, "migrate_database", lambda: calls.append("migrate"))

    main_module.main(["migrate"])

    assert calls == ["migrate"]


def test_main_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main([])

    assert excinfo.value.code == 2
