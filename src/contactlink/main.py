#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError

from contactlink.adapters.api import IdentifyPayload, IdentifyResponsePayload
from contactlink.app import identify_contact, lookup_contact, migrate_database
from contactlink.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile contact identities")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser(
        "identify",
        help="Reconcile an email and/or phone number and print the identity group",
    )
    identify.add_argument("--email", type=str, help="Email address to reconcile")
    identify.add_argument("--phone", type=str, help="Phone number to reconcile (digits only)")

    show = subparsers.add_parser("show", help="Print the identity group of a stored contact")
    show.add_argument("contact_id", type=int, help="Id of any contact in the group")

    subparsers.add_parser("migrate", help="Upgrade the database schema")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    payload: IdentifyPayload | None = None
    if parsed_args.command == "identify":
        try:
            payload = IdentifyPayload(email=parsed_args.email, phone=parsed_args.phone)
        except ValidationError as exc:
            for error in exc.errors():
                print(f"Error: {error['msg']}", file=sys.stderr)
            sys.exit(2)

    try:
        if payload is not None:
            result = identify_contact(payload.to_request())
            print(IdentifyResponsePayload.from_consolidated(result.contact).to_json())
        elif parsed_args.command == "show":
            consolidated = lookup_contact(parsed_args.contact_id)
            print(IdentifyResponsePayload.from_consolidated(consolidated).to_json())
        elif parsed_args.command == "migrate":
            migrate_database()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
