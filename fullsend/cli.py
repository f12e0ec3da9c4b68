"""Command-line sender: plain text messages and content-template messages."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import httpx

from fullsend.config.settings import Settings, settings as default_settings
from fullsend.messaging.client import Client
from fullsend.messaging.errors import FullsendError
from fullsend.messaging.message import Message, MessageBuilder
from fullsend.models.schema import SendOutcome
from fullsend.ops.structured_logger import setup_logging

log = logging.getLogger("fullsend.cli")

DEFAULT_BODY = "howdy from fullsend!"


def prompt(label: str) -> str:
    print(f"{label}> ", end="", flush=True)
    return sys.stdin.readline().strip()


def parse_variables(pairs: Sequence[str]) -> Dict[str, str]:
    variables: Dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid --var {pair!r}; expected name=value.")
        variables[name.strip()] = value
    return variables


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fullsend", description="Send a message through the Twilio Messaging API.")
    parser.add_argument("--log-level", default=None, help="Log level (defaults to LOG_LEVEL env var or WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--to", default=None, help="Destination phone number (prompted for if unset)")
        p.add_argument(
            "--from",
            dest="from_",
            default=None,
            help="Sender phone number (defaults to TWILIO_FROM_NUMBER env var if unset)",
        )
        p.add_argument(
            "--messaging-service-sid",
            default=None,
            help="Messaging Service SID (defaults to TWILIO_MESSAGING_SERVICE_SID env var if unset)",
        )

    send = sub.add_parser("send", help="Send a plain text message")
    add_common(send)
    send.add_argument("--body", default=DEFAULT_BODY, help=f"Message text (default: {DEFAULT_BODY!r})")

    content = sub.add_parser("send-content", help="Send a content template message")
    add_common(content)
    content.add_argument(
        "--content-sid",
        default=None,
        help="Content template SID (defaults to TWILIO_CONTENT_SID env var if unset)",
    )
    content.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Template variable; repeat for each placeholder, e.g. --var name=Ada",
    )
    return parser


def build_message(args: argparse.Namespace, settings: Settings) -> Message:
    to = args.to or prompt("phone number")
    builder: MessageBuilder = Message.builder().to(to)

    sender = args.from_ or settings.TWILIO_FROM_NUMBER
    service_sid = args.messaging_service_sid or settings.TWILIO_MESSAGING_SERVICE_SID
    if sender:
        builder.from_(sender)
    if service_sid:
        builder.messaging_service_sid(service_sid)

    if args.command == "send":
        builder.body(args.body)
    else:
        content_sid = args.content_sid or settings.TWILIO_CONTENT_SID
        if content_sid:
            builder.content_sid(content_sid)
        variables = parse_variables(args.var)
        if variables:
            builder.content_variables(variables)
    return builder.build()


async def send(
    args: argparse.Namespace,
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SendOutcome:
    client = Client.from_settings(settings)
    if transport is not None:
        client = replace(client, transport=transport)
    message = build_message(args, settings)
    return await client.send_message(message)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = default_settings

    try:
        setup_logging(args.log_level or settings.LOG_LEVEL)
        outcome = asyncio.run(send(args, settings))
    except (FullsendError, ValueError) as e:
        log.debug("cli_send_failed", extra={"extra": {"event": "cli_send_failed", "error_type": type(e).__name__}})
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"{outcome.sid} {outcome.status}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
