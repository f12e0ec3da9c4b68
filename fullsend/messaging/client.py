from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from pydantic import ValidationError

from fullsend.config.settings import Settings
from fullsend.messaging.auth import AccountAuthToken, ApiKey, AuthMethod
from fullsend.messaging.errors import (
    ApiError,
    ClientBuildError,
    DecodeError,
    FullsendError,
    TransportError,
)
from fullsend.messaging.message import Message
from fullsend.models.schema import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_S,
    MESSAGES_PATH,
    USER_AGENT,
    ApiErrorBody,
    SendOutcome,
)
from fullsend.ops.metrics import Timer
from fullsend.utils.redact import dest_hint, mask_numbers

log = logging.getLogger("fullsend.client")


class _BorrowedTransport(httpx.AsyncBaseTransport):
    """Forwards requests to a caller-owned transport but never closes it."""

    def __init__(self, transport: httpx.AsyncBaseTransport):
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        # The transport outlives this call; its owner closes it.
        pass


@dataclass(frozen=True)
class Client:
    """
    Sends messages through the Messaging API on behalf of one account.

    Build one with `Client.builder()`:

        client = (
            Client.builder()
            .account_sid(os.environ["TWILIO_ACCOUNT_SID"])
            .auth_token(os.environ["TWILIO_AUTH_TOKEN"])
            .build()
        )
        outcome = await client.send_message(message)

    A Client holds configuration only, so one instance can be shared by any
    number of concurrent tasks.
    """

    account_sid: str
    auth: AuthMethod = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_S
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False, compare=False)

    @staticmethod
    def builder() -> "ClientBuilder":
        return ClientBuilder()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Client":
        """Build a client from environment settings; an API key wins over the auth token."""
        builder = cls.builder().base_url(settings.TWILIO_API_BASE_URL).timeout(settings.HTTP_TIMEOUT_S)
        if settings.TWILIO_ACCOUNT_SID:
            builder.account_sid(settings.TWILIO_ACCOUNT_SID)
        if settings.TWILIO_API_KEY_SID and settings.TWILIO_API_KEY_SECRET:
            builder.api_key(settings.TWILIO_API_KEY_SID, settings.TWILIO_API_KEY_SECRET)
        elif settings.TWILIO_AUTH_TOKEN:
            builder.auth_token(settings.TWILIO_AUTH_TOKEN)
        return builder.build()

    @property
    def messages_url(self) -> str:
        return self.base_url + MESSAGES_PATH.format(account_sid=self.account_sid)

    async def send_message(self, message: Message) -> SendOutcome:
        """
        POST one message and return the created message resource.

        Raises TransportError if no response arrives, ApiError for a non-2xx
        reply and DecodeError when the reply is not the expected JSON.
        Nothing is retried.
        """
        dest = dest_hint(message.to)
        timer = Timer()
        log.info(
            "message_send_attempt",
            extra={"extra": {"event": "message_send_attempt", "dest": dest, "account_sid": self.account_sid}},
        )

        try:
            async with httpx.AsyncClient(
                transport=_BorrowedTransport(self.transport) if self.transport is not None else None,
                timeout=self.timeout,
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            ) as http:
                r = await http.post(
                    self.messages_url,
                    data=message.to_form(),
                    auth=self.auth.basic_auth(self.account_sid),
                )
        except httpx.RequestError as e:
            log.error(
                "message_send_exception",
                extra={
                    "extra": {
                        "event": "message_send_exception",
                        "dest": dest,
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": timer.ms(),
                    }
                },
                exc_info=True,
            )
            raise TransportError(e) from e

        log.info(
            "message_send_result",
            extra={
                "extra": {
                    "event": "message_send_result",
                    "dest": dest,
                    "ok": r.is_success,
                    "status_code": r.status_code,
                    "latency_ms": timer.ms(),
                }
            },
        )

        if r.is_success:
            return _parse_outcome(r)
        raise _parse_error(r, dest)


def _parse_outcome(r: httpx.Response) -> SendOutcome:
    try:
        return SendOutcome.model_validate_json(r.content)
    except ValidationError as e:
        log.warning(
            "message_send_undecodable",
            extra={"extra": {"event": "message_send_undecodable", "status_code": r.status_code, "resp_bytes": len(r.content)}},
        )
        raise DecodeError(r.status_code, r.text, reason=f"{e.error_count()} validation error(s)") from e


def _parse_error(r: httpx.Response, dest: str) -> FullsendError:
    try:
        err = ApiErrorBody.model_validate_json(r.content)
    except ValidationError:
        log.warning(
            "message_send_undecodable",
            extra={"extra": {"event": "message_send_undecodable", "status_code": r.status_code, "resp_bytes": len(r.content)}},
        )
        return DecodeError(r.status_code, r.text, reason="error body is not a JSON error object")

    log.warning(
        "message_send_failed",
        extra={
            "extra": {
                "event": "message_send_failed",
                "dest": dest,
                "status_code": r.status_code,
                "code": err.code,
                "error_message": mask_numbers(err.message),
            }
        },
    )
    return ApiError(r.status_code, err.code, err.message, more_info=err.more_info)


class ClientBuilder:
    def __init__(self) -> None:
        self._account_sid: Optional[str] = None
        self._auth: Optional[AuthMethod] = None
        self._base_url: str = DEFAULT_BASE_URL
        self._timeout: float = DEFAULT_TIMEOUT_S
        self._transport: Optional[httpx.AsyncBaseTransport] = None

    def account_sid(self, account_sid: str) -> "ClientBuilder":
        self._account_sid = account_sid
        return self

    def auth_token(self, auth_token: str) -> "ClientBuilder":
        self._auth = AccountAuthToken(auth_token)
        return self

    def api_key(self, sid: str, secret: str) -> "ClientBuilder":
        self._auth = ApiKey(sid, secret)
        return self

    def base_url(self, base_url: str) -> "ClientBuilder":
        self._base_url = base_url.rstrip("/")
        return self

    def timeout(self, seconds: float) -> "ClientBuilder":
        self._timeout = seconds
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> "ClientBuilder":
        """
        Route requests through `transport`, e.g. a shared httpx.AsyncHTTPTransport
        or an httpx.MockTransport in tests. The caller owns it and closes it.
        """
        self._transport = transport
        return self

    def build(self) -> Client:
        if self._account_sid is None:
            raise ClientBuildError("no account SID set in builder")
        if self._auth is None:
            raise ClientBuildError("no credentials set in builder: set auth_token or api_key")
        return Client(
            account_sid=self._account_sid,
            auth=self._auth,
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
