from __future__ import annotations

from typing import Optional


class FullsendError(Exception):
    """Base class for every error raised by fullsend."""


class BuildError(FullsendError):
    """A builder was asked to build() before its required fields were set."""


class ClientBuildError(BuildError):
    pass


class MessageBuildError(BuildError):
    pass


class TransportError(FullsendError):
    """The request never produced a response (DNS, connect, TLS, timeout)."""

    def __init__(self, cause: BaseException):
        super().__init__(f"transport_error:{type(cause).__name__}:{cause}")
        self.cause = cause


class ApiError(FullsendError):
    """Non-2xx reply carrying the provider's error code and message."""

    def __init__(
        self,
        status_code: int,
        code: Optional[int],
        message: str,
        more_info: Optional[str] = None,
    ):
        super().__init__(f"api_error:{status_code}:{code}:{message}")
        self.status_code = status_code
        self.code = code
        self.message = message
        self.more_info = more_info


class DecodeError(FullsendError):
    """Reply body was not the expected JSON shape. `body` keeps the raw text."""

    def __init__(self, status_code: int, body: str, reason: str = ""):
        super().__init__(f"decode_error:{status_code}:{reason}" if reason else f"decode_error:{status_code}")
        self.status_code = status_code
        self.body = body
        self.reason = reason
