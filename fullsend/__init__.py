"""Send messages through the Twilio Messaging API from asyncio code."""

from fullsend.messaging.auth import AccountAuthToken, ApiKey, AuthMethod
from fullsend.messaging.client import Client, ClientBuilder
from fullsend.messaging.errors import (
    ApiError,
    BuildError,
    ClientBuildError,
    DecodeError,
    FullsendError,
    MessageBuildError,
    TransportError,
)
from fullsend.messaging.message import Message, MessageBuilder
from fullsend.models.schema import CLIENT_VERSION as __version__
from fullsend.models.schema import SendOutcome

__all__ = [
    "AccountAuthToken",
    "ApiError",
    "ApiKey",
    "AuthMethod",
    "BuildError",
    "Client",
    "ClientBuildError",
    "ClientBuilder",
    "DecodeError",
    "FullsendError",
    "Message",
    "MessageBuildError",
    "MessageBuilder",
    "SendOutcome",
    "TransportError",
]
