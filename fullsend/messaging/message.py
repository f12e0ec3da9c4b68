from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from fullsend.messaging.errors import MessageBuildError
from fullsend.models.schema import (
    FIELD_BODY,
    FIELD_CONTENT_SID,
    FIELD_CONTENT_VARIABLES,
    FIELD_FROM,
    FIELD_MESSAGING_SERVICE_SID,
    FIELD_TO,
)


@dataclass(frozen=True)
class Message:
    """
    An outbound message. Build one with `Message.builder()`:

        message = (
            Message.builder()
            .to("+15551234567")
            .from_("+15557654321")
            .body("howdy from fullsend!")
            .build()
        )

    A message needs a destination, a sender (`from_` and/or a messaging
    service) and content (`body` and/or a content template).
    """

    to: str
    from_: Optional[str] = None
    body: Optional[str] = field(default=None, repr=False)
    messaging_service_sid: Optional[str] = None
    content_sid: Optional[str] = None
    content_variables: Optional[Mapping[str, str]] = field(default=None, repr=False, hash=False)

    def __post_init__(self) -> None:
        # Read-only snapshot; later changes to the caller's dict do not leak in.
        if self.content_variables is not None:
            object.__setattr__(self, "content_variables", MappingProxyType(dict(self.content_variables)))

    @staticmethod
    def builder() -> "MessageBuilder":
        return MessageBuilder()

    def to_form(self) -> Dict[str, str]:
        form: Dict[str, str] = {FIELD_TO: self.to}
        if self.from_ is not None:
            form[FIELD_FROM] = self.from_
        if self.messaging_service_sid is not None:
            form[FIELD_MESSAGING_SERVICE_SID] = self.messaging_service_sid
        if self.body is not None:
            form[FIELD_BODY] = self.body
        if self.content_sid is not None:
            form[FIELD_CONTENT_SID] = self.content_sid
        if self.content_variables is not None:
            form[FIELD_CONTENT_VARIABLES] = json.dumps(dict(self.content_variables), ensure_ascii=False)
        return form


class MessageBuilder:
    def __init__(self) -> None:
        self._to: Optional[str] = None
        self._from: Optional[str] = None
        self._body: Optional[str] = None
        self._messaging_service_sid: Optional[str] = None
        self._content_sid: Optional[str] = None
        self._content_variables: Optional[Dict[str, str]] = None

    def to(self, to: str) -> "MessageBuilder":
        """Recipient address, e.g. an E.164 phone number or `whatsapp:+1...`."""
        self._to = to
        return self

    def from_(self, from_: str) -> "MessageBuilder":
        """Sender address: one of the account's phone numbers."""
        self._from = from_
        return self

    def body(self, body: str) -> "MessageBuilder":
        self._body = body
        return self

    def messaging_service_sid(self, sid: str) -> "MessageBuilder":
        """Send from a messaging service's sender pool instead of (or alongside) `from_`."""
        self._messaging_service_sid = sid
        return self

    def content_sid(self, sid: str) -> "MessageBuilder":
        """Send a pre-registered content template instead of (or alongside) `body`."""
        self._content_sid = sid
        return self

    def content_variables(self, variables: Mapping[str, str]) -> "MessageBuilder":
        """Values for the content template's placeholders, e.g. {"name": "Ada"}."""
        self._content_variables = dict(variables)
        return self

    def build(self) -> Message:
        # Presence only; formats are checked by the API.
        if self._to is None:
            raise MessageBuildError("no 'to' field set in builder")
        if self._from is None and self._messaging_service_sid is None:
            raise MessageBuildError("no sender set in builder: set from_ or messaging_service_sid")
        if self._body is None and self._content_sid is None:
            raise MessageBuildError("no content set in builder: set body or content_sid")
        return Message(
            to=self._to,
            from_=self._from,
            body=self._body,
            messaging_service_sid=self._messaging_service_sid,
            content_sid=self._content_sid,
            content_variables=self._content_variables,
        )
