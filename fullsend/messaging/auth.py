from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union


@dataclass(frozen=True)
class AccountAuthToken:
    """Authenticate as the account itself: Basic auth account_sid:auth_token."""

    token: str = field(repr=False)

    def basic_auth(self, account_sid: str) -> Tuple[str, str]:
        return (account_sid, self.token)


@dataclass(frozen=True)
class ApiKey:
    """Authenticate with an API key: Basic auth key_sid:secret."""

    sid: str
    secret: str = field(repr=False)

    def basic_auth(self, account_sid: str) -> Tuple[str, str]:
        # The account SID still scopes the resource URL, just not the credentials.
        return (self.sid, self.secret)


AuthMethod = Union[AccountAuthToken, ApiKey]
