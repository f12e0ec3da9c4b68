from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Centralized wire constants to prevent drift.

CLIENT_VERSION = "0.1.0"
USER_AGENT = f"fullsend/{CLIENT_VERSION}"

DEFAULT_BASE_URL = "https://api.twilio.com"
DEFAULT_TIMEOUT_S = 20.0
API_VERSION = "2010-04-01"
MESSAGES_PATH = "/" + API_VERSION + "/Accounts/{account_sid}/Messages.json"

# Form field names, in the order they are sent.
FIELD_TO = "To"
FIELD_FROM = "From"
FIELD_MESSAGING_SERVICE_SID = "MessagingServiceSid"
FIELD_BODY = "Body"
FIELD_CONTENT_SID = "ContentSid"
FIELD_CONTENT_VARIABLES = "ContentVariables"


class SendOutcome(BaseModel):
    """
    Message resource returned by a successful send.

    Only `sid` and `status` are guaranteed; the rest mirror the API's reply
    when present. Unknown keys are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    sid: str
    status: str
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    to: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    body: Optional[str] = None
    account_sid: Optional[str] = None
    messaging_service_sid: Optional[str] = None
    num_segments: Optional[str] = None
    direction: Optional[str] = None
    price: Optional[str] = None
    price_unit: Optional[str] = None
    date_created: Optional[str] = None
    uri: Optional[str] = None


class ApiErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    message: str
    more_info: Optional[str] = None
    status: Optional[int] = None
