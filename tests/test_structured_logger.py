import io
import json
import logging

import httpx
import pytest

from fullsend.messaging.client import Client
from fullsend.messaging.errors import ApiError
from fullsend.messaging.message import Message
from fullsend.ops.structured_logger import JsonFormatter, setup_logging
from fullsend.utils.redact import dest_hint, mask_numbers


def test_dest_hint_masks_all_but_tail():
    assert dest_hint("+15551234567") == "...4567"
    assert dest_hint("whatsapp:+15551234567") == "...4567"
    assert dest_hint("  123 ") == "123"
    assert dest_hint("") == ""


def test_mask_numbers_in_free_text():
    text = "The 'To' number +1 (555) 123-4567 is not a valid phone number. Error 21211."
    masked = mask_numbers(text)
    assert "555" not in masked
    assert "...4567" in masked
    assert "21211" in masked


def test_json_formatter_merges_extra():
    record = logging.LogRecord("fullsend.client", logging.INFO, __file__, 1, "message_send_attempt", None, None)
    record.extra = {"event": "message_send_attempt", "dest": "...4567"}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "fullsend.client"
    assert payload["event"] == "message_send_attempt"
    assert payload["dest"] == "...4567"


def test_json_formatter_redacts_secret_keys():
    record = logging.LogRecord("fullsend.client", logging.INFO, __file__, 1, "oops", None, None)
    record.extra = {"auth_token": "tok-s3cret", "Body": "your code is 998877", "status_code": 400}
    rendered = JsonFormatter().format(record)
    assert "tok-s3cret" not in rendered
    assert "998877" not in rendered
    assert json.loads(rendered)["status_code"] == 400


def test_setup_logging_installs_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    try:
        setup_logging("DEBUG", stream=stream)
        logging.getLogger("fullsend.test").info("hello", extra={"extra": {"k": 1}})
        assert json.loads(stream.getvalue().strip())["k"] == 1
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_accepts_lowercase_level():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("info", stream=io.StringIO())
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.asyncio
async def test_send_logs_never_contain_secrets(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

    client = Client.builder().account_sid("AC123").auth_token("tok-s3cret").transport(httpx.MockTransport(handler)).build()
    message = Message.builder().to("+15551234567").from_("+15557654321").body("your code is 998877").build()

    caplog.set_level(logging.DEBUG, logger="fullsend")
    with pytest.raises(ApiError):
        await client.send_message(message)

    events = [getattr(r, "extra", {}).get("event") for r in caplog.records]
    assert events == ["message_send_attempt", "message_send_result", "message_send_failed"]
    for r in caplog.records:
        rendered = r.getMessage() + json.dumps(getattr(r, "extra", {}), default=str)
        assert "tok-s3cret" not in rendered
        assert "998877" not in rendered
        assert "+15551234567" not in rendered


@pytest.mark.asyncio
async def test_failed_send_masks_number_in_provider_message(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"code": 21211, "message": "The 'To' number +15551234567 is not a valid phone number."},
        )

    client = Client.builder().account_sid("AC123").auth_token("secret").transport(httpx.MockTransport(handler)).build()
    message = Message.builder().to("+15551234567").from_("+15557654321").body("hi").build()

    caplog.set_level(logging.DEBUG, logger="fullsend")
    with pytest.raises(ApiError) as exc_info:
        await client.send_message(message)

    # the caller still gets the provider's text verbatim
    assert "+15551234567" in exc_info.value.message
    failed = [r for r in caplog.records if getattr(r, "extra", {}).get("event") == "message_send_failed"]
    assert failed[0].extra["error_message"] == "The 'To' number ...4567 is not a valid phone number."
