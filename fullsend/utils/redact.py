from __future__ import annotations

import re

# Anything that looks like a phone number: optional "+", then 7+ digits,
# allowing the separators people put between groups.
_NUMBER_RE = re.compile(r"\+?\d[\d\s().-]{5,}\d")


def dest_hint(address: str, keep: int = 4) -> str:
    """Log-safe tail of an address: "whatsapp:+15551234567" -> "...4567"."""
    address = (address or "").strip()
    if len(address) <= keep:
        return address
    return "..." + address[-keep:]


def mask_numbers(text: str, keep: int = 4) -> str:
    """Replace every phone-number-like run in free text with its dest_hint."""
    return _NUMBER_RE.sub(lambda m: dest_hint(re.sub(r"\D", "", m.group(0)), keep), text or "")
