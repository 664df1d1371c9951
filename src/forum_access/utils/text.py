"""Text and format checks shared by the profile validators."""

import ipaddress
import json
import math
import re
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import AnyUrl, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_URL_ADAPTER = TypeAdapter(AnyUrl)
_EMAIL_ADAPTER = TypeAdapter(EmailStr)

URL_PROTOCOLS = ("http", "https", "ftp")

_USERNAME_PATTERN = re.compile(r"^['\" \-+.*\[\]0-9\u00BF-\u1FFF\u2C00-\uD7FF\w]+$")
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)
_CALENDAR_DATE_PATTERN = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")
_TLD_PATTERN = re.compile(r"^([a-z\u00A1-\u00A8\u00AA-\uD7FF\uF900-\uFDCF\uFDF0-\uFFEF]{2,}|xn--[a-z0-9-]{2,})$", re.IGNORECASE)

_BIRTHDAY_FORMATS = ("%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%B %d, %Y", "%B %d %Y", "%b %d, %Y", "%b %d %Y")


def slugify(text: Any) -> str:
    """Turn free text into a URL slug: lowercase, punctuation dropped, spaces to dashes."""
    text = str(text).strip().lower()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def is_number(value: Any) -> bool:
    """True for finite ints/floats and strings that parse as one.

    Strings must be plain ASCII decimal or exponent literals; digit
    separators and non-ASCII digits are rejected.
    """
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    text = str(value).strip()
    if not _NUMBER_PATTERN.match(text):
        return False
    return math.isfinite(float(text))


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browser-side limits count in."""
    return len(text.encode("utf-16-le")) // 2


def is_url(value: Any, require_protocol: bool = False) -> bool:
    """Check whether ``value`` is a web URL.

    A host with a top-level domain (or an IP address) is required and only
    http, https and ftp are accepted. Without ``require_protocol`` a bare
    host such as ``example.org/path`` also counts.
    """
    if not isinstance(value, str):
        return False
    candidate = value.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    if "://" not in candidate:
        if require_protocol:
            return False
        candidate = f"http://{candidate}"

    try:
        url = _URL_ADAPTER.validate_python(candidate)
    except PydanticValidationError:
        return False

    if url.scheme not in URL_PROTOCOLS or not url.host:
        return False
    return _has_valid_host(url.host)


def _has_valid_host(host: str) -> bool:
    bare = host.strip("[]")
    try:
        ipaddress.ip_address(bare)
        return True
    except ValueError:
        pass
    labels = host.rstrip(".").split(".")
    if len(labels) < 2 or not all(labels):
        return False
    return bool(_TLD_PATTERN.match(labels[-1]))


def is_calendar_date(value: Any) -> bool:
    """True for ``YYYY-MM-DD`` or ``YYYY/MM/DD`` naming a real day."""
    if not isinstance(value, str):
        return False
    match = _CALENDAR_DATE_PATTERN.match(value.strip())
    if not match:
        return False
    year, month, day = (int(part) for part in match.groups())
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def parse_birthday(value: str) -> Optional[date]:
    """Parse a birthday in ISO or one of the common written forms."""
    text = value.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    for fmt in _BIRTHDAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def is_email_valid(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        _EMAIL_ADAPTER.validate_python(value.strip())
    except PydanticValidationError:
        return False
    return True


def is_username_valid(username: str) -> bool:
    return bool(username) and bool(_USERNAME_PATTERN.match(username))


def parse_json_list(value: Any) -> Optional[List[Any]]:
    """Decode a JSON array; ``[]`` when empty or undecodable, None for non-arrays."""
    if isinstance(value, list):
        return value
    if value is None or value == "":
        return []
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return []
    return decoded if isinstance(decoded, list) else None


def is_json(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        json.loads(value)
    except ValueError:
        return False
    return True
