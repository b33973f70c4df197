"""
SharedKey request signing for the HTTP Data Collector API.

Every POST carries an ``Authorization: SharedKey <workspace>:<signature>``
header, where the signature is an HMAC-SHA256 over a canonical string built
from the method, payload length, content type, ``x-ms-date`` header and the
resource path, keyed by the base64-decoded workspace key.
"""
import base64
import binascii
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Optional

from .config import CONTENT_TYPE, RESOURCE
from .exceptions import ConfigError

# strftime("%a"/"%b") follows the process locale; the header must not.
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def rfc1123_date(now: Optional[datetime] = None) -> str:
    """Formats ``now`` (default: current UTC time) as an RFC 1123 date."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return (
        f"{_WEEKDAYS[now.weekday()]}, {now.day:02d} {_MONTHS[now.month - 1]} {now.year:04d} "
        f"{now.hour:02d}:{now.minute:02d}:{now.second:02d} GMT"
    )


def string_to_sign(content_length: int, date: str) -> str:
    return f"POST\n{content_length}\n{CONTENT_TYPE}\nx-ms-date:{date}\n{RESOURCE}"


def decode_shared_key(shared_key: str) -> bytes:
    try:
        return base64.b64decode(shared_key, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigError(f"shared_key is not valid base64: {e}") from e


def build_signature(workspace_id: str, shared_key: str, date: str, content_length: int) -> str:
    """
    Returns the Authorization header value for a payload of ``content_length``
    bytes sent with ``x-ms-date: <date>``.
    """
    key_bytes = decode_shared_key(shared_key)
    message = string_to_sign(content_length, date).encode("ascii")
    digest = hmac.new(key_bytes, message, hashlib.sha256).digest()
    signature = base64.b64encode(digest).decode("ascii")
    return f"SharedKey {workspace_id}:{signature}"
