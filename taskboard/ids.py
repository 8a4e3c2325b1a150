"""Conversion between UUID strings (API) and 16-byte binary keys (storage)."""
import re
import uuid

from .exceptions import InvalidIdentifier

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
)


def is_valid(value) -> bool:
    """True for canonical UUID strings: lowercase hex, hyphenated 8-4-4-4-12."""
    return isinstance(value, str) and bool(_UUID_RE.fullmatch(value))


def encode(value: str) -> bytes:
    """Encode a UUID string as its 16-byte binary key."""
    if not is_valid(value):
        raise InvalidIdentifier()
    return uuid.UUID(value).bytes


def encode_optional(value):
    return encode(value) if value is not None else None


def decode(key: bytes) -> str:
    """Decode a binary key back to its lowercase UUID string."""
    return str(uuid.UUID(bytes=bytes(key)))


def decode_optional(key):
    return decode(key) if key is not None else None


def generate() -> bytes:
    """New random primary key."""
    return uuid.uuid4().bytes
