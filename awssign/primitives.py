"""SHA-256 and HMAC-SHA256 helpers used by the signing pipeline."""

import hashlib
import hmac
from typing import Union

Bytes = Union[str, bytes]


def _to_bytes(value: Bytes) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    return value


def sha256_hex(data: Bytes) -> str:
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def hmac_sha256(key: Bytes, msg: Bytes) -> bytes:
    """Keyed digest; ``key`` may be text or a previously derived digest."""
    return hmac.new(_to_bytes(key), _to_bytes(msg), hashlib.sha256).digest()


def hex_encode(digest: bytes) -> str:
    return digest.hex()


EMPTY_SHA256 = sha256_hex(b'')
