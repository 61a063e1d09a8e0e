"""
Secure Cookie Codec
Authenticated encryption of small string maps bound to a cookie name.

Token layout (before the outer base64url)::

    <timestamp>|<base64url(iv + AES-CTR(json payload))>|<HMAC-SHA256>

The MAC covers ``name|timestamp|value`` so a token issued for one cookie
name never decodes under another.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import secrets
import time
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Sequence, Tuple

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from sealedcookie.security.keys import KeyMaterial
from sealedcookie.utils.errors import CookieConfigurationError, CookieDecodeError, CookieEncodeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 86400 * 30
DEFAULT_MAX_LENGTH = 4096
CLOCK_SKEW = 60
IV_LENGTH = 16


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Strict base64url decoding; rejects anything but the canonical form."""
    raw = value.encode("ascii")
    padded = raw + b"=" * (-len(raw) % 4)
    data = base64.b64decode(padded, altchars=b"-_", validate=True)
    if b64url(data) != value:
        raise ValueError("Non-canonical base64")
    return data


class CookieCodec(ABC):
    """
    Abstract codec.
    Backends turn a payload into an opaque transport-safe token and back.
    """

    @abstractmethod
    def encode(self, name: str, payload: Optional[Mapping[str, str]]) -> str:
        """Return a token for `payload` bound to `name`; raise CookieEncodeError on failure."""

    @abstractmethod
    def decode(self, name: str, token: str) -> Dict[str, str]:
        """Return the payload for `token`; raise CookieDecodeError on any failure."""


class _DecodeFailure(Exception):
    """Internal reason for a failed decode, logged but never surfaced."""


class SecureCookieCodec(CookieCodec):
    """
    Encrypt-then-MAC codec (AES-CTR + HMAC-SHA256).

    Args:
        keys: Current key material first, followed by previous keys that are
            still accepted on decode.
        max_age: Seconds a token stays valid; 0 falls back to 30 days and a
            negative value rejects every token as expired.
        max_length: Upper bound on token length in characters.
    """

    def __init__(
        self,
        keys: Sequence[KeyMaterial],
        max_age: int = DEFAULT_MAX_AGE,
        max_length: int = DEFAULT_MAX_LENGTH
    ):
        if not keys:
            raise CookieConfigurationError("At least one key pair is required")
        self.keys: Tuple[KeyMaterial, ...] = tuple(keys)
        self.max_age = max_age if max_age != 0 else DEFAULT_MAX_AGE
        self.max_length = max_length

    def encode(self, name: str, payload: Optional[Mapping[str, str]]) -> str:
        serialized = self._serialize(payload)
        current = self.keys[0]

        try:
            value = b64url(self._encrypt(current.block_key, serialized)).encode("ascii")
        except Exception as e:
            logger.error(f"Cookie '{name}' encryption failed: {type(e).__name__}")
            raise CookieEncodeError("Encryption failed") from e

        timestamp = str(int(time.time())).encode("ascii")
        mac = self._mac(current.hash_key, name, timestamp, value)
        token = b64url(b"|".join([timestamp, value, mac]))

        if len(token) > self.max_length:
            raise CookieEncodeError(
                f"Encoded cookie is {len(token)} characters, limit is {self.max_length}"
            )
        return token

    def decode(self, name: str, token: str) -> Dict[str, str]:
        try:
            return self._decode(name, token)
        except _DecodeFailure as e:
            logger.debug(f"Rejected cookie '{name}': {e}")
            raise CookieDecodeError() from None

    def _decode(self, name: str, token: str) -> Dict[str, str]:
        if not isinstance(token, str) or not token:
            raise _DecodeFailure("empty token")
        if len(token) > self.max_length:
            raise _DecodeFailure("token too long")

        try:
            data = b64url_decode(token)
        except (ValueError, binascii.Error):
            raise _DecodeFailure("invalid transport encoding")

        parts = data.split(b"|", 2)
        if len(parts) != 3:
            raise _DecodeFailure("invalid token structure")
        timestamp, value, mac = parts

        key = self._verify(name, timestamp, value, mac)

        try:
            issued_at = int(timestamp.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            raise _DecodeFailure("invalid timestamp")
        now = int(time.time())
        if now - issued_at >= self.max_age:
            raise _DecodeFailure("timestamp expired")
        if issued_at - now > CLOCK_SKEW:
            raise _DecodeFailure("timestamp in the future")

        try:
            plaintext = self._decrypt(key.block_key, b64url_decode(value.decode("ascii")))
            payload = json.loads(plaintext.decode("utf-8"))
        except (ValueError, binascii.Error):
            raise _DecodeFailure("malformed payload")

        if not _is_string_map(payload):
            raise _DecodeFailure("payload is not a string map")
        return payload

    def _verify(self, name: str, timestamp: bytes, value: bytes, mac: bytes) -> KeyMaterial:
        """Return the key pair whose MAC matches, trying the current key first."""
        for key in self.keys:
            if hmac.compare_digest(self._mac(key.hash_key, name, timestamp, value), mac):
                return key
        raise _DecodeFailure("mac mismatch")

    @staticmethod
    def _mac(hash_key: bytes, name: str, timestamp: bytes, value: bytes) -> bytes:
        message = b"|".join([name.encode("utf-8"), timestamp, value])
        return hmac.new(hash_key, message, hashlib.sha256).digest()

    @staticmethod
    def _serialize(payload: Optional[Mapping[str, str]]) -> bytes:
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise CookieEncodeError(f"Payload must be a mapping, got {type(payload).__name__}")
        if not _is_string_map(payload):
            raise CookieEncodeError("Payload keys and values must be strings")
        return json.dumps(dict(payload), sort_keys=True, separators=(",", ":")).encode("utf-8")

    @staticmethod
    def _encrypt(block_key: bytes, plaintext: bytes) -> bytes:
        iv = secrets.token_bytes(IV_LENGTH)
        encryptor = Cipher(algorithms.AES(block_key), modes.CTR(iv)).encryptor()
        return iv + encryptor.update(plaintext) + encryptor.finalize()

    @staticmethod
    def _decrypt(block_key: bytes, data: bytes) -> bytes:
        if len(data) < IV_LENGTH:
            raise ValueError("Ciphertext shorter than IV")
        iv, ciphertext = data[:IV_LENGTH], data[IV_LENGTH:]
        decryptor = Cipher(algorithms.AES(block_key), modes.CTR(iv)).decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()


def _is_string_map(payload) -> bool:
    return isinstance(payload, Mapping) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in payload.items()
    )
