"""
Key Material
Hash (HMAC) and block (AES) keys used by the secure cookie codec.
"""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Callable, Optional

from sealedcookie.utils.errors import CookieConfigurationError

logger = logging.getLogger(__name__)

HASH_KEY_LENGTH = 64
BLOCK_KEY_LENGTH = 32
MIN_HASH_KEY_LENGTH = 32
BLOCK_KEY_LENGTHS = (16, 24, 32)  # AES-128/192/256

# Returns `length` cryptographically random bytes.
KeyGenerator = Callable[[int], bytes]


def generate_random_key(length: int) -> bytes:
    return secrets.token_bytes(length)


@dataclass(frozen=True)
class KeyMaterial:
    """
    Immutable pair of keys.

    The hash key authenticates tokens, the block key encrypts them. Key
    bytes are kept out of repr() so they never end up in logs or tracebacks.
    """

    hash_key: bytes = field(repr=False)
    block_key: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.hash_key, bytes) or not isinstance(self.block_key, bytes):
            raise CookieConfigurationError("Cookie keys must be bytes")
        if len(self.hash_key) < MIN_HASH_KEY_LENGTH:
            raise CookieConfigurationError(
                f"Hash key must be at least {MIN_HASH_KEY_LENGTH} bytes, got {len(self.hash_key)}"
            )
        if len(self.block_key) not in BLOCK_KEY_LENGTHS:
            raise CookieConfigurationError(
                f"Block key must be 16, 24 or 32 bytes, got {len(self.block_key)}"
            )

    @classmethod
    def generate(cls, key_generator: Optional[KeyGenerator] = None) -> "KeyMaterial":
        """
        Create fresh random keys.

        Args:
            key_generator: Source of random bytes, `secrets.token_bytes` when omitted.
                Tests pass a deterministic generator here.

        Raises:
            CookieConfigurationError: If the generator fails or returns short keys.
        """
        generator = key_generator or generate_random_key
        try:
            hash_key = generator(HASH_KEY_LENGTH)
            block_key = generator(BLOCK_KEY_LENGTH)
        except Exception as e:
            logger.critical(f"Unable to generate cookie key material: {type(e).__name__}")
            raise CookieConfigurationError("Random key generation failed") from e

        if len(hash_key or b"") != HASH_KEY_LENGTH or len(block_key or b"") != BLOCK_KEY_LENGTH:
            raise CookieConfigurationError("Key generator returned keys of the wrong length")

        return cls(hash_key=hash_key, block_key=block_key)

    @classmethod
    def from_hex(cls, hash_key_hex: str, block_key_hex: str) -> "KeyMaterial":
        """Load externally managed keys, e.g. from `openssl rand -hex 64`."""
        try:
            hash_key = bytes.fromhex(hash_key_hex.strip())
            block_key = bytes.fromhex(block_key_hex.strip())
        except ValueError as e:
            raise CookieConfigurationError("Cookie keys must be hex encoded") from e
        return cls(hash_key=hash_key, block_key=block_key)
