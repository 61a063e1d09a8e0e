"""Unit tests for cookie key material."""
from __future__ import annotations

import pytest

from sealedcookie.security.keys import BLOCK_KEY_LENGTH, HASH_KEY_LENGTH, KeyMaterial
from sealedcookie.utils.errors import CookieConfigurationError
from tests._helpers import fixed_generator


def test_generate_uses_default_lengths() -> None:
    """Generated keys have a 64-byte hash key and a 32-byte block key."""
    keys = KeyMaterial.generate()
    assert len(keys.hash_key) == HASH_KEY_LENGTH
    assert len(keys.block_key) == BLOCK_KEY_LENGTH


def test_generate_is_random_by_default() -> None:
    """Two generated key pairs never match."""
    assert KeyMaterial.generate() != KeyMaterial.generate()


def test_generate_with_injected_generator_is_deterministic() -> None:
    """A fixed generator yields identical key material."""
    assert KeyMaterial.generate(fixed_generator(7)) == KeyMaterial.generate(fixed_generator(7))


def test_generator_failure_is_fatal() -> None:
    """A failing random source aborts construction."""
    def broken(length: int) -> bytes:
        raise OSError("no entropy")

    with pytest.raises(CookieConfigurationError):
        KeyMaterial.generate(broken)


def test_generator_returning_short_keys_is_rejected() -> None:
    """Short output from the generator is never accepted."""
    with pytest.raises(CookieConfigurationError):
        KeyMaterial.generate(lambda length: b"\x00" * (length // 2))


@pytest.mark.parametrize("block_length", [16, 24, 32])
def test_valid_block_key_lengths(block_length: int) -> None:
    keys = KeyMaterial(hash_key=b"h" * 32, block_key=b"b" * block_length)
    assert len(keys.block_key) == block_length


@pytest.mark.parametrize(
    "hash_key, block_key",
    [
        (b"h" * 31, b"b" * 32),
        (b"h" * 64, b"b" * 20),
        (b"h" * 64, b""),
        ("h" * 64, b"b" * 32),
    ],
)
def test_invalid_keys_are_rejected(hash_key, block_key) -> None:
    with pytest.raises(CookieConfigurationError):
        KeyMaterial(hash_key=hash_key, block_key=block_key)


def test_repr_hides_key_bytes() -> None:
    """Key bytes never appear in repr(), so they cannot leak into logs."""
    keys = KeyMaterial(hash_key=b"\x01" * 64, block_key=b"\x02" * 32)
    text = repr(keys)
    assert "\\x01" not in text
    assert "\\x02" not in text


def test_from_hex() -> None:
    keys = KeyMaterial.from_hex("ab" * 64, "cd" * 32)
    assert keys.hash_key == b"\xab" * 64
    assert keys.block_key == b"\xcd" * 32


def test_from_hex_rejects_garbage() -> None:
    with pytest.raises(CookieConfigurationError):
        KeyMaterial.from_hex("not-hex", "cd" * 32)


def test_key_material_is_immutable() -> None:
    keys = KeyMaterial.generate()
    with pytest.raises(AttributeError):
        keys.hash_key = b"x" * 64
