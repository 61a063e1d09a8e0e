from __future__ import annotations

import pytest

from sealedcookie.security.codec import SecureCookieCodec
from sealedcookie.security.keys import KeyMaterial
from tests._helpers import fixed_generator


@pytest.fixture
def keys() -> KeyMaterial:
    return KeyMaterial.generate(fixed_generator(1))


@pytest.fixture
def other_keys() -> KeyMaterial:
    return KeyMaterial.generate(fixed_generator(99))


@pytest.fixture
def codec(keys) -> SecureCookieCodec:
    return SecureCookieCodec([keys], max_age=3600)
