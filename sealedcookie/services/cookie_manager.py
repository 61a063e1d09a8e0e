"""
Cookie Manager
Bridges the secure cookie codec to the Starlette request/response cycle.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError
from starlette import status
from starlette.requests import Request
from starlette.responses import Response

from sealedcookie.core.config import Settings
from sealedcookie.security.codec import CookieCodec, SecureCookieCodec, DEFAULT_MAX_LENGTH
from sealedcookie.security.keys import KeyGenerator, KeyMaterial
from sealedcookie.utils.errors import CookieConfigurationError, CookieDecodeError

logger = logging.getLogger(__name__)

EXPIRED = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CookieConfig(BaseModel):
    """
    Header flags and default lifetime of a managed cookie.

    Does not affect codec security. The permissive defaults exist for local
    development over plain HTTP; production deployments should enable both
    `http_only` and `secure`.
    """
    http_only: bool = Field(False, description="Send the HttpOnly attribute")
    secure: bool = Field(False, description="Send the Secure attribute")
    max_age: int = Field(
        7 * 24 * 60 * 60,
        description="Lifetime in seconds; 0 issues a session cookie, negative an expired one"
    )
    same_site: Literal["lax", "strict", "none"] = Field("lax", description="SameSite attribute")

    class Config:
        frozen = True


class CookieBackend(ABC):
    """
    Capability interface for cookie backends.
    Call sites only depend on these three operations, whatever the cryptography underneath.
    """

    @abstractmethod
    def set(self, response: Response, request: Request, payload: Optional[Mapping[str, str]]) -> None:
        ...

    @abstractmethod
    def get(self, response: Response, request: Request) -> Optional[Dict[str, str]]:
        ...

    @abstractmethod
    def delete(self, response: Response, request: Request) -> None:
        ...


class CookieManager(CookieBackend):
    """
    Stores an encrypted, authenticated string map in one named cookie.

    Key material and configuration are fixed at construction, so a single
    instance can serve concurrent requests without locking.
    """

    def __init__(
        self,
        name: str,
        config: Optional[CookieConfig] = None,
        keys: Optional[KeyMaterial] = None,
        previous_keys: Sequence[KeyMaterial] = (),
        key_generator: Optional[KeyGenerator] = None,
        codec: Optional[CookieCodec] = None,
        max_length: int = DEFAULT_MAX_LENGTH
    ):
        """
        Initialize cookie manager.

        Args:
            name: Cookie name; tokens are bound to it
            config: Header flags and lifetime, development defaults when omitted
            keys: Current key material, generated with `key_generator` when omitted
            previous_keys: Older key material still accepted when decoding
            key_generator: Random byte source used to generate missing keys
            codec: Alternative codec backend; built from the keys when omitted
            max_length: Largest accepted token in characters

        Raises:
            CookieConfigurationError: If the name is empty or keys are unusable
        """
        if not isinstance(name, str) or not name.strip():
            raise CookieConfigurationError("Cookie name must be a non-empty string")

        self.name = name
        self.config = config or CookieConfig()

        if codec is None:
            current = keys or KeyMaterial.generate(key_generator)
            codec = SecureCookieCodec(
                [current, *previous_keys],
                max_age=self.config.max_age,
                max_length=max_length
            )
        self.codec = codec

    @classmethod
    def from_settings(cls, settings: Settings, key_generator: Optional[KeyGenerator] = None) -> "CookieManager":
        """Build the application cookie manager from `Settings`."""
        try:
            config = CookieConfig(
                http_only=settings.cookie_http_only,
                secure=settings.cookie_secure,
                max_age=settings.cookie_max_age,
                same_site=settings.cookie_same_site.lower(),
            )
        except ValidationError as e:
            raise CookieConfigurationError(
                f"Invalid cookie settings: {', '.join(str(err['loc'][0]) for err in e.errors())}"
            ) from e

        keys = None
        if settings.cookie_hash_key or settings.cookie_block_key:
            keys = KeyMaterial.from_hex(settings.cookie_hash_key, settings.cookie_block_key)
        else:
            logger.warning(
                f"No keys configured for cookie '{settings.cookie_name}'; "
                f"generated keys invalidate all cookies on restart"
            )

        previous = []
        if settings.cookie_previous_hash_key or settings.cookie_previous_block_key:
            previous.append(
                KeyMaterial.from_hex(settings.cookie_previous_hash_key, settings.cookie_previous_block_key)
            )

        if not config.http_only or not config.secure:
            logger.warning(
                f"Cookie '{settings.cookie_name}' is issued without HttpOnly/Secure; "
                f"enable COOKIE_HTTP_ONLY and COOKIE_SECURE in production"
            )

        return cls(
            settings.cookie_name,
            config=config,
            keys=keys,
            previous_keys=previous,
            key_generator=key_generator,
            max_length=settings.cookie_max_length,
        )

    def set(self, response: Response, request: Request, payload: Optional[Mapping[str, str]]) -> None:
        """
        Store `payload` in the cookie.

        Raises:
            CookieEncodeError: If the payload cannot be encoded. No header is written.
        """
        token = self.codec.encode(self.name, payload)

        max_age = self.config.max_age
        if max_age > 0:
            expires = datetime.now(timezone.utc) + timedelta(seconds=max_age)
            self._write(response, token, max_age=max_age, expires=expires)
        elif max_age < 0:
            # already expired: the client discards it on arrival
            self._write(response, token, max_age=max_age, expires=EXPIRED)
        else:
            self._write(response, token)
        logger.debug(f"Set cookie '{self.name}' for {request.url.path}")

    def load(self, request: Request) -> Dict[str, str]:
        """
        Read the cookie from `request`.

        Returns:
            The stored payload, or an empty dict when the cookie is absent

        Raises:
            CookieDecodeError: If the cookie is present but invalid or expired
        """
        token = request.cookies.get(self.name)
        if token is None:
            return {}
        return self.codec.decode(self.name, token)

    def get(self, response: Response, request: Request) -> Optional[Dict[str, str]]:
        """
        Read the cookie, signalling corruption through `response`.

        An absent cookie yields an empty dict. A present but invalid one sets
        the response status to 500 and yields None.
        """
        try:
            return self.load(request)
        except CookieDecodeError:
            logger.warning(f"Invalid cookie '{self.name}' on {request.method} {request.url.path}")
            response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            return None

    def delete(self, response: Response, request: Request) -> None:
        """Tell the client to discard the cookie immediately."""
        token = self.codec.encode(self.name, None)
        self._write(response, token, max_age=-1, expires=EXPIRED)
        logger.debug(f"Deleted cookie '{self.name}' for {request.url.path}")

    def _write(
        self,
        response: Response,
        token: str,
        max_age: Optional[int] = None,
        expires: Optional[datetime] = None
    ):
        response.set_cookie(
            self.name,
            token,
            max_age=max_age,
            expires=expires,
            path="/",
            secure=self.config.secure,
            httponly=self.config.http_only,
            samesite=self.config.same_site,
        )
