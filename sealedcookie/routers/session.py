from fastapi import APIRouter, Depends, Request, Response
from typing import Dict
import logging

from sealedcookie.core.config import settings
from sealedcookie.models.session import SessionData, SessionResponse, SuccessResponse
from sealedcookie.services.cookie_manager import CookieManager
from sealedcookie.utils.errors import CookieDecodeError, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])

session_cookie = CookieManager.from_settings(settings)


def get_session_cookie() -> CookieManager:
    """Dependency returning the application session cookie manager."""
    return session_cookie


def current_session(
    request: Request,
    cookies: CookieManager = Depends(get_session_cookie)
) -> Dict[str, str]:
    """Strict session dependency; invalid cookies raise CookieDecodeError."""
    return cookies.load(request)


def _invalid_cookie_body() -> dict:
    return ErrorResponse(**CookieDecodeError().to_dict()).model_dump()


@router.post(
    "",
    response_model=SuccessResponse,
    summary="Store session data",
    description="Encrypt the given string map into the session cookie, replacing its contents"
)
async def store_session(
    body: SessionData,
    request: Request,
    response: Response,
    cookies: CookieManager = Depends(get_session_cookie)
):
    """
    Replace the session contents.

    Raises:
        CookieEncodeError: If the data does not fit into a cookie
    """
    cookies.set(response, request, body.data)
    return SuccessResponse(message="Session stored", data=body.data)


@router.get(
    "",
    summary="Read session data",
    description="Decrypt the session cookie. A missing cookie yields an empty map, a corrupted one a 500 response",
    responses={500: {"model": ErrorResponse}}
)
async def read_session(
    request: Request,
    response: Response,
    cookies: CookieManager = Depends(get_session_cookie)
):
    data = cookies.get(response, request)
    if data is None:
        # status already set to 500 by the cookie manager
        return _invalid_cookie_body()
    return SessionResponse(data=data)


@router.get(
    "/verify",
    response_model=SessionResponse,
    summary="Read session data strictly",
    description="Like GET /api/session but invalid cookies are reported through the global error handler"
)
async def verify_session(data: Dict[str, str] = Depends(current_session)):
    return SessionResponse(data=data)


@router.patch(
    "",
    response_model=SuccessResponse,
    summary="Update session data",
    description="Merge the given keys into the existing session"
)
async def update_session(
    body: SessionData,
    request: Request,
    response: Response,
    data: Dict[str, str] = Depends(current_session),
    cookies: CookieManager = Depends(get_session_cookie)
):
    merged = {**data, **body.data}
    cookies.set(response, request, merged)
    logger.info(f"Updated {len(body.data)} session key(s)")
    return SuccessResponse(message="Session updated", data=merged)


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Clear the session",
    description="Expire the session cookie on the client"
)
async def clear_session(
    request: Request,
    response: Response,
    cookies: CookieManager = Depends(get_session_cookie)
):
    cookies.delete(response, request)
    return SuccessResponse(message="Session cleared")
