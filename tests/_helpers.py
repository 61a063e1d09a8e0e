from __future__ import annotations

from typing import Optional

from starlette.requests import Request
from starlette.responses import Response


def fixed_generator(seed: int):
    """Deterministic stand-in for secrets.token_bytes."""
    def generate(length: int) -> bytes:
        return bytes((seed + i) % 256 for i in range(length))
    return generate


def make_request(cookie_header: Optional[str] = None, path: str = "/") -> Request:
    headers = []
    if cookie_header is not None:
        headers.append((b"cookie", cookie_header.encode("latin-1")))
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": headers,
    })


def set_cookie_headers(response: Response) -> list[str]:
    return response.headers.getlist("set-cookie")


def cookie_value(header: str) -> str:
    """Value part of a Set-Cookie header."""
    return header.split(";", 1)[0].split("=", 1)[1]


def flip_char(token: str, index: int) -> str:
    replacement = "A" if token[index] != "A" else "B"
    return token[:index] + replacement + token[index + 1:]
