"""
Session cookie adapter.

Moves the session token between HTTP responses/requests and the ``token``
cookie. It never looks inside the token.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request, Response

SESSION_COOKIE_NAME = "token"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 7


class SessionCookie:
    def __init__(
        self,
        secure: bool,
        name: str = SESSION_COOKIE_NAME,
        max_age: int = SESSION_COOKIE_MAX_AGE,
    ):
        self.name = name
        self.secure = secure
        self.max_age = max_age

    def attach(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.name,
            value=token,
            max_age=self.max_age,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def read(self, request: Request) -> Optional[str]:
        return request.cookies.get(self.name) or None

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            key=self.name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )
