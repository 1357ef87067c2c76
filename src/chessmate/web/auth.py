"""
Organizer login for the web API.

Login is mocked: there are no user accounts, only a flag in the signed
session cookie. When ORGANIZER_PASSWORD is configured the login request
must supply it; otherwise any login succeeds.
"""

from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Request

from chessmate.config import settings
from chessmate.exceptions import UnauthorizedError

ORGANIZER_SESSION_KEY = "organizer_logged_in"


def is_logged_in(request: Request) -> bool:
    return bool(request.session.get(ORGANIZER_SESSION_KEY))


def check_password(password: Optional[str]) -> bool:
    """Accept any password unless an organizer password is configured."""
    expected = settings.organizer_password
    if not expected:
        return True
    return hmac.compare_digest((password or "").encode("utf-8"), expected.encode("utf-8"))


def login(request: Request, password: Optional[str]) -> bool:
    if not check_password(password):
        return False
    request.session[ORGANIZER_SESSION_KEY] = True
    return True


def logout(request: Request) -> None:
    request.session.pop(ORGANIZER_SESSION_KEY, None)


def require_organizer(request: Request) -> None:
    """
    Dependency for organizer-only routes.

    Usage:
        @app.post("/api/tournaments", dependencies=[Depends(require_organizer)])
    """
    if not is_logged_in(request):
        raise UnauthorizedError()
