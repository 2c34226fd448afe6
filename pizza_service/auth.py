"""Bearer-token authentication helpers for the API blueprints."""

import functools
import secrets
from typing import Optional

from flask import g, request

from .exceptions import ForbiddenError, UnauthorizedError
from .extensions import db
from .models import AuthToken, User


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def read_bearer_token() -> Optional[str]:
    """Return the token from ``Authorization: Bearer <token>``, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def load_current_user() -> None:
    """Resolve the user owning the request's token onto ``g``."""
    user = None
    token = read_bearer_token()
    if token:
        auth_token = db.session.get(AuthToken, token)
        if auth_token is not None:
            user = auth_token.user
    g.current_user = user
    g.current_token = token if user else None


def get_current_user() -> Optional[User]:
    return g.get("current_user")


def auth_required(view):
    """Reject the request with 401 unless it carries a live token."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        if get_current_user() is None:
            raise UnauthorizedError("unauthorized")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    """Reject the request unless the caller is an admin."""

    @functools.wraps(view)
    @auth_required
    def wrapper(*args, **kwargs):
        if not g.current_user.is_admin:
            raise ForbiddenError("unable to perform this action")
        return view(*args, **kwargs)

    return wrapper
