import hmac
from functools import wraps
from time import time

import jwt
from flask import current_app, g, request

from bitfreeze.errors import AdminForbidden, Unauthorized


def create_access_token(email: str) -> str:
    now = int(time())
    payload = {
        "sub": email,
        "iat": now,
        "exp": now + int(current_app.config.get("JWT_EXPIRY_SECONDS") or 7 * 24 * 3600),
        "type": "access",
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
    except jwt.PyJWTError:
        raise Unauthorized("Invalid token")
    if payload.get("type") != "access" or not payload.get("sub"):
        raise Unauthorized("Invalid token")
    return payload


def get_bearer_token(auth_header: str):
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def login_required(view):
    """Require a valid bearer token; the account email is exposed as g.email."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        token = get_bearer_token(request.headers.get("Authorization", ""))
        if not token:
            raise Unauthorized("Missing token")
        g.email = decode_token(token)["sub"]
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    """Shared-secret check: X-Admin-Pass header or adminPass body field."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        supplied = request.headers.get("X-Admin-Pass") or body.get("adminPass") or ""
        expected = current_app.config.get("ADMIN_PASS") or ""
        if not supplied or not expected or not hmac.compare_digest(str(supplied), str(expected)):
            raise AdminForbidden("Forbidden - admin")
        return view(*args, **kwargs)

    return wrapped
