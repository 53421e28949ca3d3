"""
JWT helpers for the access / refresh token pair.
"""
from datetime import datetime, timedelta, timezone
import uuid

import jwt
from flask import current_app


class TokenError(Exception):
    """Raised when a token is missing, malformed, expired or of the wrong type"""
    pass


def _encode(payload, expires_in):
    to_encode = payload.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires_in,
        "iat": datetime.now(timezone.utc),
        # keeps two tokens issued within the same second distinct
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(
        to_encode,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def generate_access_token(user):
    return _encode(
        {"sub": str(user.id), "email": user.email, "role": user.role, "type": "access"},
        timedelta(minutes=current_app.config["JWT_ACCESS_EXPIRES_MINUTES"]),
    )


def generate_refresh_token(user):
    return _encode(
        {"sub": str(user.id), "type": "refresh"},
        timedelta(days=current_app.config["JWT_REFRESH_EXPIRES_DAYS"]),
    )


def decode_token(token, expected_type="access"):
    """
    Verify a token and return its payload.

    Raises:
        TokenError: If the signature, expiry or token type is wrong
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise TokenError("Invalid token")

    if payload.get("type") != expected_type:
        raise TokenError("Invalid token type")
    return payload
