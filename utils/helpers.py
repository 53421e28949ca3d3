"""
General helper functions (non-domain specific utilities)

Note: Domain-specific business logic should be in services/
"""
from datetime import date, datetime
from flask import g


def first_error_message(exc):
    """
    Return the first message of a pydantic ValidationError, without the
    "Value error, " prefix pydantic adds to messages raised by validators.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]

    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {message}" if field else message


def parse_date(value):
    """
    Parse a query-string date ("2024-05-01" or a full ISO timestamp).
    Returns None for empty input, raises ValueError for garbage.
    """
    if not value:
        return None
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value[:10]).date()


def current_member():
    """Member profile linked to the authenticated user, or None."""
    user = getattr(g, "current_user", None)
    if user is None:
        return None
    return user.member


def is_admin(user):
    return user is not None and user.role == "admin"
