import logging

from werkzeug.security import check_password_hash, generate_password_hash
from models import db, User, Member
from utils.tokens import (
    generate_access_token,
    generate_refresh_token,
    decode_token,
    TokenError,
)

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    """Raised when email/password or a refresh token is rejected"""
    pass


def authenticate_user(email, password):
    """
    Authenticate user by email + password.
    Returns User object if valid, else None.
    """
    if not email or not password:
        return None

    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        return None

    if not check_password_hash(user.password, password):
        return None

    return user


def _issue_tokens(user):
    access_token = generate_access_token(user)
    refresh_token = generate_refresh_token(user)
    # Only the latest refresh token is accepted
    user.refresh_token = refresh_token
    db.session.commit()
    return access_token, refresh_token


def login(email, password):
    """
    Returns (user, access_token, refresh_token).
    Raises InvalidCredentialsError on bad credentials.
    """
    user = authenticate_user(email, password)
    if not user:
        raise InvalidCredentialsError("Invalid credentials")

    access_token, refresh_token = _issue_tokens(user)
    logger.info("User %s logged in", user.id)
    return user, access_token, refresh_token


def refresh_session(refresh_token):
    """
    Exchange a refresh token for a new pair, rotating the stored token.
    """
    try:
        payload = decode_token(refresh_token, expected_type="refresh")
    except TokenError as e:
        raise InvalidCredentialsError(str(e))

    user = db.session.get(User, int(payload["sub"]))
    if not user or user.refresh_token != refresh_token:
        raise InvalidCredentialsError("Refresh token is no longer valid")

    access_token, new_refresh_token = _issue_tokens(user)
    return user, access_token, new_refresh_token


def logout(user):
    user.refresh_token = None
    db.session.commit()


def change_password(user, current_password, new_password):
    if not check_password_hash(user.password, current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    user.password = generate_password_hash(new_password)
    user.must_change_password = False
    db.session.commit()
    return user


def create_user(email, password, role="member"):
    """
    Create a new user with hashed password.
    Raises ValueError if user already exists.
    """
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise ValueError("User already exists")

    user = User(
        email=email,
        password=generate_password_hash(password),
        role=role
    )

    db.session.add(user)
    db.session.flush()
    return user


def ensure_admin_account(email, password):
    """
    Make sure an admin User and its admin Member profile exist and are linked.
    Repairs role/status drift on an existing pair. Returns the admin User.
    """
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()

    if not user:
        if not password:
            raise ValueError("ADMIN_PASSWORD is required to create the admin account")
        user = create_user(email, password, role="admin")
        logger.info("Admin user created")
    elif user.role != "admin":
        user.role = "admin"

    member = Member.query.filter_by(email=email).first()
    if not member:
        member = Member(name="Admin", email=email, role="admin", status="active")
        db.session.add(member)
        logger.info("Admin member profile created")

    member.role = "admin"
    member.status = "active"
    member.user = user

    db.session.commit()
    return user
