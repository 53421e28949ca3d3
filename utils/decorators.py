from functools import wraps
from flask import request, jsonify, g
from models import db, User
from utils.tokens import decode_token, TokenError


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return jsonify({"error": "No token provided"}), 401

        try:
            payload = decode_token(auth_header[7:])
        except TokenError:
            return jsonify({"error": "Invalid or expired token"}), 401

        # The user must still exist
        user = db.session.get(User, int(payload["sub"]))
        if not user:
            return jsonify({"error": "User not found"}), 401

        g.current_user = user
        return view(*args, **kwargs)
    return wrapper


def roles_required(*roles):
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if g.current_user.role not in roles:
                return jsonify({"error": "Forbidden: Insufficient permissions"}), 403
            return view(*args, **kwargs)
        return wrapper
    return decorator


def admin_only(view):
    return roles_required("admin")(view)
