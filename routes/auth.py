from flask import Blueprint, request, jsonify, g
from schemas import LoginSchema, RefreshSchema, ChangePasswordSchema
from services.auth_service import (
    login,
    refresh_session,
    logout,
    change_password,
    InvalidCredentialsError,
)
from utils.decorators import login_required
from utils.serializers import user_to_dict

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _token_response(user, access_token, refresh_token, message):
    return jsonify({
        "message": message,
        "access_token": access_token,
        "refresh_token": refresh_token,
        "user": user_to_dict(user),
    })


@auth_bp.route("/signup", methods=["POST"])
def api_signup():
    return jsonify({
        "error": "Signup is disabled. Accounts are created by an administrator."
    }), 403


@auth_bp.route("/login", methods=["POST"])
def api_login():
    data = LoginSchema.model_validate(request.get_json(silent=True) or {})
    try:
        user, access_token, refresh_token = login(data.email, data.password)
    except InvalidCredentialsError:
        return jsonify({"error": "Invalid credentials"}), 401

    return _token_response(user, access_token, refresh_token, "Login successful")


@auth_bp.route("/refresh", methods=["POST"])
def api_refresh():
    data = RefreshSchema.model_validate(request.get_json(silent=True) or {})
    try:
        user, access_token, refresh_token = refresh_session(data.refresh_token)
    except InvalidCredentialsError as e:
        return jsonify({"error": str(e)}), 401

    return _token_response(user, access_token, refresh_token, "Token refreshed")


@auth_bp.route("/logout", methods=["POST"])
@login_required
def api_logout():
    logout(g.current_user)
    return jsonify({"message": "Logout successful"})


@auth_bp.route("/me", methods=["GET"])
@login_required
def api_me():
    return jsonify(user_to_dict(g.current_user))


@auth_bp.route("/change-password", methods=["POST"])
@login_required
def api_change_password():
    data = ChangePasswordSchema.model_validate(request.get_json(silent=True) or {})
    try:
        change_password(g.current_user, data.current_password, data.new_password)
    except InvalidCredentialsError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"message": "Password updated"})
