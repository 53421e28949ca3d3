from flask import Blueprint, request, jsonify
from schemas import MemberCreate, MemberUpdate
from services.member_service import (
    list_members,
    get_member_by_id,
    create_member,
    update_member,
    delete_member,
    MemberNotFoundError,
    InvalidMemberDataError,
    MemberPermissionError,
)
from utils.decorators import admin_only
from utils.serializers import member_to_dict

members_bp = Blueprint("members", __name__, url_prefix="/api/members")


@members_bp.route("", methods=["GET"])
@admin_only
def api_list_members():
    return jsonify([member_to_dict(m) for m in list_members()])


@members_bp.route("/<int:member_id>", methods=["GET"])
@admin_only
def api_get_member(member_id):
    try:
        return jsonify(member_to_dict(get_member_by_id(member_id)))
    except MemberNotFoundError:
        return jsonify({"error": "Member not found"}), 404


@members_bp.route("", methods=["POST"])
@admin_only
def api_create_member():
    data = MemberCreate.model_validate(request.get_json(silent=True) or {})
    try:
        member = create_member(
            name=data.name,
            email=data.email,
            phone=data.phone,
            status=data.status,
            password=data.password,
        )
        return jsonify(member_to_dict(member)), 201
    except InvalidMemberDataError as e:
        return jsonify({"error": str(e)}), 400


@members_bp.route("/<int:member_id>", methods=["PUT"])
@admin_only
def api_update_member(member_id):
    data = MemberUpdate.model_validate(request.get_json(silent=True) or {})
    try:
        member = update_member(member_id, **data.model_dump(exclude_unset=True))
        return jsonify(member_to_dict(member))
    except MemberNotFoundError:
        return jsonify({"error": "Member not found"}), 404
    except InvalidMemberDataError as e:
        return jsonify({"error": str(e)}), 400


@members_bp.route("/<int:member_id>", methods=["DELETE"])
@admin_only
def api_delete_member(member_id):
    try:
        delete_member(member_id)
        return jsonify({"message": "Member deleted successfully"})
    except MemberNotFoundError:
        return jsonify({"error": "Member not found"}), 404
    except MemberPermissionError as e:
        return jsonify({"error": str(e)}), 403
    except InvalidMemberDataError as e:
        return jsonify({"error": str(e)}), 400
