from flask import Blueprint, request, jsonify
from schemas import JoiningFeeCreate
from services.joining_fee_service import (
    list_joining_fees,
    create_joining_fee,
    delete_joining_fee,
    JoiningFeeNotFoundError,
)
from services.member_service import MemberNotFoundError
from utils.decorators import admin_only
from utils.helpers import current_member
from utils.serializers import joining_fee_to_dict

joining_fees_bp = Blueprint("joining_fees", __name__, url_prefix="/api/joiningFees")


@joining_fees_bp.route("", methods=["GET"])
@admin_only
def api_list_joining_fees():
    return jsonify([joining_fee_to_dict(f) for f in list_joining_fees()])


@joining_fees_bp.route("", methods=["POST"])
@admin_only
def api_create_joining_fee():
    data = JoiningFeeCreate.model_validate(request.get_json(silent=True) or {})

    received_by = current_member()
    if received_by is None:
        return jsonify({"error": "Member profile not found"}), 404

    try:
        fee = create_joining_fee(
            member_id=data.member_id,
            received_by=received_by,
            amount=data.amount,
            fee_date=data.date,
            note=data.note,
        )
        return jsonify(joining_fee_to_dict(fee)), 201
    except MemberNotFoundError:
        return jsonify({"error": "Member not found"}), 404


@joining_fees_bp.route("/<int:fee_id>", methods=["DELETE"])
@admin_only
def api_delete_joining_fee(fee_id):
    try:
        delete_joining_fee(fee_id)
        return jsonify({"message": "Advance deleted successfully"})
    except JoiningFeeNotFoundError as e:
        return jsonify({"error": str(e)}), 404
