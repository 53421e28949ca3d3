from flask import Blueprint, request, jsonify, g
from schemas import MarkPaidSchema
from services.payment_service import (
    mark_share_paid,
    member_payments,
    all_member_payments,
    ShareNotFoundError,
    InvalidPaymentError,
)
from utils.decorators import login_required, admin_only
from utils.helpers import current_member, is_admin
from utils.serializers import share_to_dict, member_ref

payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


@payments_bp.route("/mark-paid", methods=["POST"])
@admin_only
def api_mark_paid():
    data = MarkPaidSchema.model_validate(request.get_json(silent=True) or {})
    try:
        share = mark_share_paid(data.expense_id, data.member_id)
    except ShareNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except InvalidPaymentError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "message": "Payment marked as paid",
        "expense_share": share_to_dict(share, with_expense=True, with_member=True),
    })


@payments_bp.route("/member/<int:member_id>", methods=["GET"])
@login_required
def api_member_payments(member_id):
    # Members can only view their own payments
    if not is_admin(g.current_user):
        member = current_member()
        if member is None or member.id != member_id:
            return jsonify({"error": "Forbidden"}), 403

    shares, summary = member_payments(member_id)
    return jsonify({
        "expense_shares": [share_to_dict(s, with_expense=True) for s in shares],
        "summary": summary,
    })


@payments_bp.route("/all", methods=["GET"])
@admin_only
def api_all_payments():
    return jsonify({
        "member_payments": [
            {
                "member": member_ref(member),
                "expense_shares": [share_to_dict(s, with_expense=True) for s in shares],
                **summary,
            }
            for member, shares, summary in all_member_payments()
        ]
    })
