from flask import Blueprint, request, jsonify
from schemas import EquipmentCreate, UsageSchema
from services.inventory_service import (
    list_equipment,
    create_equipment,
    update_usage,
    delete_equipment,
    stock_summary,
    InvalidUsageError,
)
from services.expense_service import InvalidExpenseDataError, ExpenseNotFoundError
from utils.decorators import login_required, admin_only
from utils.helpers import current_member
from utils.serializers import expense_to_dict

equipment_bp = Blueprint("equipment", __name__, url_prefix="/api/equipment")


@equipment_bp.route("", methods=["GET"])
@login_required
def api_list_equipment():
    return jsonify([expense_to_dict(e) for e in list_equipment()])


@equipment_bp.route("/stock", methods=["GET"])
@login_required
def api_stock():
    return jsonify(stock_summary())


@equipment_bp.route("", methods=["POST"])
@admin_only
def api_add_equipment():
    data = EquipmentCreate.model_validate(request.get_json(silent=True) or {})

    member = current_member()
    if member is None:
        return jsonify({"error": "Member profile not found"}), 404

    try:
        equipment = create_equipment(
            paid_by=member.id,
            expense_date=data.date,
            item_name=data.item_name,
            amount=data.amount,
            quantity_purchased=data.quantity_purchased,
            quantity_used=data.quantity_used,
            selected_member_ids=data.selected_members,
            description=data.description,
            status=data.status,
        )
        return jsonify(expense_to_dict(equipment)), 201
    except (InvalidExpenseDataError, InvalidUsageError) as e:
        return jsonify({"error": str(e)}), 400


@equipment_bp.route("/<int:expense_id>/usage", methods=["PATCH"])
@admin_only
def api_update_usage(expense_id):
    data = UsageSchema.model_validate(request.get_json(silent=True) or {})
    try:
        equipment = update_usage(expense_id, data.quantity_used)
        return jsonify(expense_to_dict(equipment))
    except ExpenseNotFoundError:
        return jsonify({"error": "Equipment purchase not found"}), 404
    except InvalidUsageError as e:
        return jsonify({"error": str(e)}), 400


@equipment_bp.route("/<int:expense_id>", methods=["DELETE"])
@admin_only
def api_delete_equipment(expense_id):
    try:
        delete_equipment(expense_id)
        return jsonify({"message": "Equipment purchase deleted successfully"})
    except ExpenseNotFoundError:
        return jsonify({"error": "Equipment purchase not found"}), 404
