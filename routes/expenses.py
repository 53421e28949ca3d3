from flask import Blueprint, request, jsonify
from schemas import ExpenseCreate, ExpenseUpdate
from services.expense_service import (
    create_expense,
    update_expense,
    delete_expense,
    get_expense_by_id,
    list_expenses,
    InvalidExpenseDataError,
    ExpenseNotFoundError,
)
from utils.decorators import login_required, admin_only
from utils.helpers import current_member, parse_date
from utils.serializers import expense_to_dict, share_to_dict

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.route("", methods=["GET"])
@login_required
def api_list_expenses():
    try:
        start_date = parse_date(request.args.get("start_date") or request.args.get("startDate"))
        end_date = parse_date(request.args.get("end_date") or request.args.get("endDate"))
    except ValueError:
        return jsonify({"error": "Invalid date"}), 400

    expenses = list_expenses(
        start_date=start_date,
        end_date=end_date,
        category=request.args.get("category"),
        status=request.args.get("status"),
    )
    return jsonify([expense_to_dict(e) for e in expenses])


@expenses_bp.route("/<int:expense_id>", methods=["GET"])
@login_required
def api_get_expense(expense_id):
    try:
        expense = get_expense_by_id(expense_id)
    except ExpenseNotFoundError:
        return jsonify({"error": "Expense not found"}), 404

    data = expense_to_dict(expense)
    data["shares"] = [share_to_dict(s, with_member=True) for s in expense.shares]
    return jsonify(data)


@expenses_bp.route("", methods=["POST"])
@admin_only
def api_add_expense():
    data = ExpenseCreate.model_validate(request.get_json(silent=True) or {})

    paid_by = data.paid_by
    if paid_by is None:
        member = current_member()
        if member is None:
            return jsonify({"error": "Member profile not found"}), 404
        paid_by = member.id

    try:
        expense = create_expense(
            category=data.category,
            description=data.description,
            expense_date=data.date,
            paid_by=paid_by,
            amount=data.amount,
            selected_member_ids=data.selected_members,
            present_members=data.present_members,
            status=data.status,
            court_booking_cost=data.court_booking_cost,
            per_shuttle_cost=data.per_shuttle_cost,
            shuttles_used=data.shuttles_used,
            reduce_from_stock=data.reduce_from_stock,
        )
        return jsonify(expense_to_dict(expense)), 201
    except InvalidExpenseDataError as e:
        return jsonify({"error": str(e)}), 400


@expenses_bp.route("/<int:expense_id>", methods=["PUT"])
@admin_only
def api_update_expense(expense_id):
    data = ExpenseUpdate.model_validate(request.get_json(silent=True) or {})
    try:
        expense = update_expense(expense_id, **data.model_dump(exclude_unset=True))
        return jsonify(expense_to_dict(expense))
    except ExpenseNotFoundError:
        return jsonify({"error": "Expense not found"}), 404
    except InvalidExpenseDataError as e:
        return jsonify({"error": str(e)}), 400


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@admin_only
def api_delete_expense(expense_id):
    try:
        delete_expense(expense_id)
        return jsonify({"message": "Expense deleted successfully"})
    except ExpenseNotFoundError:
        return jsonify({"error": "Expense not found"}), 404
