"""
Equipment inventory on top of expenses.

Purchases are Expense rows flagged ``is_inventory``; they are split between
members like any other expense.
"""
import logging

from models import db, Expense
from services.expense_service import (
    create_expense,
    delete_expense,
    get_expense_by_id,
    ExpenseNotFoundError,
)

logger = logging.getLogger(__name__)


class InvalidUsageError(Exception):
    """Raised when a usage update is out of range"""
    pass


def list_equipment():
    return (
        Expense.query
        .filter_by(is_inventory=True)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )


def get_equipment(expense_id):
    expense = get_expense_by_id(expense_id)
    if not expense.is_inventory:
        raise ExpenseNotFoundError(f"Equipment purchase {expense_id} not found")
    return expense


def create_equipment(paid_by, expense_date, item_name, amount, quantity_purchased,
                     selected_member_ids, description=None, quantity_used=None, status=None):
    if quantity_used and quantity_used > quantity_purchased:
        raise InvalidUsageError("Used quantity cannot exceed purchased quantity")

    return create_expense(
        category="equipment",
        description=description or item_name,
        expense_date=expense_date,
        paid_by=paid_by,
        amount=amount,
        selected_member_ids=selected_member_ids,
        status=status,
        inventory={
            "item_name": item_name,
            "quantity_purchased": quantity_purchased,
            "quantity_used": quantity_used or 0,
        },
    )


def update_usage(expense_id, quantity_used):
    """
    Set how many units of a purchase have been used.

    Raises:
        ExpenseNotFoundError: If the purchase doesn't exist
        InvalidUsageError: If quantity_used exceeds quantity_purchased
    """
    equipment = get_equipment(expense_id)

    if quantity_used < 0:
        raise InvalidUsageError("Quantity must be positive")

    purchased = equipment.quantity_purchased or 0
    if quantity_used > purchased:
        raise InvalidUsageError("Used quantity cannot exceed purchased quantity")

    equipment.quantity_used = quantity_used
    db.session.commit()
    return equipment


def delete_equipment(expense_id):
    delete_expense(expense_id, inventory_only=True)


def consume_stock(quantity, exclude_id=None):
    """
    Take ``quantity`` units from the oldest inventory lots that still have
    stock. Stops early when every lot is exhausted. No locking: two
    concurrent consumers can draw on the same lot. The caller commits.

    Returns:
        Number of units actually consumed
    """
    needed = int(quantity)
    consumed = 0

    query = Expense.query.filter(Expense.is_inventory.is_(True))
    if exclude_id is not None:
        query = query.filter(Expense.id != exclude_id)
    lots = query.order_by(Expense.date.asc(), Expense.id.asc()).all()

    for lot in lots:
        if needed <= 0:
            break

        remaining = (lot.quantity_purchased or 0) - (lot.quantity_used or 0)
        if remaining <= 0:
            continue

        take = min(remaining, needed)
        lot.quantity_used = (lot.quantity_used or 0) + take
        needed -= take
        consumed += take

    if needed > 0:
        logger.warning("Stock exhausted: %d of %d units could not be consumed", needed, quantity)
    return consumed


def stock_summary():
    lots = list_equipment()
    purchased = sum(lot.quantity_purchased or 0 for lot in lots)
    used = sum(lot.quantity_used or 0 for lot in lots)
    return {
        "lots": len(lots),
        "quantity_purchased": purchased,
        "quantity_used": used,
        "quantity_remaining": purchased - used,
    }
