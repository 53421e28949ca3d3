"""
Expense Service - Business logic for expense operations

Rules:
- No Flask (request, session, redirect, flash)
- No decorators
- Can use models and db
- Can raise exceptions
- Returns plain Python data

Balance convention: a member's balance goes up by every unpaid share they
owe and down when a share is paid.
"""
import logging

from models import db, Expense, ExpenseShare
from services.member_service import (
    get_member_by_id,
    get_members_by_ids,
    adjust_balance,
    MemberNotFoundError,
    InvalidMemberDataError,
)
from services.notification_service import notify_member

logger = logging.getLogger(__name__)


class ExpenseNotFoundError(Exception):
    """Raised when an expense is not found"""
    pass


class InvalidExpenseDataError(Exception):
    """Raised when expense data is invalid"""
    pass


BREAKDOWN_FIELDS = ("court_booking_cost", "per_shuttle_cost", "shuttles_used")


def court_amount(court_booking_cost=None, per_shuttle_cost=None, shuttles_used=None):
    """Court booking cost plus shuttles used at the per-shuttle price."""
    return (court_booking_cost or 0) + (per_shuttle_cost or 0) * (shuttles_used or 0)


def _resolve_amount(category, amount, breakdown):
    # For court expenses any breakdown field wins over a flat amount
    if category == "court" and any(value is not None for value in breakdown.values()):
        return float(court_amount(**breakdown))

    if amount is None:
        raise InvalidExpenseDataError("Amount is required")
    if amount < 0:
        raise InvalidExpenseDataError("Amount must be positive")
    return float(amount)


def _resolve_members(selected_member_ids, present_members):
    """
    Returns (members, member_count). A raw present count yields no members
    and therefore no shares.
    """
    if selected_member_ids:
        try:
            members = get_members_by_ids(selected_member_ids)
        except InvalidMemberDataError as e:
            raise InvalidExpenseDataError(str(e))
        return members, len(members)

    if present_members:
        if present_members < 1:
            raise InvalidExpenseDataError("At least one member must be present")
        return [], int(present_members)

    raise InvalidExpenseDataError("Either selected_members or present_members must be provided")


def _resolve_payer(paid_by):
    try:
        return get_member_by_id(paid_by)
    except MemberNotFoundError:
        raise InvalidExpenseDataError(f"Paid by member {paid_by} not found")


def _fan_out_shares(expense, members, carry=None):
    """
    Create one share per selected member except the payer and add each
    unpaid share to the member's balance.

    ``carry`` maps member_id -> (paid_status, paid_at) from a previous share
    set so payments survive a recalculation.
    """
    carry = carry or {}
    shares = []

    for member in members:
        if member.id == expense.paid_by:
            continue

        paid_status, paid_at = carry.get(member.id, (False, None))
        share = ExpenseShare(
            expense=expense,
            member=member,
            amount=expense.per_member_share,
            paid_status=paid_status,
            paid_at=paid_at,
        )
        db.session.add(share)
        shares.append(share)

        if not paid_status:
            adjust_balance(member, expense.per_member_share)

    return shares


def derive_status(expense):
    """completed once no unpaid share remains, pending otherwise."""
    unpaid = [s for s in expense.shares if not s.paid_status]
    return "pending" if unpaid else "completed"


def create_expense(category, description, expense_date, paid_by, amount=None,
                   selected_member_ids=None, present_members=None, status=None,
                   court_booking_cost=None, per_shuttle_cost=None, shuttles_used=None,
                   reduce_from_stock=False, inventory=None):
    """
    Create an expense, split it and charge the shares to member balances.

    Args:
        category: court | equipment | refreshments | other
        description: Free text
        expense_date: date of the expense
        paid_by: Member ID who paid
        amount: Total amount (ignored for court expenses with a breakdown)
        selected_member_ids: Members sharing the expense
        present_members: Raw head count used when no members are selected
        status: Optional explicit status (defaults to pending)
        reduce_from_stock: Consume ``shuttles_used`` from inventory lots
        inventory: Optional dict with item_name, quantity_purchased,
                   quantity_used for equipment purchases

    Returns:
        Expense object

    Raises:
        InvalidExpenseDataError: If data is invalid
    """
    breakdown = {
        "court_booking_cost": court_booking_cost,
        "per_shuttle_cost": per_shuttle_cost,
        "shuttles_used": shuttles_used,
    }
    total = _resolve_amount(category, amount, breakdown)
    members, member_count = _resolve_members(selected_member_ids, present_members)
    payer = _resolve_payer(paid_by)

    expense = Expense(
        date=expense_date,
        category=category,
        description=description.strip(),
        amount=total,
        paid_by=payer.id,
        present_members=member_count,
        per_member_share=total / member_count,
        status=status or "pending",
        court_booking_cost=court_booking_cost,
        per_shuttle_cost=per_shuttle_cost,
        shuttles_used=shuttles_used,
        reduce_from_stock=bool(reduce_from_stock),
        stock_consumed=0,
    )
    expense.selected_members = members

    if inventory:
        expense.is_inventory = True
        expense.item_name = inventory["item_name"]
        expense.quantity_purchased = inventory["quantity_purchased"]
        expense.quantity_used = inventory.get("quantity_used") or 0

    db.session.add(expense)
    db.session.flush()  # Get expense.id before creating shares

    shares = _fan_out_shares(expense, members)

    if reduce_from_stock and shuttles_used:
        from services.inventory_service import consume_stock
        expense.stock_consumed = consume_stock(shuttles_used, exclude_id=expense.id)

    for share in shares:
        notify_member(
            share.member,
            "expense_added",
            "New expense added",
            f"You owe {share.amount:.2f} for {expense.description}",
            {"expense_id": expense.id, "amount": share.amount},
        )

    db.session.commit()
    logger.info(
        "Expense %s created: amount=%.2f share=%.2f shares=%d",
        expense.id, expense.amount, expense.per_member_share, len(shares),
    )
    return expense


def get_expense_by_id(expense_id):
    """
    Get an expense by ID.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
    """
    expense = db.session.get(Expense, expense_id)
    if not expense:
        raise ExpenseNotFoundError(f"Expense {expense_id} not found")
    return expense


def list_expenses(start_date=None, end_date=None, category=None, status=None):
    """
    All expenses (members see everything for transparency), newest first.
    """
    query = Expense.query

    if start_date and end_date:
        query = query.filter(Expense.date >= start_date, Expense.date <= end_date)
    if category:
        query = query.filter_by(category=category)
    if status:
        query = query.filter_by(status=status)

    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def update_expense(expense_id, **fields):
    """
    Edit an expense and reconcile its shares.

    Only keys present in ``fields`` are applied. Unpaid shares are taken off
    member balances, the share set is rebuilt from the new inputs with paid
    status carried over by member, and the new unpaid shares are charged
    again. Status is re-derived unless one is given explicitly.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
        InvalidExpenseDataError: If data is invalid
    """
    expense = get_expense_by_id(expense_id)

    # Validate everything before touching balances
    new_members = None
    if fields.get("selected_members"):
        new_members, _ = _resolve_members(fields["selected_members"], None)

    if fields.get("paid_by") is not None:
        expense.paid_by = _resolve_payer(fields["paid_by"]).id

    for key in ("date", "category", "description", *BREAKDOWN_FIELDS):
        if fields.get(key) is not None:
            setattr(expense, key, fields[key])

    # A stored breakdown keeps deciding the amount of a court expense
    if expense.category == "court" and any(
        getattr(expense, key) is not None for key in BREAKDOWN_FIELDS
    ):
        expense.amount = float(court_amount(
            expense.court_booking_cost, expense.per_shuttle_cost, expense.shuttles_used
        ))
    elif fields.get("amount") is not None:
        expense.amount = _resolve_amount(expense.category, fields["amount"], {})

    if new_members is not None:
        members = new_members
    elif expense.selected_members:
        members = list(expense.selected_members)
    elif fields.get("present_members"):
        members = []
        expense.present_members = int(fields["present_members"])
    else:
        members = []

    if members:
        expense.present_members = len(members)
    expense.selected_members = members
    expense.per_member_share = expense.amount / expense.present_members

    # Revert the old shares' balance impact
    old_shares = list(expense.shares)
    carry = {}
    for share in old_shares:
        if not share.paid_status:
            adjust_balance(share.member, -share.amount)
        carry[share.member_id] = (share.paid_status, share.paid_at)
        db.session.delete(share)
    db.session.flush()  # unique (expense, member) must be free before re-insert
    db.session.expire(expense, ["shares"])

    _fan_out_shares(expense, members, carry=carry)
    db.session.flush()
    db.session.expire(expense, ["shares"])

    if fields.get("status"):
        expense.status = fields["status"]
    else:
        expense.status = derive_status(expense)

    db.session.commit()
    logger.info(
        "Expense %s updated: amount=%.2f share=%.2f",
        expense.id, expense.amount, expense.per_member_share,
    )
    return expense


def delete_expense(expense_id, inventory_only=False):
    """
    Delete an expense, reverting the balance impact of its unpaid shares.
    Paid shares are removed without further balance change.

    Raises:
        ExpenseNotFoundError: If expense doesn't exist
    """
    expense = get_expense_by_id(expense_id)
    if inventory_only and not expense.is_inventory:
        raise ExpenseNotFoundError(f"Equipment purchase {expense_id} not found")

    reverted = 0.0
    for share in expense.shares:
        if not share.paid_status:
            adjust_balance(share.member, -share.amount)
            reverted += share.amount

    db.session.delete(expense)
    db.session.commit()
    logger.info("Expense %s deleted: reverted %.2f of unpaid shares", expense_id, reverted)
