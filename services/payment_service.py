import logging
from datetime import datetime, timezone

from models import db, ExpenseShare
from services.member_service import adjust_balance
from services.expense_service import derive_status
from services.notification_service import notify_member

logger = logging.getLogger(__name__)


class ShareNotFoundError(Exception):
    """Raised when an expense share is not found"""
    pass


class InvalidPaymentError(Exception):
    """Raised when a payment cannot be recorded"""
    pass


def mark_share_paid(expense_id, member_id):
    """
    Mark one member's share of an expense as paid and take it off their
    balance. The expense becomes completed once no unpaid share remains.

    Raises:
        ShareNotFoundError: If there is no share for (expense, member)
        InvalidPaymentError: If the share is already paid
    """
    share = ExpenseShare.query.filter_by(
        expense_id=expense_id, member_id=member_id
    ).first()
    if not share:
        raise ShareNotFoundError("Expense share not found")

    if share.paid_status:
        raise InvalidPaymentError("Expense share is already marked as paid")

    share.paid_status = True
    share.paid_at = datetime.now(timezone.utc)
    adjust_balance(share.member, -share.amount)

    db.session.flush()
    expense = share.expense
    expense.status = derive_status(expense)

    notify_member(
        share.member,
        "payment_approved",
        "Payment recorded",
        f"Your payment of {share.amount:.2f} for {expense.description} was recorded",
        {"expense_id": expense.id, "amount": share.amount},
    )

    db.session.commit()
    logger.info(
        "Share %s paid: member=%s amount=%.2f", share.id, member_id, share.amount
    )
    return share


def _summarise(shares):
    total_share = sum(s.amount for s in shares)
    total_paid = sum(s.amount for s in shares if s.paid_status)
    return {
        "total_share": total_share,
        "total_paid": total_paid,
        "total_unpaid": total_share - total_paid,
        "paid_count": len([s for s in shares if s.paid_status]),
        "unpaid_count": len([s for s in shares if not s.paid_status]),
    }


def member_payments(member_id):
    """Shares of one member, newest first, with totals."""
    shares = (
        ExpenseShare.query
        .filter_by(member_id=member_id)
        .order_by(ExpenseShare.created_at.desc(), ExpenseShare.id.desc())
        .all()
    )
    return shares, _summarise(shares)


def all_member_payments():
    """
    All shares grouped per member: list of (member, shares, totals).
    """
    shares = (
        ExpenseShare.query
        .order_by(ExpenseShare.created_at.desc(), ExpenseShare.id.desc())
        .all()
    )

    grouped = {}
    for share in shares:
        if share.member is None:
            continue
        grouped.setdefault(share.member_id, (share.member, []))[1].append(share)

    return [
        (member, member_shares, _summarise(member_shares))
        for member, member_shares in grouped.values()
    ]
