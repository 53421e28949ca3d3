import logging
from collections import defaultdict
from datetime import date, datetime, timezone

from models import db, Expense, ExpenseShare, Member
from services.inventory_service import list_equipment
from services.joining_fee_service import list_joining_fees
from services.member_service import adjust_balance
from utils.serializers import expense_to_dict, joining_fee_to_dict

logger = logging.getLogger(__name__)


def public_bills():
    """
    Read-only bill of every regular member: total share, amount paid,
    outstanding amount and a per-expense breakdown (newest first).
    """
    members = Member.query.filter_by(role="member").order_by(Member.name).all()

    agg = defaultdict(lambda: {
        "total_share": 0.0,
        "total_paid": 0.0,
        "paid_count": 0,
        "unpaid_count": 0,
        "breakdown": [],
    })

    for share in ExpenseShare.query.all():
        expense = share.expense
        row = agg[share.member_id]
        row["total_share"] += share.amount
        if share.paid_status:
            row["total_paid"] += share.amount
            row["paid_count"] += 1
        else:
            row["unpaid_count"] += 1

        row["breakdown"].append({
            "expense_id": expense.id if expense else None,
            "description": expense.description if expense else "Expense",
            "category": expense.category if expense else "other",
            "is_inventory": bool(expense and expense.is_inventory),
            "item_name": expense.item_name if expense else None,
            "date": expense.date if expense else None,
            "total_amount": expense.amount if expense else 0,
            "share_amount": share.amount,
            "paid_status": share.paid_status,
        })

    bills = []
    for m in members:
        row = agg[m.id]
        breakdown = sorted(row["breakdown"], key=lambda x: x["date"] or date.min, reverse=True)
        for item in breakdown:
            item["date"] = item["date"].isoformat() if item["date"] else None

        bills.append({
            "member_id": m.id,
            "name": m.name,
            "status": m.status,
            "total_expense_share": row["total_share"],
            "amount_paid": row["total_paid"],
            "outstanding_balance": row["total_share"] - row["total_paid"],
            "paid_expenses": row["paid_count"],
            "unpaid_expenses": row["unpaid_count"],
            "breakdown": breakdown,
        })

    return {
        "updated_at": datetime.now(timezone.utc).isoformat(),
        "members": bills,
        "joining_fees": [joining_fee_to_dict(f) for f in list_joining_fees()],
        "equipment": [expense_to_dict(e) for e in list_equipment()],
        "summary": {
            "total_share": sum(b["total_expense_share"] for b in bills),
            "total_paid": sum(b["amount_paid"] for b in bills),
            "total_outstanding": sum(b["outstanding_balance"] for b in bills),
        },
    }


def cleanup_orphan_shares(dry_run=False):
    """
    Remove shares whose expense no longer exists and take their unpaid
    amounts back off member balances.

    Returns:
        dict with orphan / unpaid / rebalanced member counts
    """
    existing_ids = db.select(Expense.id)
    orphans = ExpenseShare.query.filter(~ExpenseShare.expense_id.in_(existing_ids)).all()

    deltas = defaultdict(float)
    unpaid = [s for s in orphans if not s.paid_status]
    for share in unpaid:
        deltas[share.member_id] -= share.amount

    result = {
        "orphan_shares": len(orphans),
        "unpaid_orphans": len(unpaid),
        "members_rebalanced": len(deltas),
        "dry_run": dry_run,
    }

    if dry_run or not orphans:
        return result

    for member_id, delta in deltas.items():
        member = db.session.get(Member, member_id)
        if member is not None:
            adjust_balance(member, delta)

    for share in orphans:
        db.session.delete(share)

    db.session.commit()
    logger.info("Deleted %d orphan shares", len(orphans))
    return result
