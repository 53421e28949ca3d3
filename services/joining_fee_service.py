"""
Advance (joining fee) payments.

An advance is credited against the member's running balance when recorded
and debited back when the record is deleted.
"""
import logging

from models import db, JoiningFee
from services.member_service import get_member_by_id, adjust_balance

logger = logging.getLogger(__name__)


class JoiningFeeNotFoundError(Exception):
    """Raised when an advance payment record is not found"""
    pass


def list_joining_fees():
    return JoiningFee.query.order_by(JoiningFee.date.desc(), JoiningFee.id.desc()).all()


def create_joining_fee(member_id, received_by, amount, fee_date, note=None):
    member = get_member_by_id(member_id)

    fee = JoiningFee(
        member_id=member.id,
        received_by=received_by.id,
        amount=float(amount),
        date=fee_date,
        note=note.strip() if note else None,
    )
    db.session.add(fee)
    adjust_balance(member, -fee.amount)

    db.session.commit()
    logger.info("Advance of %.2f recorded for member %s", fee.amount, member.id)
    return fee


def delete_joining_fee(fee_id):
    fee = db.session.get(JoiningFee, fee_id)
    if not fee:
        raise JoiningFeeNotFoundError("Advance not found")

    if fee.member is not None:
        adjust_balance(fee.member, fee.amount)

    db.session.delete(fee)
    db.session.commit()
    logger.info("Advance %s deleted", fee_id)
