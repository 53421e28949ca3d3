"""
Member Service - club roster management

Rules:
- No Flask (request, session, redirect, flash)
- Can raise exceptions
"""
import logging

from models import (
    db, Member, Expense, ExpenseShare, Booking, Attendance, JoiningFee, Notification,
    expense_members,
)
from services.auth_service import create_user

logger = logging.getLogger(__name__)


class MemberNotFoundError(Exception):
    """Raised when a member is not found"""
    pass


class InvalidMemberDataError(Exception):
    """Raised when member data is invalid"""
    pass


class MemberPermissionError(Exception):
    """Raised when an operation is not allowed on this member"""
    pass


def get_member_by_id(member_id):
    member = db.session.get(Member, member_id)
    if not member:
        raise MemberNotFoundError(f"Member {member_id} not found")
    return member


def list_members():
    return Member.query.order_by(Member.created_at.desc(), Member.id.desc()).all()


def get_members_by_ids(member_ids):
    """
    Load members for a list of ids, keeping the given order and dropping
    duplicates.

    Raises:
        InvalidMemberDataError: If any id is unknown
    """
    unique_ids = list(dict.fromkeys(int(mid) for mid in member_ids))
    members = Member.query.filter(Member.id.in_(unique_ids)).all()
    by_id = {m.id: m for m in members}

    missing = [mid for mid in unique_ids if mid not in by_id]
    if missing:
        raise InvalidMemberDataError(f"Unknown member ids: {missing}")

    return [by_id[mid] for mid in unique_ids]


def _email_taken(email, exclude_id=None):
    query = Member.query.filter_by(email=email)
    if exclude_id is not None:
        query = query.filter(Member.id != exclude_id)
    return query.first() is not None


def create_member(name, email=None, phone=None, status=None, password=None):
    """
    Create a member. When a password is given a ``member`` login is
    provisioned for the email as well.
    """
    if email and _email_taken(email):
        raise InvalidMemberDataError("Member already exists with this email")

    if password and not email:
        raise InvalidMemberDataError("Email is required to create a login")

    member = Member(
        name=name,
        email=email,
        phone=phone,
        role="member",
        status=status or "active",
    )
    db.session.add(member)

    if password:
        try:
            member.user = create_user(email, password, role="member")
        except ValueError as e:
            db.session.rollback()
            raise InvalidMemberDataError(str(e))

    db.session.commit()
    logger.info("Member %s created", member.id)
    return member


def update_member(member_id, **fields):
    member = get_member_by_id(member_id)

    email = fields.get("email")
    if email and _email_taken(email, exclude_id=member.id):
        raise InvalidMemberDataError("Member already exists with this email")

    for key in ("name", "email", "phone", "status"):
        if key in fields and fields[key] is not None:
            setattr(member, key, fields[key])

    db.session.commit()
    return member


def delete_member(member_id):
    """
    Delete a member with their shares, attendance and advance payments.
    Their bookings stay on the calendar without an owner. The admin profile
    cannot be deleted, and neither can a member who paid an expense or
    received an advance, since those records must keep their payer.

    Raises:
        MemberNotFoundError: If member doesn't exist
        MemberPermissionError: If the member is the admin
        InvalidMemberDataError: If expenses or advances still reference them
    """
    member = get_member_by_id(member_id)

    if member.role == "admin":
        raise MemberPermissionError("Admin member cannot be deleted")

    if Expense.query.filter_by(paid_by=member.id).first() is not None:
        raise InvalidMemberDataError(
            "Member paid for existing expenses; reassign or delete them first"
        )
    if JoiningFee.query.filter_by(received_by=member.id).first() is not None:
        raise InvalidMemberDataError(
            "Member received advance payments; delete them first"
        )

    Booking.query.filter_by(booked_by=member.id).update({"booked_by": None})
    ExpenseShare.query.filter_by(member_id=member.id).delete()
    Attendance.query.filter_by(member_id=member.id).delete()
    JoiningFee.query.filter_by(member_id=member.id).delete()
    Notification.query.filter_by(member_id=member.id).update({"member_id": None})
    db.session.execute(
        expense_members.delete().where(expense_members.c.member_id == member.id)
    )

    if member.user is not None:
        Notification.query.filter_by(user_id=member.user.id).delete()
        db.session.delete(member.user)
    db.session.delete(member)
    db.session.commit()
    logger.info("Member %s deleted", member_id)


def adjust_balance(member, delta):
    """
    Apply a signed balance change to one member. Each call is its own row
    update; callers commit.
    """
    member.balance = (member.balance or 0) + delta
    return member
