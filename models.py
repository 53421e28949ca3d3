# models.py
from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, date, timezone


db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default="member", nullable=False)
    refresh_token = db.Column(db.String(512), nullable=True)
    must_change_password = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class Member(db.Model):
    __tablename__ = "members"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    role = db.Column(db.String(20), default="member", nullable=False)
    status = db.Column(db.String(20), default="active", nullable=False)
    join_date = db.Column(db.Date, default=date.today)
    balance = db.Column(db.Float, default=0.0, nullable=False)
    attendance_rate = db.Column(db.Float, default=0.0, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship("User", backref=db.backref("member", uselist=False))


expense_members = db.Table(
    "expense_members",
    db.Column("expense_id", db.Integer, db.ForeignKey("expenses.id"), primary_key=True),
    db.Column("member_id", db.Integer, db.ForeignKey("members.id"), primary_key=True),
)


class Expense(db.Model):
    __tablename__ = "expenses"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, default=date.today)
    category = db.Column(db.String(20), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    paid_by = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False)
    present_members = db.Column(db.Integer, nullable=False)
    per_member_share = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(20), default="pending", nullable=False)

    # Court cost breakdown
    court_booking_cost = db.Column(db.Float, nullable=True)
    per_shuttle_cost = db.Column(db.Float, nullable=True)
    shuttles_used = db.Column(db.Integer, nullable=True)
    reduce_from_stock = db.Column(db.Boolean, default=False, nullable=False)
    stock_consumed = db.Column(db.Integer, default=0, nullable=False)

    # Inventory overlay
    is_inventory = db.Column(db.Boolean, default=False, nullable=False)
    item_name = db.Column(db.String(100), nullable=True)
    quantity_purchased = db.Column(db.Integer, nullable=True)
    quantity_used = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    payer = db.relationship("Member", foreign_keys=[paid_by])
    selected_members = db.relationship(
        "Member", secondary=expense_members, order_by="Member.id"
    )


class ExpenseShare(db.Model):
    __tablename__ = "expense_shares"
    __table_args__ = (
        db.UniqueConstraint("expense_id", "member_id", name="uq_expense_share_member"),
    )

    id = db.Column(db.Integer, primary_key=True)
    expense_id = db.Column(db.Integer, db.ForeignKey("expenses.id"), nullable=False, index=True)
    member_id = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False, index=True)
    amount = db.Column(db.Float, nullable=False)
    paid_status = db.Column(db.Boolean, default=False, nullable=False)
    paid_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    expense = db.relationship(
        "Expense", backref=db.backref("shares", cascade="all, delete-orphan")
    )
    member = db.relationship("Member", backref="shares")


class Booking(db.Model):
    __tablename__ = "bookings"
    __table_args__ = (
        db.Index("ix_booking_slot", "date", "time", "court"),
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(20), nullable=False)
    court = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(20), default="available", nullable=False)
    booked_by = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=True)
    players = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    booker = db.relationship("Member", foreign_keys=[booked_by])


class Attendance(db.Model):
    __tablename__ = "attendance"
    __table_args__ = (
        db.UniqueConstraint("date", "member_id", name="uq_attendance_date_member"),
    )

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False)
    member_id = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False)
    is_present = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    member = db.relationship("Member")


class JoiningFee(db.Model):
    __tablename__ = "joining_fees"

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False, index=True)
    received_by = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today)
    note = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    member = db.relationship("Member", foreign_keys=[member_id])
    receiver = db.relationship("Member", foreign_keys=[received_by])


class Notification(db.Model):
    __tablename__ = "notifications"
    __table_args__ = (
        db.Index("ix_notification_user_read", "user_id", "read"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    member_id = db.Column(db.Integer, db.ForeignKey("members.id"), nullable=True)
    type = db.Column(db.String(40), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    data = db.Column(db.JSON, nullable=True)
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    member = db.relationship("Member")
