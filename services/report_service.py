from collections import defaultdict
from datetime import date

from models import Expense, Attendance, Booking, Member
from utils.serializers import expense_to_dict, booking_to_dict


class InvalidReportError(Exception):
    """Raised when a report type or period is invalid"""
    pass


def _expenses_between(start, end):
    return (
        Expense.query
        .filter(Expense.date >= start, Expense.date <= end)
        .order_by(Expense.date.asc(), Expense.id.asc())
        .all()
    )


def financial_report(start, end):
    expenses = _expenses_between(start, end)

    by_category = defaultdict(float)
    for e in expenses:
        by_category[e.category] += e.amount

    return {
        "total_expenses": sum(e.amount for e in expenses),
        "total_shares": sum(e.per_member_share * e.present_members for e in expenses),
        "expense_count": len(expenses),
        "by_category": dict(by_category),
        "expenses": [expense_to_dict(e) for e in expenses],
    }


def attendance_report(start, end):
    records = (
        Attendance.query
        .filter(Attendance.date >= start, Attendance.date <= end)
        .all()
    )
    members = Member.query.filter_by(status="active").order_by(Member.name).all()

    recorded = defaultdict(int)
    present = defaultdict(int)
    for r in records:
        recorded[r.member_id] += 1
        if r.is_present:
            present[r.member_id] += 1

    by_member = []
    for m in members:
        total = recorded[m.id]
        by_member.append({
            "member_id": m.id,
            "member_name": m.name,
            "present_days": present[m.id],
            "total_days": total,
            "attendance_rate": (present[m.id] / total) * 100 if total else 0,
        })

    return {
        "total_days": (end - start).days + 1,
        "total_present": len([r for r in records if r.is_present]),
        "total_absent": len([r for r in records if not r.is_present]),
        "by_member": by_member,
    }


def booking_report(start, end):
    bookings = (
        Booking.query
        .filter(Booking.date >= start, Booking.date <= end)
        .order_by(Booking.date.asc(), Booking.time.asc())
        .all()
    )

    by_court = defaultdict(int)
    by_status = defaultdict(int)
    for b in bookings:
        by_court[b.court] += 1
        by_status[b.status] += 1

    return {
        "total_bookings": len(bookings),
        "by_court": dict(by_court),
        "by_status": dict(by_status),
        "bookings": [booking_to_dict(b) for b in bookings],
    }


def expense_report(start, end):
    expenses = _expenses_between(start, end)

    by_category = defaultdict(float)
    by_status = defaultdict(float)
    for e in expenses:
        by_category[e.category] += e.amount
        by_status[e.status] += e.amount

    return {
        "expenses": [expense_to_dict(e) for e in expenses],
        "summary": {
            "total": sum(e.amount for e in expenses),
            "by_category": dict(by_category),
            "by_status": dict(by_status),
        },
    }


REPORTS = {
    "financial": financial_report,
    "attendance": attendance_report,
    "booking": booking_report,
    "expense": expense_report,
}


def generate_report(report_type, start, end):
    """
    Build a report for the inclusive period [start, end]. Nothing is stored.
    """
    if report_type not in REPORTS:
        raise InvalidReportError(f"Unknown report type: {report_type}")
    if start > end:
        raise InvalidReportError("Period start must be before its end")

    return {
        "type": report_type,
        "title": f"{report_type.capitalize()} Report - {start.isoformat()} to {end.isoformat()}",
        "period": {"start": start.isoformat(), "end": end.isoformat()},
        "data": REPORTS[report_type](start, end),
    }


def dashboard_summary(today=None):
    today = today or date.today()
    members = Member.query.all()

    return {
        "active_members": len([m for m in members if m.status == "active"]),
        "total_outstanding": round(sum(m.balance for m in members if m.balance > 0), 2),
        "pending_expenses": Expense.query.filter_by(status="pending").count(),
        "upcoming_bookings": (
            Booking.query
            .filter(Booking.date >= today, Booking.status.in_(("booked", "pending")))
            .count()
        ),
    }
