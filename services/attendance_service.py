from models import db, Attendance
from services.member_service import get_member_by_id


def list_attendance(on_date=None, start_date=None, end_date=None, member_id=None):
    query = Attendance.query

    if on_date:
        query = query.filter(Attendance.date == on_date)
    elif start_date and end_date:
        query = query.filter(Attendance.date >= start_date, Attendance.date <= end_date)

    if member_id is not None:
        query = query.filter_by(member_id=member_id)

    return query.order_by(Attendance.date.desc(), Attendance.id.asc()).all()


def refresh_attendance_rate(member):
    """Present days over recorded days, as a percentage."""
    total = Attendance.query.filter_by(member_id=member.id).count()
    present = Attendance.query.filter_by(member_id=member.id, is_present=True).count()
    member.attendance_rate = (present / total) * 100 if total else 0.0
    return member.attendance_rate


def _upsert(attendance_date, member_id, is_present):
    member = get_member_by_id(member_id)

    record = Attendance.query.filter_by(date=attendance_date, member_id=member.id).first()
    if record is None:
        record = Attendance(date=attendance_date, member_id=member.id)
        db.session.add(record)
    record.is_present = is_present

    db.session.flush()
    refresh_attendance_rate(member)
    return record


def mark_attendance(attendance_date, member_id, is_present):
    """
    Create or update the single row for (date, member).

    Raises:
        MemberNotFoundError: If the member doesn't exist
    """
    record = _upsert(attendance_date, member_id, is_present)
    db.session.commit()
    return record


def mark_attendance_bulk(entries):
    """
    ``entries`` is a list of (date, member_id, is_present). All rows are
    written in one commit.
    """
    records = [_upsert(d, member_id, present) for d, member_id, present in entries]
    db.session.commit()
    return records
