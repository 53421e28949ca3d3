from models import db, Booking


class BookingNotFoundError(Exception):
    """Raised when a booking is not found"""
    pass


class InvalidBookingDataError(Exception):
    """Raised when booking data is invalid"""
    pass


class BookingPermissionError(Exception):
    """Raised when a member touches someone else's booking"""
    pass


ACTIVE_STATUSES = ("booked", "pending")


def list_bookings(on_date=None, start_date=None, end_date=None, booked_by=None):
    query = Booking.query

    if on_date:
        query = query.filter(Booking.date == on_date)
    elif start_date and end_date:
        query = query.filter(Booking.date >= start_date, Booking.date <= end_date)

    if booked_by is not None:
        query = query.filter_by(booked_by=booked_by)

    return query.order_by(Booking.date.asc(), Booking.time.asc()).all()


def get_booking(booking_id, member=None, is_admin=False):
    """
    Fetch a booking. Non-admins may only access bookings they made.
    """
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise BookingNotFoundError(f"Booking {booking_id} not found")

    if not is_admin and (member is None or booking.booked_by != member.id):
        raise BookingPermissionError("Forbidden")
    return booking


def _slot_taken(booking_date, time, court, exclude_id=None):
    query = Booking.query.filter(
        Booking.date == booking_date,
        Booking.time == time,
        Booking.court == court,
        Booking.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id is not None:
        query = query.filter(Booking.id != exclude_id)
    return query.first() is not None


def create_booking(member, booking_date, time, court, status=None, players=None):
    if _slot_taken(booking_date, time, court):
        raise InvalidBookingDataError("This time slot is already booked")

    booking = Booking(
        date=booking_date,
        time=time,
        court=court,
        status=status or "booked",
        booked_by=member.id,
        players=players or 0,
    )
    db.session.add(booking)
    db.session.commit()
    return booking


def update_booking(booking_id, member=None, is_admin=False, **fields):
    booking = get_booking(booking_id, member=member, is_admin=is_admin)

    for key in ("date", "time", "court", "status", "players"):
        if fields.get(key) is not None:
            setattr(booking, key, fields[key])

    if booking.status in ACTIVE_STATUSES and _slot_taken(
        booking.date, booking.time, booking.court, exclude_id=booking.id
    ):
        raise InvalidBookingDataError("This time slot is already booked")

    if booking.status != "available" and booking.booked_by is None:
        raise InvalidBookingDataError("Booked by member is required")

    db.session.commit()
    return booking


def delete_booking(booking_id, member=None, is_admin=False):
    booking = get_booking(booking_id, member=member, is_admin=is_admin)
    db.session.delete(booking)
    db.session.commit()
