from flask import Blueprint, request, jsonify, g
from schemas import BookingCreate, BookingUpdate
from services.booking_service import (
    list_bookings,
    get_booking,
    create_booking,
    update_booking,
    delete_booking,
    BookingNotFoundError,
    InvalidBookingDataError,
    BookingPermissionError,
)
from utils.decorators import login_required
from utils.helpers import current_member, is_admin, parse_date
from utils.serializers import booking_to_dict

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bookings_bp.route("", methods=["GET"])
@login_required
def api_list_bookings():
    try:
        on_date = parse_date(request.args.get("date"))
        start_date = parse_date(request.args.get("start_date") or request.args.get("startDate"))
        end_date = parse_date(request.args.get("end_date") or request.args.get("endDate"))
    except ValueError:
        return jsonify({"error": "Invalid date"}), 400

    booked_by = None
    # Members only see their own bookings
    if not is_admin(g.current_user):
        member = current_member()
        if member is None:
            return jsonify([])
        booked_by = member.id

    bookings = list_bookings(
        on_date=on_date, start_date=start_date, end_date=end_date, booked_by=booked_by
    )
    return jsonify([booking_to_dict(b) for b in bookings])


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
@login_required
def api_get_booking(booking_id):
    try:
        booking = get_booking(
            booking_id, member=current_member(), is_admin=is_admin(g.current_user)
        )
        return jsonify(booking_to_dict(booking))
    except BookingNotFoundError:
        return jsonify({"error": "Booking not found"}), 404
    except BookingPermissionError as e:
        return jsonify({"error": str(e)}), 403


@bookings_bp.route("", methods=["POST"])
@login_required
def api_create_booking():
    data = BookingCreate.model_validate(request.get_json(silent=True) or {})

    member = current_member()
    if member is None:
        return jsonify({"error": "Member profile not found"}), 404

    try:
        booking = create_booking(
            member,
            booking_date=data.date,
            time=data.time,
            court=data.court,
            status=data.status,
            players=data.players,
        )
        return jsonify(booking_to_dict(booking)), 201
    except InvalidBookingDataError as e:
        return jsonify({"error": str(e)}), 400


@bookings_bp.route("/<int:booking_id>", methods=["PUT"])
@login_required
def api_update_booking(booking_id):
    data = BookingUpdate.model_validate(request.get_json(silent=True) or {})
    try:
        booking = update_booking(
            booking_id,
            member=current_member(),
            is_admin=is_admin(g.current_user),
            **data.model_dump(exclude_unset=True),
        )
        return jsonify(booking_to_dict(booking))
    except BookingNotFoundError:
        return jsonify({"error": "Booking not found"}), 404
    except BookingPermissionError as e:
        return jsonify({"error": str(e)}), 403
    except InvalidBookingDataError as e:
        return jsonify({"error": str(e)}), 400


@bookings_bp.route("/<int:booking_id>", methods=["DELETE"])
@login_required
def api_delete_booking(booking_id):
    try:
        delete_booking(
            booking_id, member=current_member(), is_admin=is_admin(g.current_user)
        )
        return jsonify({"message": "Booking deleted successfully"})
    except BookingNotFoundError:
        return jsonify({"error": "Booking not found"}), 404
    except BookingPermissionError as e:
        return jsonify({"error": str(e)}), 403
