from flask import Blueprint, request, jsonify, g
from schemas import AttendanceSchema
from services.attendance_service import (
    list_attendance,
    mark_attendance,
    mark_attendance_bulk,
)
from services.member_service import MemberNotFoundError
from utils.decorators import login_required
from utils.helpers import current_member, is_admin, parse_date
from utils.serializers import attendance_to_dict

attendance_bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")


@attendance_bp.route("", methods=["GET"])
@login_required
def api_list_attendance():
    try:
        on_date = parse_date(request.args.get("date"))
        start_date = parse_date(request.args.get("start_date") or request.args.get("startDate"))
        end_date = parse_date(request.args.get("end_date") or request.args.get("endDate"))
    except ValueError:
        return jsonify({"error": "Invalid date"}), 400

    if is_admin(g.current_user):
        member_id = request.args.get("member_id", type=int) or request.args.get("memberId", type=int)
    else:
        # Members only see their own attendance
        member = current_member()
        if member is None:
            return jsonify([])
        member_id = member.id

    records = list_attendance(
        on_date=on_date, start_date=start_date, end_date=end_date, member_id=member_id
    )
    return jsonify([attendance_to_dict(r) for r in records])


@attendance_bp.route("/date/<date_str>", methods=["GET"])
@login_required
def api_attendance_by_date(date_str):
    try:
        on_date = parse_date(date_str)
    except ValueError:
        return jsonify({"error": "Invalid date"}), 400

    return jsonify([attendance_to_dict(r) for r in list_attendance(on_date=on_date)])


@attendance_bp.route("", methods=["POST"])
@login_required
def api_mark_attendance():
    payload = request.get_json(silent=True)

    if isinstance(payload, list):
        if not is_admin(g.current_user):
            return jsonify({"error": "Forbidden: Only admins can bulk update attendance"}), 403

        items = [AttendanceSchema.model_validate(item) for item in payload]
        if any(item.member_id is None for item in items):
            return jsonify({"error": "Member ID is required"}), 400

        try:
            records = mark_attendance_bulk(
                [(item.date, item.member_id, item.is_present) for item in items]
            )
        except MemberNotFoundError:
            return jsonify({"error": "Member not found"}), 404
        return jsonify([attendance_to_dict(r) for r in records]), 201

    data = AttendanceSchema.model_validate(payload or {})

    # Members can only mark their own attendance
    if is_admin(g.current_user):
        if data.member_id is None:
            return jsonify({"error": "Member ID is required"}), 400
        member_id = data.member_id
    else:
        member = current_member()
        if member is None:
            return jsonify({"error": "Member not found"}), 404
        member_id = member.id

    try:
        record = mark_attendance(data.date, member_id, data.is_present)
    except MemberNotFoundError:
        return jsonify({"error": "Member not found"}), 404
    return jsonify(attendance_to_dict(record)), 201
