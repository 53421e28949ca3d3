from flask import Blueprint, request, jsonify
from schemas import ReportRequest
from services.report_service import generate_report, dashboard_summary, InvalidReportError
from utils.decorators import admin_only, login_required

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.route("/generate", methods=["POST"])
@admin_only
def api_generate_report():
    data = ReportRequest.model_validate(request.get_json(silent=True) or {})
    try:
        report = generate_report(data.type, data.period.start, data.period.end)
    except InvalidReportError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(report), 201


@reports_bp.route("/summary", methods=["GET"])
@login_required
def api_summary():
    return jsonify(dashboard_summary())
