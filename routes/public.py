from flask import Blueprint, jsonify
from services.ledger_service import public_bills

public_bp = Blueprint("public", __name__, url_prefix="/api/public")


@public_bp.route("/bills", methods=["GET"])
def api_public_bills():
    return jsonify(public_bills())
