from flask import Blueprint, g, jsonify, request

from app.services import payout_service
from app.utils.auth_utils import token_required
from app.utils.dates import default_report_range, parse_date
from app.utils.finance import total_payouts

payouts_bp = Blueprint("payouts", __name__, url_prefix="/api/payouts")


@payouts_bp.route("", methods=["GET"])
@token_required("MANAGER", "BARBER")
def list_payouts():
    """
    GET /api/payouts?start_date&end_date[&barber_id]
    Purpose: Ledger rows in range, newest first, with their net total.
    Barbers only see their own rows.
    """
    default_start, default_end = default_report_range()
    try:
        start = parse_date(request.args.get("start_date")) or default_start
        end = parse_date(request.args.get("end_date")) or default_end
    except ValueError:
        return jsonify({"status": "error", "message": "Invalid date format"}), 400

    barber_id = request.args.get("barber_id", type=int)
    user = g.current_user
    if user.get("role") == "BARBER":
        barber_id = user.get("barber_id")

    payouts = payout_service.get_payouts(start, end, barber_id=barber_id)
    return jsonify(
        {
            "payouts": payouts,
            "total_payouts": float(total_payouts(payouts)),
        }
    )


@payouts_bp.route("", methods=["POST"])
@token_required("MANAGER")
def create_payout():
    """
    POST /api/payouts
    Purpose: Record money paid out of the shop, optionally to a barber.
    Body: {"amount": 100, "reason": "Weekly commission", "barber_id": 3}
    """
    data = request.get_json(silent=True) or {}
    user = g.current_user

    result = payout_service.add_payout(
        data.get("amount"),
        data.get("reason"),
        user_id=user.get("user_id"),
        user_name=user.get("email"),
        barber_id=data.get("barber_id"),
    )
    if not result["success"]:
        return jsonify({"status": "error", "message": result["error"]}), 400
    return jsonify({"status": "success", "payout": result["payout"]}), 201


@payouts_bp.route("/<int:payout_id>/reverse", methods=["POST"])
@token_required("MANAGER")
def reverse_payout(payout_id):
    """
    POST /api/payouts/<payout_id>/reverse
    Purpose: Undo a payout by appending a "REVERSAL of <id>" row.
    The original row is never modified.
    """
    payout = payout_service.get_payout_by_id(payout_id)
    if not payout:
        return jsonify({"error": "Payout not found"}), 404

    user = g.current_user
    result = payout_service.reverse_payout(
        payout, user_id=user.get("user_id"), user_name=user.get("email")
    )
    if not result["success"]:
        return jsonify({"status": "error", "message": result["error"]}), 409
    return jsonify({"status": "success", "payout": result["payout"]}), 201
