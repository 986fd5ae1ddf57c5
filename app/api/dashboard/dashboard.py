from flask import Blueprint, jsonify

from app.services.dashboard_service import get_dashboard_stats
from app.utils.auth_utils import token_required

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("/stats", methods=["GET"])
@token_required("MANAGER")
def dashboard_stats():
    """
    GET /api/dashboard/stats
    Purpose: Manager overview for today and this week, plus 30-day charts.
    """
    stats = get_dashboard_stats()
    if stats is None:
        return jsonify({"status": "error", "message": "Failed to load dashboard"}), 500
    return jsonify(stats)
