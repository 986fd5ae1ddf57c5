from flask import Blueprint, jsonify, request

from app.services import review_service
from app.utils.auth_utils import token_required

reviews_bp = Blueprint("reviews", __name__, url_prefix="/api/reviews")


@reviews_bp.route("", methods=["GET"])
@token_required("MANAGER")
def list_reviews():
    """
    GET /api/reviews?filter=all|pending|approved
    Purpose: Moderation queue, newest first.
    """
    review_filter = request.args.get("filter", "all")
    if review_filter not in review_service.REVIEW_FILTERS:
        return (
            jsonify(
                {"status": "error", "message": f"Unknown filter '{review_filter}'"}
            ),
            400,
        )
    return jsonify(review_service.fetch_all_reviews(review_filter))


@reviews_bp.route("/barber/<int:barber_id>", methods=["GET"])
def approved_reviews_for_barber(barber_id):
    """
    GET /api/reviews/barber/<barber_id>?limit=5
    Purpose: Public approved reviews for one barber.
    """
    limit = request.args.get("limit", 5, type=int)
    return jsonify(review_service.get_reviews_by_barber(barber_id, limit=limit))


@reviews_bp.route("/<int:review_id>/approve", methods=["PUT"])
@token_required("MANAGER")
def approve_review(review_id):
    """
    PUT /api/reviews/<review_id>/approve
    Purpose: Publish a pending review. Body {"approved": false} is refused
    for a review that is already approved.
    """
    data = request.get_json(silent=True) or {}
    approved = data.get("approved", True)
    if not isinstance(approved, bool):
        return (
            jsonify({"status": "error", "message": "approved must be true or false"}),
            400,
        )

    result = review_service.update_review_approval(review_id, approved)
    if not result["success"]:
        return (
            jsonify({"status": "error", "message": result["error"]}),
            result.get("code", 500),
        )
    return jsonify({"status": "success", "review": result["review"]})


@reviews_bp.route("/<int:review_id>", methods=["DELETE"])
@token_required("MANAGER")
def reject_review(review_id):
    """
    DELETE /api/reviews/<review_id>
    Purpose: Reject a pending review. Rejection deletes it; approved reviews
    are final and give 409.
    """
    result = review_service.delete_review(review_id)
    if not result["success"]:
        return (
            jsonify({"status": "error", "message": result["error"]}),
            result.get("code", 500),
        )
    return jsonify({"status": "success", "message": "Review deleted"})
