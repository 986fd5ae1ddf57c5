# Review moderation: pending -> approved, or pending -> deleted (reject)
from decimal import Decimal, ROUND_HALF_UP

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Barber, Review
from app.utils.serializers import serialize_review

REVIEW_FILTERS = ("all", "pending", "approved")


def get_reviews_by_barber(barber_id, limit=5):
    """Approved reviews for one barber, newest first."""
    try:
        reviews = (
            db.session.query(Review)
            .filter(Review.barber_id == barber_id, Review.approved.is_(True))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
            .all()
        )
        return [serialize_review(r) for r in reviews]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch reviews for barber {barber_id}: {e}")
        return []


def fetch_all_reviews(review_filter="all"):
    try:
        query = db.session.query(Review)
        if review_filter == "pending":
            query = query.filter(Review.approved.is_(False))
        elif review_filter == "approved":
            query = query.filter(Review.approved.is_(True))

        reviews = query.order_by(Review.created_at.desc(), Review.id.desc()).all()
        return [serialize_review(r) for r in reviews]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch reviews: {e}")
        return []


def barber_rating(barber_id):
    """Average of approved ratings rounded to one decimal, 0 when there are none."""
    average = (
        db.session.query(func.avg(Review.rating))
        .filter(Review.barber_id == barber_id, Review.approved.is_(True))
        .scalar()
    )
    if average is None:
        return 0.0
    return float(
        Decimal(str(average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    )


def update_review_approval(review_id, approved):
    """
    Approve a pending review. Approving twice is a no-op; an approved
    review cannot be moved back to pending.
    """
    try:
        review = db.session.get(Review, review_id)
        if not review:
            return {"success": False, "error": "Review not found", "code": 404}

        if review.approved and not approved:
            return {
                "success": False,
                "error": "Approved reviews cannot be moved back to pending",
                "code": 409,
            }

        if approved and not review.approved:
            review.approved = True
            db.session.flush()
            barber = db.session.get(Barber, review.barber_id)
            if barber:
                barber.rating = barber_rating(barber.id)
            db.session.commit()
            current_app.logger.info(f"Review {review_id} approved")

        return {"success": True, "review": serialize_review(review)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update review {review_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def delete_review(review_id):
    """Reject a pending review. Approved reviews are final and cannot be deleted."""
    try:
        review = db.session.get(Review, review_id)
        if not review:
            return {"success": False, "error": "Review not found", "code": 404}

        if review.approved:
            return {
                "success": False,
                "error": "Approved reviews cannot be rejected",
                "code": 409,
            }

        db.session.delete(review)
        db.session.commit()
        current_app.logger.info(f"Review {review_id} rejected")
        return {"success": True}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete review {review_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}
