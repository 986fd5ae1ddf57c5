"""
Append-only payout ledger.

Rows are never edited or deleted. A reversal is a new row with the same
amount whose reason is "REVERSAL of <id>"; totals subtract reversal rows.
"""
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Payout
from app.utils.dates import parse_date
from app.utils.finance import is_reversal, money, reversal_reason
from app.utils.serializers import serialize_payout


def add_payout(
    amount,
    reason,
    user_id=None,
    user_name=None,
    barber_id=None,
    reversed_payout_id=None,
):
    """Record a payout. Never raises; returns {"success": bool, "error"?: str}."""
    try:
        value = money(amount)
    except (InvalidOperation, TypeError, ValueError):
        return {"success": False, "error": "Amount must be a number"}

    if value <= Decimal("0"):
        return {"success": False, "error": "Amount must be greater than zero"}
    if not reason or not str(reason).strip():
        return {"success": False, "error": "Reason is required"}

    try:
        payout = Payout(
            amount=value,
            reason=str(reason).strip(),
            user_id=user_id,
            user_name=user_name,
            barber_id=barber_id,
            reversed_payout_id=reversed_payout_id,
        )
        db.session.add(payout)
        db.session.commit()
        current_app.logger.info(
            f"Payout {payout.id} recorded: {value} ({payout.reason})"
        )
        return {"success": True, "payout": serialize_payout(payout)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to record payout: {e}")
        return {"success": False, "error": str(e)}


def get_payout_by_id(payout_id):
    try:
        payout = db.session.get(Payout, payout_id)
        return serialize_payout(payout) if payout else None
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch payout {payout_id}: {e}")
        return None


def reverse_payout(payout, user_id=None, user_name=None):
    """
    Append a compensating row for an existing payout. The original row is
    left as it is.
    """
    if is_reversal(payout.get("reason")):
        return {"success": False, "error": "A reversal cannot be reversed"}

    try:
        already_reversed = (
            db.session.query(Payout.id)
            .filter(Payout.reversed_payout_id == payout["id"])
            .first()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to check reversals of payout {payout['id']}: {e}")
        return {"success": False, "error": str(e)}

    if already_reversed:
        return {"success": False, "error": "Payout has already been reversed"}

    return add_payout(
        payout["amount"],
        reversal_reason(payout["id"]),
        user_id=user_id,
        user_name=user_name,
        barber_id=payout.get("barber_id"),
        reversed_payout_id=payout["id"],
    )


def get_payouts(start_date, end_date, barber_id=None):
    """Payouts created from start_date 00:00 to end_date 23:59:59, newest first."""
    try:
        start = datetime.combine(parse_date(start_date), time.min)
        end = datetime.combine(parse_date(end_date), time(23, 59, 59))

        query = db.session.query(Payout).filter(
            Payout.created_at >= start, Payout.created_at <= end
        )
        if barber_id is not None:
            query = query.filter(Payout.barber_id == barber_id)

        payouts = query.order_by(Payout.created_at.desc(), Payout.id.desc()).all()
        return [serialize_payout(p) for p in payouts]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch payouts: {e}")
        return []
