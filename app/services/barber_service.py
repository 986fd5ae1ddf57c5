from datetime import date, timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Appointment, AuthUser, Barber
from app.services.review_service import barber_rating, get_reviews_by_barber
from app.utils.auth_utils import hash_password
from app.utils.dates import parse_date, time_slots
from app.utils.finance import money
from app.utils.serializers import serialize_barber

DEFAULT_COMMISSION_RATE = 60

BARBER_FIELDS = (
    "name",
    "email",
    "phone",
    "age",
    "specialty",
    "bio",
    "photo_url",
    "commission_rate",
    "active",
)


def get_all_barbers(active_only=False):
    try:
        query = db.session.query(Barber)
        if active_only:
            query = query.filter(Barber.active.is_(True))
        return [serialize_barber(b) for b in query.order_by(Barber.name).all()]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch barbers: {e}")
        return []


def get_barber_by_id(barber_id):
    """Barber record plus approved reviews and their average rating."""
    try:
        barber = db.session.get(Barber, barber_id)
        if not barber:
            return None

        data = serialize_barber(barber)
        data["rating"] = barber_rating(barber_id)
        data["reviews"] = get_reviews_by_barber(barber_id, limit=50)
        return data
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch barber {barber_id}: {e}")
        return None


def create_barber(data):
    """
    Insert a barber. When a password is supplied an auth account with role
    BARBER is provisioned; only the bcrypt hash is stored.
    """
    try:
        password = data.get("password")
        user_id = None

        if password:
            existing = db.session.scalar(
                select(AuthUser).where(AuthUser.email == data.get("email"))
            )
            if existing:
                return {"success": False, "error": "Email already registered"}

            auth_user = AuthUser(
                email=data.get("email"),
                password_hash=hash_password(password),
                role="BARBER",
            )
            db.session.add(auth_user)
            db.session.flush()
            user_id = auth_user.id

        commission_rate = data.get("commission_rate")
        barber = Barber(
            user_id=user_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
            age=data.get("age"),
            specialty=data.get("specialty"),
            bio=data.get("bio"),
            photo_url=data.get("photo_url"),
            join_date=parse_date(data.get("join_date")) or date.today(),
            commission_rate=(
                commission_rate
                if commission_rate is not None
                else DEFAULT_COMMISSION_RATE
            ),
            active=data.get("active", True),
            total_cuts=0,
            appointment_cuts=0,
            walk_in_cuts=0,
            total_commission=0,
        )
        db.session.add(barber)
        db.session.commit()
        current_app.logger.info(f"Barber {barber.id} created")
        return {"success": True, "barber": serialize_barber(barber)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create barber: {e}")
        return {"success": False, "error": str(e)}


def update_barber(barber_id, updates):
    try:
        barber = db.session.get(Barber, barber_id)
        if not barber:
            return {"success": False, "error": "Barber not found", "code": 404}

        for field in BARBER_FIELDS:
            if field in updates:
                setattr(barber, field, updates[field])
        if "join_date" in updates:
            barber.join_date = parse_date(updates["join_date"]) or barber.join_date

        password = updates.get("password")
        if password:
            if barber.user:
                barber.user.password_hash = hash_password(password)
            else:
                auth_user = AuthUser(
                    email=barber.email,
                    password_hash=hash_password(password),
                    role="BARBER",
                )
                db.session.add(auth_user)
                db.session.flush()
                barber.user_id = auth_user.id

        db.session.commit()
        return {"success": True, "barber": serialize_barber(barber)}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update barber {barber_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def delete_barber(barber_id):
    """Soft delete: the barber is deactivated, history is kept."""
    try:
        barber = db.session.get(Barber, barber_id)
        if not barber:
            return {"success": False, "error": "Barber not found", "code": 404}

        barber.active = False
        db.session.commit()
        current_app.logger.info(f"Barber {barber_id} deactivated")
        return {"success": True}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to deactivate barber {barber_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}


def refresh_barber_counters(barber):
    """Recompute the cut counters and commission total from completed appointments."""
    rows = (
        db.session.query(
            Appointment.type,
            func.count(Appointment.id),
            func.coalesce(func.sum(Appointment.commission_amount), 0),
        )
        .filter(Appointment.barber_id == barber.id, Appointment.status == "completed")
        .group_by(Appointment.type)
        .all()
    )

    appointment_cuts = 0
    walk_in_cuts = 0
    commission = Decimal("0")
    for appointment_type, count, commission_sum in rows:
        if appointment_type == "walk-in":
            walk_in_cuts = count
        else:
            appointment_cuts += count
        commission += Decimal(str(commission_sum))

    barber.appointment_cuts = appointment_cuts
    barber.walk_in_cuts = walk_in_cuts
    barber.total_cuts = appointment_cuts + walk_in_cuts
    barber.total_commission = money(commission)
    db.session.commit()


def _month_starts(today, count):
    starts = []
    year, month = today.year, today.month
    for _ in range(count):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(starts))


def get_barber_stats(barber_id, today=None):
    """
    Counters, the last 7 days and the last 6 months of cuts and commission.
    Series count completed and scheduled appointments.
    """
    today = today or date.today()
    try:
        barber = db.session.get(Barber, barber_id)
        if not barber:
            return None

        refresh_barber_counters(barber)

        months = _month_starts(today, 6)
        appointments = (
            db.session.query(Appointment)
            .filter(
                Appointment.barber_id == barber_id,
                Appointment.date >= months[0],
                Appointment.date <= today,
                Appointment.status.in_(["completed", "scheduled"]),
            )
            .all()
        )

        daily = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            rows = [a for a in appointments if a.date == day]
            daily.append(
                {
                    "date": day.isoformat(),
                    "cuts": len(rows),
                    "commission": float(
                        money(sum((a.commission_amount or 0 for a in rows), Decimal("0")))
                    ),
                }
            )

        monthly = []
        for start in months:
            rows = [
                a
                for a in appointments
                if a.date.year == start.year and a.date.month == start.month
            ]
            monthly.append(
                {
                    "month": start.strftime("%b"),
                    "year": start.year,
                    "cuts": len(rows),
                    "commission": float(
                        money(sum((a.commission_amount or 0 for a in rows), Decimal("0")))
                    ),
                }
            )

        total_cuts = barber.total_cuts or 0
        appointment_pct = (
            round(barber.appointment_cuts / total_cuts * 100) if total_cuts else 0
        )
        walk_in_pct = round(barber.walk_in_cuts / total_cuts * 100) if total_cuts else 0

        return {
            "barber_id": barber.id,
            "total_cuts": total_cuts,
            "appointment_cuts": barber.appointment_cuts,
            "walk_in_cuts": barber.walk_in_cuts,
            "total_commission": float(barber.total_commission or 0),
            "appointments_percentage": appointment_pct,
            "walk_ins_percentage": walk_in_pct,
            "daily_stats": daily,
            "monthly_stats": monthly,
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to compute stats for barber {barber_id}: {e}")
        return None


def get_barbers_for_landing_page(review_limit=3):
    """Active barbers with their rating and a few approved reviews."""
    try:
        barbers = (
            db.session.query(Barber)
            .filter(Barber.active.is_(True))
            .order_by(Barber.name)
            .all()
        )
        results = []
        for barber in barbers:
            data = serialize_barber(barber)
            data["rating"] = barber_rating(barber.id)
            data["reviews"] = get_reviews_by_barber(barber.id, limit=review_limit)
            results.append(data)
        return results
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch landing page barbers: {e}")
        return []


def get_barber_availability(barber_id, day):
    """Free half-hour slots: the daily grid minus times already scheduled."""
    try:
        booked = {
            row[0]
            for row in db.session.query(Appointment.time)
            .filter(
                Appointment.barber_id == barber_id,
                Appointment.date == day,
                Appointment.status == "scheduled",
            )
            .all()
        }
        return [slot for slot in time_slots() if slot not in booked]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(
            f"Failed to fetch availability for barber {barber_id} on {day}: {e}"
        )
        return []

