"""
Financial entries derived from appointments.

The shop-wide query applies no status filter unless the caller passes one,
so cancelled and scheduled rows count toward shop totals by default. The
barber-scoped query only returns completed appointments (case-insensitive).
"""
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from app.extensions import db
from app.models import Appointment
from app.utils.dates import parse_date
from app.utils.finance import money, shop_revenue
from app.utils.serializers import iso


def to_financial_entry(appointment):
    price = money(appointment.price)
    commission = money(appointment.commission_amount)
    return {
        "id": appointment.id,
        "date": iso(appointment.date),
        "service_name": (
            appointment.service.name if appointment.service else "Unknown Service"
        ),
        "barber_name": (
            appointment.barber.name if appointment.barber else "Unknown Barber"
        ),
        "status": appointment.status,
        "total_revenue": float(price),
        "barber_commission": float(commission),
        "shop_revenue": float(shop_revenue(price, commission)),
    }


def _base_query(start_date, end_date):
    return (
        db.session.query(Appointment)
        .options(joinedload(Appointment.service), joinedload(Appointment.barber))
        .filter(
            Appointment.date >= parse_date(start_date),
            Appointment.date <= parse_date(end_date),
        )
    )


def get_financial_data(start_date, end_date, status=None):
    try:
        query = _base_query(start_date, end_date)
        if status:
            query = query.filter(func.lower(Appointment.status) == status.lower())
        rows = query.order_by(Appointment.date.desc(), Appointment.time.desc()).all()
        return [to_financial_entry(a) for a in rows]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch financial data: {e}")
        return []


def get_barber_financial_data(start_date, end_date, barber_id):
    try:
        rows = (
            _base_query(start_date, end_date)
            .filter(
                Appointment.barber_id == barber_id,
                func.lower(Appointment.status) == "completed",
            )
            .order_by(Appointment.date.desc(), Appointment.time.desc())
            .all()
        )
        return [to_financial_entry(a) for a in rows]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(
            f"Failed to fetch financial data for barber {barber_id}: {e}"
        )
        return []
