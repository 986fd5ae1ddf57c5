from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from app.extensions import db
from app.models import APPOINTMENT_STATUSES, Appointment
from app.services.client_service import increment_client_visit
from app.utils.dates import normalize_time, parse_date
from app.utils.errors import BookingConflictError, StoreError
from app.utils.serializers import serialize_appointment

APPOINTMENT_FIELDS = (
    "client_id",
    "barber_id",
    "service_id",
    "status",
    "type",
    "duration",
    "price",
    "commission_amount",
    "notes",
    "walk_in_client_name",
)


def _with_details():
    return db.session.query(Appointment).options(
        joinedload(Appointment.client),
        joinedload(Appointment.barber),
        joinedload(Appointment.service),
    )


def _list(query, description):
    try:
        return [serialize_appointment(a, with_details=True) for a in query.all()]
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch {description}: {e}")
        return []


def get_all_appointments():
    query = _with_details().order_by(Appointment.date.desc(), Appointment.time.desc())
    return _list(query, "appointments")


def get_barber_appointments(barber_id):
    query = (
        _with_details()
        .filter(Appointment.barber_id == barber_id)
        .order_by(Appointment.date.desc(), Appointment.time.desc())
    )
    return _list(query, f"appointments for barber {barber_id}")


def get_todays_appointments(barber_id, today=None):
    query = (
        _with_details()
        .filter(
            Appointment.barber_id == barber_id,
            Appointment.date == (today or date.today()),
        )
        .order_by(Appointment.time)
    )
    return _list(query, f"today's appointments for barber {barber_id}")


def get_upcoming_barber_appointments(barber_id, limit=20, today=None):
    """Appointments from today onwards that are not cancelled, soonest first."""
    query = (
        _with_details()
        .filter(
            Appointment.barber_id == barber_id,
            Appointment.date >= (today or date.today()),
            Appointment.status != "cancelled",
        )
        .order_by(Appointment.date, Appointment.time)
        .limit(limit)
    )
    return _list(query, f"upcoming appointments for barber {barber_id}")


def get_appointment_by_id(appointment_id, with_details=False):
    try:
        appointment = db.session.get(Appointment, appointment_id)
        if not appointment:
            return None
        return serialize_appointment(appointment, with_details=with_details)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to fetch appointment {appointment_id}: {e}")
        return None


def _ensure_slot_free(barber_id, day, time, exclude_id=None):
    """One scheduled appointment per barber, date and start time."""
    query = db.session.query(Appointment.id).filter(
        Appointment.barber_id == barber_id,
        Appointment.date == day,
        Appointment.time == time,
        Appointment.status == "scheduled",
    )
    if exclude_id is not None:
        query = query.filter(Appointment.id != exclude_id)
    if query.first():
        raise BookingConflictError()


def _apply(appointment, record):
    for field in APPOINTMENT_FIELDS:
        if field in record:
            setattr(appointment, field, record[field])
    try:
        if "date" in record:
            appointment.date = parse_date(record["date"])
        if "time" in record:
            appointment.time = normalize_time(record["time"])
    except ValueError as e:
        raise StoreError(f"Invalid date or time: {e}")
    if appointment.status not in APPOINTMENT_STATUSES:
        raise StoreError(f"Invalid status '{appointment.status}'")
    appointment.updated_at = datetime.now()


def create_appointment(record):
    """
    Insert an appointment built by AppointmentForm or WalkInForm.
    Returns {"success": True, "appointment": {...}} or
    {"success": False, "error": <store message>, "conflict": bool}.
    """
    try:
        appointment = Appointment(status="scheduled", type="appointment")
        _apply(appointment, record)
        if appointment.status == "scheduled":
            _ensure_slot_free(appointment.barber_id, appointment.date, appointment.time)

        db.session.add(appointment)
        db.session.commit()
        current_app.logger.info(
            f"Appointment {appointment.id} booked for barber {appointment.barber_id}"
        )
        return {
            "success": True,
            "appointment": serialize_appointment(appointment, with_details=True),
        }
    except BookingConflictError as e:
        db.session.rollback()
        return {"success": False, "error": str(e), "conflict": True}
    except (StoreError, SQLAlchemyError) as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to create appointment: {e}")
        return {"success": False, "error": str(e), "conflict": False}


def update_appointment(appointment_id, record):
    try:
        appointment = db.session.get(Appointment, appointment_id)
        if not appointment:
            return {"success": False, "error": "Appointment not found", "code": 404}

        was_completed = appointment.status == "completed"
        _apply(appointment, record)
        if appointment.status == "scheduled":
            _ensure_slot_free(
                appointment.barber_id,
                appointment.date,
                appointment.time,
                exclude_id=appointment.id,
            )

        db.session.commit()
        if appointment.status == "completed" and not was_completed and appointment.client_id:
            increment_client_visit(appointment.client_id, appointment.date)
        return {
            "success": True,
            "appointment": serialize_appointment(appointment, with_details=True),
        }
    except BookingConflictError as e:
        db.session.rollback()
        return {"success": False, "error": str(e), "conflict": True}
    except (StoreError, SQLAlchemyError) as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to update appointment {appointment_id}: {e}")
        return {"success": False, "error": str(e), "conflict": False}


def update_appointment_status(appointment_id, status):
    if status not in APPOINTMENT_STATUSES:
        return {"success": False, "error": f"Invalid status '{status}'", "code": 400}

    try:
        appointment = db.session.get(Appointment, appointment_id)
        if not appointment:
            return {"success": False, "error": "Appointment not found", "code": 404}

        previous = appointment.status
        if status == "scheduled" and previous != "scheduled":
            _ensure_slot_free(
                appointment.barber_id,
                appointment.date,
                appointment.time,
                exclude_id=appointment.id,
            )

        appointment.status = status
        appointment.updated_at = datetime.now()
        db.session.commit()

        if status == "completed" and previous != "completed" and appointment.client_id:
            increment_client_visit(appointment.client_id, appointment.date)

        current_app.logger.info(
            f"Appointment {appointment_id} status {previous} -> {status}"
        )
        return {"success": True, "appointment": serialize_appointment(appointment)}
    except BookingConflictError as e:
        db.session.rollback()
        return {"success": False, "error": str(e), "code": 409}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(
            f"Failed to update status of appointment {appointment_id}: {e}"
        )
        return {"success": False, "error": str(e), "code": 500}


def delete_appointment(appointment_id):
    try:
        appointment = db.session.get(Appointment, appointment_id)
        if not appointment:
            return {"success": False, "error": "Appointment not found", "code": 404}

        db.session.delete(appointment)
        db.session.commit()
        return {"success": True}
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to delete appointment {appointment_id}: {e}")
        return {"success": False, "error": str(e), "code": 500}
