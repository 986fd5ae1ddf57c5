# Book, edit, cancel appointments and record walk-ins
from flask import Blueprint, g, jsonify, request

from app.forms.appointment_form import AppointmentForm, WalkInForm
from app.services import appointment_service
from app.services.barber_service import get_all_barbers
from app.services.catalog_service import get_all_services
from app.utils.auth_utils import token_required
from app.utils.dates import time_slots
from app.utils.errors import rephrase_store_error

appointments_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")


def _is_other_barber(barber_id):
    user = g.current_user
    return user.get("role") == "BARBER" and user.get("barber_id") != barber_id


def _save_response(form, result, success_status):
    if result is None:
        return (
            jsonify(
                {
                    "status": "error",
                    "message": "Validation failed",
                    "errors": form.errors,
                }
            ),
            400,
        )

    if not result["success"]:
        if result.get("code") == 404:
            return jsonify({"error": result["error"]}), 404
        status_code = 409 if result.get("conflict") else 400
        return (
            jsonify(
                {"status": "error", "message": rephrase_store_error(result["error"])}
            ),
            status_code,
        )

    return (
        jsonify(
            {
                "status": "success",
                "appointment": result["appointment"],
                "form_state": form.state.value,
            }
        ),
        success_status,
    )


@appointments_bp.route("", methods=["GET"])
@token_required("MANAGER", "BARBER")
def list_appointments():
    """
    GET /api/appointments
    Purpose: All appointments, newest date and time first.

    Behavior:
    - Managers see every appointment.
    - Barbers only see their own.
    """
    user = g.current_user
    if user.get("role") == "BARBER":
        return jsonify(appointment_service.get_barber_appointments(user.get("barber_id")))
    return jsonify(appointment_service.get_all_appointments())


@appointments_bp.route("/time-slots", methods=["GET"])
def list_time_slots():
    """
    GET /api/appointments/time-slots
    Purpose: The bookable half-hour grid, 10:00 to 22:00.
    """
    return jsonify(time_slots())


@appointments_bp.route("", methods=["POST"])
@token_required("MANAGER", "BARBER")
def create_appointment():
    """
    POST /api/appointments
    Purpose: Book an appointment (or a walk-in with type="walk-in").

    Behavior:
    - Price and duration follow the selected service; commission is
      recomputed from the barber's rate.
    - Missing client, barber, service, date or time → 400 with per-field errors.
    - Barber already booked for that date and time → 409.
    """
    payload = request.get_json(silent=True) or {}

    form = AppointmentForm(
        get_all_barbers(active_only=True), get_all_services()
    )
    form.update(payload)
    result = form.submit(appointment_service.create_appointment)
    return _save_response(form, result, 201)


@appointments_bp.route("/walk-ins", methods=["POST"])
@token_required("MANAGER", "BARBER")
def create_walk_in():
    """
    POST /api/appointments/walk-ins
    Purpose: Record a walk-in for an active barber, timed now unless given.
    A barber recording a walk-in is the default barber for it.
    """
    payload = request.get_json(silent=True) or {}
    if g.current_user.get("role") == "BARBER":
        payload.setdefault("barber_id", g.current_user.get("barber_id"))

    form = WalkInForm(get_all_barbers(active_only=True), get_all_services())
    form.update(payload)
    result = form.submit(appointment_service.create_appointment)
    return _save_response(form, result, 201)


@appointments_bp.route("/<int:appointment_id>", methods=["GET"])
@token_required("MANAGER", "BARBER")
def get_appointment(appointment_id):
    appointment = appointment_service.get_appointment_by_id(
        appointment_id, with_details=True
    )
    if not appointment:
        return jsonify({"error": "Appointment not found"}), 404
    if _is_other_barber(appointment["barber_id"]):
        return jsonify({"status": "error", "message": "Forbidden"}), 403
    return jsonify(appointment)


@appointments_bp.route("/<int:appointment_id>", methods=["PUT"])
@token_required("MANAGER", "BARBER")
def update_appointment(appointment_id):
    """
    PUT /api/appointments/<appointment_id>
    Purpose: Edit an appointment. Same rules as booking; the id is kept.
    """
    existing = appointment_service.get_appointment_by_id(appointment_id)
    if not existing:
        return jsonify({"error": "Appointment not found"}), 404
    if _is_other_barber(existing["barber_id"]):
        return jsonify({"status": "error", "message": "Forbidden"}), 403

    payload = request.get_json(silent=True) or {}
    form = AppointmentForm(get_all_barbers(), get_all_services(), appointment=existing)
    form.update(payload)
    result = form.submit(
        lambda record: appointment_service.update_appointment(appointment_id, record)
    )
    return _save_response(form, result, 200)


@appointments_bp.route("/<int:appointment_id>/status", methods=["PATCH"])
@token_required("MANAGER", "BARBER")
def update_status(appointment_id):
    """
    PATCH /api/appointments/<appointment_id>/status
    Purpose: Move an appointment to scheduled, completed, cancelled or no-show.
    """
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        return jsonify({"status": "error", "message": "status is required"}), 400

    existing = appointment_service.get_appointment_by_id(appointment_id)
    if not existing:
        return jsonify({"error": "Appointment not found"}), 404
    if _is_other_barber(existing["barber_id"]):
        return jsonify({"status": "error", "message": "Forbidden"}), 403

    result = appointment_service.update_appointment_status(appointment_id, status)
    if not result["success"]:
        message = result["error"]
        if result.get("code") == 409:
            message = rephrase_store_error(message)
        return jsonify({"status": "error", "message": message}), result.get("code", 500)

    return jsonify({"status": "success", "appointment": result["appointment"]})


@appointments_bp.route("/<int:appointment_id>", methods=["DELETE"])
@token_required("MANAGER")
def delete_appointment(appointment_id):
    result = appointment_service.delete_appointment(appointment_id)
    if not result["success"]:
        return jsonify({"error": result["error"]}), result.get("code", 500)
    return jsonify({"status": "success", "message": "Appointment deleted"})


@appointments_bp.route("/barber/<int:barber_id>", methods=["GET"])
@token_required("MANAGER", "BARBER")
def list_barber_appointments(barber_id):
    """
    GET /api/appointments/barber/<barber_id>?scope=all|today|upcoming
    Purpose: One barber's schedule.

    Behavior:
    - today → today's appointments by time.
    - upcoming → from today on, excluding cancelled, at most 20.
    - all (default) → everything, newest first.
    """
    if _is_other_barber(barber_id):
        return jsonify({"status": "error", "message": "Forbidden"}), 403

    scope = request.args.get("scope", "all")
    if scope == "today":
        return jsonify(appointment_service.get_todays_appointments(barber_id))
    if scope == "upcoming":
        limit = request.args.get("limit", 20, type=int)
        return jsonify(
            appointment_service.get_upcoming_barber_appointments(barber_id, limit=limit)
        )
    if scope != "all":
        return jsonify({"status": "error", "message": f"Unknown scope '{scope}'"}), 400
    return jsonify(appointment_service.get_barber_appointments(barber_id))
