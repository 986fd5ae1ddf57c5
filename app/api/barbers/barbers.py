from botocore.exceptions import BotoCoreError, ClientError
from flask import Blueprint, current_app, g, jsonify, request

from app.forms.barber_form import BarberForm
from app.services import barber_service
from app.services.storage_service import upload_barber_photo
from app.utils.auth_utils import token_required
from app.utils.dates import parse_date
from app.utils.s3_utils import S3ConfigError

barbers_bp = Blueprint("barbers", __name__, url_prefix="/api/barbers")


def _validation_error(form):
    return (
        jsonify(
            {"status": "error", "message": "Validation failed", "errors": form.errors}
        ),
        400,
    )


@barbers_bp.route("", methods=["GET"])
@token_required("MANAGER", "BARBER")
def list_barbers():
    """
    GET /api/barbers?active=true
    Purpose: Barber roster ordered by name; active=true hides deactivated barbers.
    """
    active_only = request.args.get("active", "false").lower() == "true"
    return jsonify(barber_service.get_all_barbers(active_only=active_only))


@barbers_bp.route("/landing", methods=["GET"])
def landing_barbers():
    """
    GET /api/barbers/landing?review_limit=3
    Purpose: Public list of active barbers with rating and latest approved reviews.
    """
    review_limit = request.args.get("review_limit", 3, type=int)
    return jsonify(barber_service.get_barbers_for_landing_page(review_limit))


@barbers_bp.route("/<int:barber_id>", methods=["GET"])
@token_required("MANAGER", "BARBER")
def get_barber(barber_id):
    barber = barber_service.get_barber_by_id(barber_id)
    if not barber:
        return jsonify({"error": "Barber not found"}), 404
    return jsonify(barber)


@barbers_bp.route("", methods=["POST"])
@token_required("MANAGER")
def create_barber():
    """
    POST /api/barbers
    Purpose: Add a barber and provision their login.

    Behavior:
    - name, email and password are required; confirm_password must match.
    - commission_rate must be between 0 and 100.
    """
    payload = request.get_json(silent=True) or {}
    form = BarberForm()
    form.update(payload)
    result = form.submit(barber_service.create_barber)

    if result is None:
        return _validation_error(form)
    if not result["success"]:
        return jsonify({"status": "error", "message": result["error"]}), 400
    return jsonify({"status": "success", "barber": result["barber"]}), 201


@barbers_bp.route("/<int:barber_id>", methods=["PUT"])
@token_required("MANAGER")
def update_barber(barber_id):
    existing = barber_service.get_barber_by_id(barber_id)
    if not existing:
        return jsonify({"error": "Barber not found"}), 404

    payload = request.get_json(silent=True) or {}
    form = BarberForm(existing)
    form.update(payload)
    result = form.submit(
        lambda record: barber_service.update_barber(barber_id, record)
    )

    if result is None:
        return _validation_error(form)
    if not result["success"]:
        return (
            jsonify({"status": "error", "message": result["error"]}),
            result.get("code", 400),
        )
    return jsonify({"status": "success", "barber": result["barber"]})


@barbers_bp.route("/<int:barber_id>", methods=["DELETE"])
@token_required("MANAGER")
def deactivate_barber(barber_id):
    """
    DELETE /api/barbers/<barber_id>
    Purpose: Soft delete; the barber is marked inactive and keeps their history.
    """
    result = barber_service.delete_barber(barber_id)
    if not result["success"]:
        return jsonify({"error": result["error"]}), result.get("code", 500)
    return jsonify({"status": "success", "message": "Barber deactivated"})


@barbers_bp.route("/<int:barber_id>/stats", methods=["GET"])
@token_required("MANAGER", "BARBER")
def barber_stats(barber_id):
    user = g.current_user
    if user.get("role") == "BARBER" and user.get("barber_id") != barber_id:
        return jsonify({"status": "error", "message": "Forbidden"}), 403

    stats = barber_service.get_barber_stats(barber_id)
    if stats is None:
        return jsonify({"error": "Barber not found"}), 404
    return jsonify(stats)


@barbers_bp.route("/<int:barber_id>/availability", methods=["GET"])
def barber_availability(barber_id):
    """
    GET /api/barbers/<barber_id>/availability?date=YYYY-MM-DD
    Purpose: Free half-hour slots for the day.
    """
    date_str = request.args.get("date")
    if not date_str:
        return (
            jsonify({"error": "Missing required query parameter: 'date' (YYYY-MM-DD)"}),
            400,
        )
    try:
        day = parse_date(date_str)
    except ValueError:
        return jsonify({"error": "Invalid 'date' format."}), 400

    return jsonify(
        {
            "barber_id": barber_id,
            "date": day.isoformat(),
            "available_times": barber_service.get_barber_availability(barber_id, day),
        }
    )


@barbers_bp.route("/photo", methods=["POST"])
@token_required("MANAGER")
def upload_photo():
    """
    POST /api/barbers/photo (multipart/form-data, field 'image_file')
    Purpose: Store a barber photo and return its public URL.
    """
    image_file = request.files.get("image_file")
    if not image_file:
        return jsonify({"error": "image_file is required"}), 400

    try:
        url = upload_barber_photo(image_file)
    except S3ConfigError as e:
        return jsonify({"error": "Server configuration error", "details": str(e)}), 500
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error(f"Failed to upload barber photo: {e}")
        return jsonify({"error": "File upload failed", "details": str(e)}), 500

    return jsonify({"message": "Image uploaded successfully", "url": url}), 201
