# Service catalog endpoints (haircuts, beard trims, combos, add-ons)
from botocore.exceptions import BotoCoreError, ClientError
from flask import Blueprint, current_app, jsonify, request

from app.forms.service_form import ServiceForm
from app.models import SERVICE_CATEGORIES
from app.services import catalog_service
from app.services.storage_service import upload_service_image
from app.utils.auth_utils import token_required
from app.utils.s3_utils import S3ConfigError

services_bp = Blueprint("services", __name__, url_prefix="/api/services")


def _validation_error(form):
    return (
        jsonify(
            {"status": "error", "message": "Validation failed", "errors": form.errors}
        ),
        400,
    )


def _form_payload():
    """JSON body, or multipart form fields plus an optional 'image_file'."""
    if request.is_json:
        return request.get_json(silent=True) or {}, None

    payload = request.form.to_dict()
    if "is_popular" in payload:
        payload["is_popular"] = payload["is_popular"].lower() in ("true", "1", "on")
    return payload, request.files.get("image_file")


@services_bp.route("", methods=["GET"])
def list_services():
    """
    GET /api/services
    Purpose: Catalog ordered by name, each with a cache-busted image URL.
    ---
    tags:
      - Services
    responses:
      200:
        description: List of services
    """
    return jsonify(catalog_service.get_all_services())


@services_bp.route("/categories", methods=["GET"])
def list_categories():
    return jsonify(list(SERVICE_CATEGORIES))


@services_bp.route("/<int:service_id>", methods=["GET"])
def get_service(service_id):
    service = catalog_service.get_service_by_id(service_id)
    if not service:
        return jsonify({"error": "Service not found"}), 404
    return jsonify(service)


@services_bp.route("", methods=["POST"])
@token_required("MANAGER")
def create_service():
    """
    POST /api/services
    Purpose: Add a service. Accepts JSON or multipart with 'image_file'.
    """
    payload, image_file = _form_payload()
    form = ServiceForm()
    form.update(payload)
    if not form.is_valid():
        return _validation_error(form)

    if image_file:
        try:
            image_key, _ = upload_service_image(image_file)
        except S3ConfigError as e:
            return jsonify({"error": "Server configuration error", "details": str(e)}), 500
        except (BotoCoreError, ClientError) as e:
            current_app.logger.error(f"Failed to upload service image: {e}")
            return jsonify({"error": "File upload failed", "details": str(e)}), 500
        form.change("image_key", image_key)

    result = form.submit(catalog_service.create_service)
    if not result["success"]:
        return jsonify({"status": "error", "message": result["error"]}), 400
    return jsonify({"status": "success", "service": result["service"]}), 201


@services_bp.route("/<int:service_id>", methods=["PUT"])
@token_required("MANAGER")
def update_service(service_id):
    existing = catalog_service.get_service_by_id(service_id)
    if not existing:
        return jsonify({"error": "Service not found"}), 404

    payload, image_file = _form_payload()
    form = ServiceForm(existing)
    form.update(payload)
    if not form.is_valid():
        return _validation_error(form)

    if image_file:
        try:
            image_key, _ = upload_service_image(image_file)
        except S3ConfigError as e:
            return jsonify({"error": "Server configuration error", "details": str(e)}), 500
        except (BotoCoreError, ClientError) as e:
            current_app.logger.error(f"Failed to upload service image: {e}")
            return jsonify({"error": "File upload failed", "details": str(e)}), 500
        form.change("image_key", image_key)

    result = form.submit(
        lambda record: catalog_service.update_service(service_id, record)
    )
    if not result["success"]:
        return (
            jsonify({"status": "error", "message": result["error"]}),
            result.get("code", 400),
        )
    return jsonify({"status": "success", "service": result["service"]})


@services_bp.route("/<int:service_id>", methods=["DELETE"])
@token_required("MANAGER")
def delete_service(service_id):
    """
    DELETE /api/services/<service_id>
    Purpose: Remove the service and its stored image.
    """
    result = catalog_service.delete_service(service_id)
    if not result["success"]:
        return jsonify({"error": result["error"]}), result.get("code", 500)
    return jsonify({"status": "success", "message": "Service deleted"})
