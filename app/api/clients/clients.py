from flask import Blueprint, jsonify, request

from app.forms.client_form import ClientForm
from app.services import client_service
from app.utils.auth_utils import token_required

clients_bp = Blueprint("clients", __name__, url_prefix="/api/clients")


@clients_bp.route("", methods=["GET"])
@token_required("MANAGER", "BARBER")
def list_clients():
    """
    GET /api/clients
    Purpose: Clients ordered by name; total_visits counts completed appointments.
    """
    return jsonify(client_service.get_all_clients())


@clients_bp.route("/<int:client_id>", methods=["GET"])
@token_required("MANAGER", "BARBER")
def get_client(client_id):
    client = client_service.get_client_by_id(client_id)
    if not client:
        return jsonify({"error": "Client not found"}), 404
    return jsonify(client)


@clients_bp.route("", methods=["POST"])
@token_required("MANAGER", "BARBER")
def create_client():
    payload = request.get_json(silent=True) or {}
    form = ClientForm()
    form.update(payload)
    result = form.submit(client_service.create_client)

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
        return jsonify({"status": "error", "message": result["error"]}), 400
    return jsonify({"status": "success", "client": result["client"]}), 201


@clients_bp.route("/<int:client_id>", methods=["PUT"])
@token_required("MANAGER", "BARBER")
def update_client(client_id):
    existing = client_service.get_client_by_id(client_id)
    if not existing:
        return jsonify({"error": "Client not found"}), 404

    payload = request.get_json(silent=True) or {}
    form = ClientForm(existing)
    form.update(payload)
    result = form.submit(
        lambda record: client_service.update_client(client_id, record)
    )

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
        return (
            jsonify({"status": "error", "message": result["error"]}),
            result.get("code", 400),
        )
    return jsonify({"status": "success", "client": result["client"]})


@clients_bp.route("/<int:client_id>", methods=["DELETE"])
@token_required("MANAGER")
def delete_client(client_id):
    result = client_service.delete_client(client_id)
    if not result["success"]:
        return jsonify({"error": result["error"]}), result.get("code", 500)
    return jsonify({"status": "success", "message": "Client deleted"})
