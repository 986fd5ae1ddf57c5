from flask import Blueprint, request, jsonify, g
from sqlalchemy import select
from ..extensions import db
from ..models import AuthUser, Barber
from ..utils.auth_utils import create_access_token, token_required, verify_password

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/login", methods=["POST"])
def login_user():
    """
    POST /api/auth/login
    Purpose: Exchange email and password for a bearer token.
    ---
    tags:
      - Authentication
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      400:
        description: Missing email or password
      401:
        description: Invalid credentials
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not email or not password:
            return jsonify({
                "status": "error",
                "message": "Email and password required"
            }), 400

        user = db.session.scalar(select(AuthUser).where(AuthUser.email == email))
        if not user or not verify_password(password, user.password_hash):
            return jsonify({
                "status": "error",
                "message": "Invalid credentials"
            }), 401

        barber_id = None
        if user.role == "BARBER":
            barber = db.session.scalar(select(Barber).where(Barber.user_id == user.id))
            if not barber or not barber.active:
                return jsonify({
                    "status": "error",
                    "message": "Barber account is inactive"
                }), 403
            barber_id = barber.id

        token = create_access_token(user, barber_id=barber_id)

        return jsonify({
            "status": "success",
            "message": "Login successful",
            "token": token,
            "user": {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "barber_id": barber_id,
            }
        }), 200

    except Exception as e:
        return jsonify({
            "status": "error",
            "message": "Internal server error",
            "details": str(e)
        }), 500


@auth_bp.route("/me", methods=["GET"])
@token_required()
def current_user():
    """Claims of the token used for this request."""
    claims = g.current_user
    return jsonify({
        "id": claims.get("user_id"),
        "email": claims.get("email"),
        "role": claims.get("role"),
        "barber_id": claims.get("barber_id"),
    })
