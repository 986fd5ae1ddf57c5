from functools import wraps
import datetime

import bcrypt
import jwt
from flask import current_app, g, jsonify, request


def hash_password(password: str) -> bytes:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())


def verify_password(password: str, stored_hash) -> bool:
    if not stored_hash:
        return False
    if isinstance(stored_hash, str):
        stored_hash = stored_hash.encode("utf-8")
    return bcrypt.checkpw(password.encode("utf-8"), stored_hash)


def create_access_token(user, barber_id=None) -> str:
    payload = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "barber_id": barber_id,
        "exp": datetime.datetime.now(datetime.timezone.utc)
        + datetime.timedelta(hours=current_app.config.get("JWT_EXPIRES_HOURS", 8)),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])


def token_required(*roles):
    """
    Require a valid bearer token. When roles are given, the token's role
    must be one of them. The decoded claims are stored on flask.g.current_user.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            if not header.startswith("Bearer "):
                return jsonify({"status": "error", "message": "Missing token"}), 401

            try:
                claims = decode_access_token(header.split(" ", 1)[1])
            except jwt.ExpiredSignatureError:
                return jsonify({"status": "error", "message": "Token expired"}), 401
            except jwt.InvalidTokenError:
                return jsonify({"status": "error", "message": "Invalid token"}), 401

            if roles and claims.get("role") not in roles:
                return jsonify({"status": "error", "message": "Forbidden"}), 403

            g.current_user = claims
            return view(*args, **kwargs)

        return wrapper

    return decorator
